"""FastAPI application for the restaurant site API."""

import logging

from fastapi import Cookie, FastAPI, Header, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException

from restaurant_site_service.auth.api_dependencies import SESSION_COOKIE_NAME, get_admin_session
from restaurant_site_service.auth.session_validator import AdminSession
from restaurant_site_service.bootstrap import SiteServices
from restaurant_site_service.handlers.admin_routes import register_admin_routes
from restaurant_site_service.handlers.booking_routes import register_booking_routes
from restaurant_site_service.handlers.category_routes import register_category_routes
from restaurant_site_service.handlers.gallery_routes import register_gallery_routes
from restaurant_site_service.handlers.menu_routes import register_menu_routes
from restaurant_site_service.repositories.catalog_repositories import RepositoryError
from restaurant_site_service.services.storage_client import StorageError

logger = logging.getLogger(__name__)

INVALID_PAYLOAD_MESSAGE = "Invalid request payload."


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str


def create_app(services: SiteServices) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        services: Repositories and services built by the bootstrap

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title="Restaurant Site API",
        description="Public menu, gallery, reservation and contact endpoints plus the admin API",
        version="1.0.0",
    )

    app.state.services = services

    @app.exception_handler(HTTPException)
    async def http_error(_request: Request, exc: HTTPException) -> JSONResponse:
        """Render every HTTP error, including unknown routes and methods, as {"error": ...}."""
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def validation_error(_request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content={"error": INVALID_PAYLOAD_MESSAGE, "details": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(RepositoryError)
    @app.exception_handler(StorageError)
    async def backend_error(request: Request, exc: Exception) -> JSONResponse:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
        return JSONResponse(status_code=500, content={"error": f"{exc}. Please try again."})

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check() -> HealthResponse:
        """Health check endpoint.

        Returns:
            Health status indicating service is running
        """
        return HealthResponse(status="healthy")

    def require_admin(
        authorization: str | None = Header(None),
        session_token: str | None = Cookie(None, alias=SESSION_COOKIE_NAME),
    ) -> AdminSession:
        """Dependency resolving the admin session from header or cookie."""
        return get_admin_session(authorization, session_token, app.state.services.session_validator)

    register_gallery_routes(app, require_admin)
    register_menu_routes(app, require_admin)
    register_category_routes(app, require_admin)
    register_booking_routes(app, require_admin)
    register_admin_routes(app, require_admin)

    return app
