"""Admin dashboard preference endpoints."""

from collections.abc import Callable
from typing import Any

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse

from restaurant_site_service.auth.session_validator import AdminSession
from restaurant_site_service.handlers.route_helpers import data_response, to_json
from restaurant_site_service.models.preference_models import AdminPreferences


def register_admin_routes(app: FastAPI, require_admin: Callable[..., Any]) -> None:
    """Register preference routes on the application."""

    @app.get("/api/admin/preferences", tags=["Admin"])
    async def get_preferences(session: AdminSession = Depends(require_admin)) -> JSONResponse:
        preferences = app.state.services.preference_repository.get(session.email)
        return data_response(to_json(preferences))

    @app.put("/api/admin/preferences", tags=["Admin"])
    async def save_preferences(
        payload: AdminPreferences,
        session: AdminSession = Depends(require_admin),
    ) -> JSONResponse:
        saved = app.state.services.preference_repository.save(session.email, payload)
        return data_response(to_json(saved))
