"""Menu category endpoints used by the admin menu forms."""

from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse

from restaurant_site_service.handlers.route_helpers import data_response, to_json
from restaurant_site_service.models.category_models import MenuCategory, MenuCategoryCreate


def register_category_routes(app: FastAPI, require_admin: Callable[..., Any]) -> None:
    """Register category routes on the application."""

    @app.get("/api/category", tags=["Menu"])
    async def list_categories() -> JSONResponse:
        """Categories ordered by their display position."""
        categories = app.state.services.category_repository.list_all()
        return data_response([to_json(c) for c in categories])

    @app.post("/api/category", tags=["Menu"])
    async def create_category(
        payload: MenuCategoryCreate,
        _session: Any = Depends(require_admin),
    ) -> JSONResponse:
        now = datetime.now(UTC)
        category = MenuCategory(id=uuid4().hex, created_at=now, updated_at=now, **payload.model_dump())

        created = app.state.services.category_repository.create(category)
        return data_response(to_json(created), status_code=201)
