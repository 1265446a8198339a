"""Menu endpoints: public menu, admin table, CRUD and image upload."""

import logging
from collections.abc import Callable
from typing import Annotated, Any

from fastapi import Depends, FastAPI, File, HTTPException, Query, UploadFile
from fastapi.responses import JSONResponse
from pydantic import BaseModel, StringConstraints

from restaurant_site_service.handlers.route_helpers import (
    build_listing_query,
    data_response,
    ensure_record_id,
    to_json,
)
from restaurant_site_service.models.catalog_models import MenuItemCreate, MenuItemUpdate

logger = logging.getLogger(__name__)

MENU_LABEL = "menu item"
MENU_UPLOAD_PREFIX = "menu"


class ObjectKeyPayload(BaseModel):
    """Body of an image delete request."""

    key: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


def register_menu_routes(app: FastAPI, require_admin: Callable[..., Any]) -> None:
    """Register menu routes on the application.

    Args:
        app: FastAPI application whose state holds the site services
        require_admin: Dependency rejecting non-admin callers
    """

    @app.get("/api/menu/public", tags=["Menu"])
    async def list_public_menu() -> JSONResponse:
        """Visible menu items by category then name, with a sample menu when empty."""
        listing = await app.state.services.public_menu.project(build_listing_query(None, None))
        return JSONResponse(content=listing.to_json())

    @app.get("/api/menu", tags=["Menu"])
    async def list_menu(
        page: str | None = Query(None),
        page_size: str | None = Query(None, alias="pageSize"),
        status: str | None = Query(None),
        search: str | None = Query(None),
        _session: Any = Depends(require_admin),
    ) -> JSONResponse:
        """Admin menu table, most recently updated first.

        Without pageSize every matching item is returned on one page.
        """
        query = build_listing_query(page, page_size, status=status, search=search)
        listing = await app.state.services.admin_menu.project(query)
        return JSONResponse(content=listing.to_json())

    @app.post("/api/menu", tags=["Menu"])
    async def create_menu_item(
        payload: MenuItemCreate,
        _session: Any = Depends(require_admin),
    ) -> JSONResponse:
        created = await app.state.services.menu_service.create(payload)
        return data_response(to_json(created), status_code=201)

    @app.post("/api/menu/upload", tags=["Menu"])
    async def upload_menu_image(
        file: UploadFile | None = File(None),
        _session: Any = Depends(require_admin),
    ) -> JSONResponse:
        """Store an image and return its key and public URL."""
        if file is None:
            raise HTTPException(status_code=400, detail="File is required.")

        body = await file.read()
        stored = app.state.services.storage.upload(
            MENU_UPLOAD_PREFIX, file.filename or "", body, file.content_type
        )
        return JSONResponse(content={"key": stored.key, "url": stored.url})

    @app.delete("/api/menu/upload", tags=["Menu"])
    async def delete_menu_image(
        payload: ObjectKeyPayload,
        _session: Any = Depends(require_admin),
    ) -> JSONResponse:
        """Delete a stored image by key, e.g. one uploaded for a form that was abandoned."""
        app.state.services.storage.delete(payload.key)
        return JSONResponse(content={"success": True})

    @app.get("/api/menu/{item_id}", tags=["Menu"])
    async def get_menu_item(item_id: str, _session: Any = Depends(require_admin)) -> JSONResponse:
        ensure_record_id(item_id, MENU_LABEL)

        item = await app.state.services.menu_service.get(item_id)
        if item is None:
            raise HTTPException(status_code=404, detail="Menu item not found.")

        return data_response(to_json(item))

    @app.patch("/api/menu/{item_id}", tags=["Menu"])
    async def update_menu_item(
        item_id: str,
        payload: MenuItemUpdate,
        _session: Any = Depends(require_admin),
    ) -> JSONResponse:
        ensure_record_id(item_id, MENU_LABEL)

        updated = await app.state.services.menu_service.update(item_id, payload)
        if updated is None:
            raise HTTPException(status_code=404, detail="Menu item not found.")

        return data_response(to_json(updated))

    @app.delete("/api/menu/{item_id}", tags=["Menu"])
    async def delete_menu_item(item_id: str, _session: Any = Depends(require_admin)) -> JSONResponse:
        ensure_record_id(item_id, MENU_LABEL)

        if not await app.state.services.menu_service.delete(item_id):
            raise HTTPException(status_code=404, detail="Menu item not found.")

        return JSONResponse(content={"success": True})
