"""Gallery endpoints: public gallery, admin listing, CRUD and image upload."""

import logging
from collections.abc import Callable
from typing import Any

from fastapi import Depends, FastAPI, File, HTTPException, Query, UploadFile
from fastapi.responses import JSONResponse

from restaurant_site_service.handlers.route_helpers import (
    build_listing_query,
    data_response,
    ensure_record_id,
    to_json,
)
from restaurant_site_service.models.catalog_models import GalleryItemCreate, GalleryItemUpdate

logger = logging.getLogger(__name__)

GALLERY_LABEL = "gallery item"
GALLERY_UPLOAD_PREFIX = "gallery"


def register_gallery_routes(app: FastAPI, require_admin: Callable[..., Any]) -> None:
    """Register gallery routes on the application.

    Args:
        app: FastAPI application whose state holds the site services
        require_admin: Dependency rejecting non-admin callers
    """

    @app.get("/api/gallery/public", tags=["Gallery"])
    async def list_public_gallery(
        page: str | None = Query(None),
        page_size: str | None = Query(None, alias="pageSize"),
    ) -> JSONResponse:
        """Visible gallery images, newest first, with placeholder images when empty."""
        listing = await app.state.services.public_gallery.project(build_listing_query(page, page_size))
        return JSONResponse(content=listing.to_json())

    @app.get("/api/gallery", tags=["Gallery"])
    async def list_gallery(
        page: str | None = Query(None),
        page_size: str | None = Query(None, alias="pageSize"),
        _session: Any = Depends(require_admin),
    ) -> JSONResponse:
        """All gallery images for the admin dashboard, 10 per page by default."""
        listing = await app.state.services.admin_gallery.project(build_listing_query(page, page_size))
        return JSONResponse(content=listing.to_json())

    @app.post("/api/gallery", tags=["Gallery"])
    async def create_gallery_item(
        payload: GalleryItemCreate,
        _session: Any = Depends(require_admin),
    ) -> JSONResponse:
        created = await app.state.services.gallery_service.create(payload)
        return data_response(to_json(created), status_code=201)

    @app.post("/api/gallery/upload", tags=["Gallery"])
    async def upload_gallery_image(
        file: UploadFile | None = File(None),
        _session: Any = Depends(require_admin),
    ) -> JSONResponse:
        """Store an image and return its key and public URL."""
        if file is None:
            raise HTTPException(status_code=400, detail="File is required.")

        body = await file.read()
        stored = app.state.services.storage.upload(
            GALLERY_UPLOAD_PREFIX, file.filename or "", body, file.content_type
        )
        return JSONResponse(content={"key": stored.key, "url": stored.url})

    @app.get("/api/gallery/{item_id}", tags=["Gallery"])
    async def get_gallery_item(item_id: str, _session: Any = Depends(require_admin)) -> JSONResponse:
        ensure_record_id(item_id, GALLERY_LABEL)

        item = await app.state.services.gallery_service.get(item_id)
        if item is None:
            raise HTTPException(status_code=404, detail="Gallery item not found.")

        return data_response(to_json(item))

    @app.patch("/api/gallery/{item_id}", tags=["Gallery"])
    async def update_gallery_item(
        item_id: str,
        payload: GalleryItemUpdate,
        _session: Any = Depends(require_admin),
    ) -> JSONResponse:
        ensure_record_id(item_id, GALLERY_LABEL)

        updated = await app.state.services.gallery_service.update(item_id, payload)
        if updated is None:
            raise HTTPException(status_code=404, detail="Gallery item not found.")

        return data_response(to_json(updated))

    @app.delete("/api/gallery/{item_id}", tags=["Gallery"])
    async def delete_gallery_item(item_id: str, _session: Any = Depends(require_admin)) -> JSONResponse:
        """Delete an image record; its stored file is removed best-effort."""
        ensure_record_id(item_id, GALLERY_LABEL)

        if not await app.state.services.gallery_service.delete(item_id):
            raise HTTPException(status_code=404, detail="Gallery item not found.")

        return JSONResponse(content={"success": True})
