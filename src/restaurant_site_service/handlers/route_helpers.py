"""Helpers shared by the HTTP route modules."""

import re
from typing import Any

from fastapi import HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from restaurant_site_service.models.listing_models import ListingQuery, StatusFilter
from restaurant_site_service.services.pagination import parse_positive_int

RECORD_ID_PATTERN = re.compile(r"^[a-f0-9]{32}$")


def ensure_record_id(record_id: str, label: str) -> None:
    """Reject path ids that cannot belong to a stored record.

    Args:
        record_id: Id from the URL path
        label: Human-readable record kind for the error message

    Raises:
        HTTPException: 400 if the id is malformed
    """
    if not RECORD_ID_PATTERN.match(record_id):
        raise HTTPException(status_code=400, detail=f"Invalid {label} id.")


def parse_status_filter(raw: str | None) -> StatusFilter:
    """Parse the status query parameter; unknown values mean "all"."""
    if raw is None:
        return StatusFilter.ALL
    try:
        return StatusFilter(raw.strip().lower())
    except ValueError:
        return StatusFilter.ALL


def build_listing_query(
    page: str | None,
    page_size: str | None,
    status: str | None = None,
    search: str | None = None,
) -> ListingQuery:
    """Turn raw listing query parameters into a ListingQuery.

    Unusable page and page size values are dropped rather than rejected so
    the projector applies its defaults.
    """
    return ListingQuery(
        page=parse_positive_int(page),
        page_size=parse_positive_int(page_size),
        status_filter=parse_status_filter(status),
        search_term=search,
    )


def to_json(model: BaseModel) -> dict[str, Any]:
    """Serialize a model to its camelCase JSON form."""
    return model.model_dump(mode="json", by_alias=True)


def data_response(data: Any, status_code: int = 200) -> JSONResponse:
    """Wrap a payload in the ``{"data": ...}`` envelope."""
    return JSONResponse(status_code=status_code, content={"data": data})
