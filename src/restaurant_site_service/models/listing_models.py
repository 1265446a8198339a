"""Listing query and result models.

These models describe how a caller asks for a page of catalog records and
what the listing projector hands back: the page itself plus summary metadata
computed over the full matching set.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

RecordT = TypeVar("RecordT")

PaginationRangeItem = int | str

UNCATEGORISED_LABEL = "Uncategorised"


def normalize_category_label(label: str | None) -> str:
    """Trim a category label, mapping blank labels to the uncategorised bucket."""
    trimmed = (label or "").strip()
    return trimmed or UNCATEGORISED_LABEL


class Visibility(str, Enum):
    """Visibility precondition applied before any other filtering."""

    ANY = "any"
    VISIBLE = "visible"
    HIDDEN = "hidden"


class StatusFilter(str, Enum):
    """Status filter offered by the menu admin table."""

    ALL = "all"
    VISIBLE = "visible"
    HIDDEN = "hidden"

    def to_visibility(self) -> Visibility:
        """Map the admin-facing filter onto a record visibility precondition."""
        if self is StatusFilter.VISIBLE:
            return Visibility.VISIBLE
        if self is StatusFilter.HIDDEN:
            return Visibility.HIDDEN
        return Visibility.ANY


class ListingOrder(str, Enum):
    """Sort keys a listing can be ordered by."""

    NEWEST_CREATED = "newest_created"
    RECENTLY_UPDATED = "recently_updated"
    CATEGORY_THEN_NAME = "category_then_name"


class ListingOrigin(str, Enum):
    """Where the items of a listing page came from."""

    RECORDS = "records"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class RecordFilter:
    """Filter applied to a record collection.

    Attributes:
        visibility: Visibility precondition (records without a flag count as visible)
        search_term: Optional case-insensitive substring matched against searchable fields
    """

    visibility: Visibility = Visibility.ANY
    search_term: str | None = None

    @property
    def normalized_search(self) -> str | None:
        """Lower-cased, trimmed search term, or None when blank."""
        if self.search_term is None:
            return None
        term = self.search_term.strip().lower()
        return term or None


@dataclass(frozen=True)
class ListingQuery:
    """Raw pagination and filter parameters for one listing request.

    page and page_size are the already-parsed request values; None means the
    caller did not supply (or supplied an unusable) value.
    """

    page: int | None = None
    page_size: int | None = None
    status_filter: StatusFilter = StatusFilter.ALL
    search_term: str | None = None


@dataclass(frozen=True)
class ListingSummary:
    """Result of the summary read: matching count and newest creation time."""

    total: int
    latest_created_at: datetime | None = None


class ListingMeta(BaseModel):
    """Summary metadata for a listing page."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    page: int = Field(..., description="Clamped current page", ge=1)
    page_size: int = Field(..., description="Page size actually used", ge=1)
    total_items: int = Field(..., description="Number of matching records", ge=0)
    total_pages: int = Field(..., description="Number of pages, at least 1", ge=1)
    total_categories: int = Field(..., description="Distinct category count", ge=0)
    category_counts: dict[str, int] = Field(default_factory=dict)
    latest_created_at: datetime | None = Field(None, description="Newest creation timestamp")
    pagination_range: list[PaginationRangeItem] = Field(default_factory=list)
    source: ListingOrigin = Field(default=ListingOrigin.RECORDS)


class ListingPage(BaseModel, Generic[RecordT]):
    """A page of records plus its metadata."""

    data: list[RecordT]
    meta: ListingMeta

    def to_json(self) -> dict[str, Any]:
        """Render the page as the camelCase JSON body returned by listing endpoints."""
        return {
            "data": [record.model_dump(mode="json", by_alias=True) for record in self.data],  # type: ignore[attr-defined]
            "meta": self.meta.model_dump(mode="json", by_alias=True),
        }
