"""Listing projector: paginated, filtered and aggregated views over catalog records.

The projector turns a ListingSource plus raw query parameters into one page
of records and summary metadata computed over the full matching set. Every
call recomputes from the source; nothing is cached between calls.

Each projection issues three reads against the source: a summary (count and
newest creation time), a page fetch (skipped when nothing matches) and a
category aggregation. The reads are not transactional, so a concurrent write
may make the page and the totals disagree slightly.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from restaurant_site_service.models.catalog_models import CatalogRecord
from restaurant_site_service.models.listing_models import (
    ListingMeta,
    ListingOrder,
    ListingOrigin,
    ListingPage,
    ListingQuery,
    RecordFilter,
    Visibility,
)
from restaurant_site_service.observability import traced
from restaurant_site_service.observability.metrics import record_listing_request
from restaurant_site_service.repositories.listing_sources import ListingSource, StaticListingSource
from restaurant_site_service.services.category_aggregation import (
    CategoryAggregator,
    ScanAggregator,
    aggregate_category_counts,
)
from restaurant_site_service.services.fallback_data import (
    FALLBACK_GALLERY_ITEMS,
    FALLBACK_MENU_ITEMS,
)
from restaurant_site_service.services.pagination import (
    build_pagination_range,
    clamp_page,
    clamp_page_size,
    count_pages,
)

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=CatalogRecord)


@dataclass(frozen=True)
class ListingProfile:
    """Per-surface listing behaviour.

    Attributes:
        name: Listing name used in logs and metrics
        order: Sort order of the listing
        default_page_size: Page size when none is requested; None lists everything
        visibility: Fixed visibility precondition (public surfaces show visible only)
        accepts_status_filter: Whether the caller's status filter is honoured
        accepts_search: Whether the caller's search term is honoured
        fallback_records: Placeholder records served when nothing is persisted
    """

    name: str
    order: ListingOrder
    default_page_size: int | None
    visibility: Visibility = Visibility.ANY
    accepts_status_filter: bool = False
    accepts_search: bool = False
    fallback_records: tuple[Any, ...] = field(default=(), repr=False)

    def build_filter(self, query: ListingQuery) -> RecordFilter:
        """Derive the record filter for a query under this profile."""
        visibility = self.visibility
        if visibility is Visibility.ANY and self.accepts_status_filter:
            visibility = query.status_filter.to_visibility()

        search_term = query.search_term if self.accepts_search else None
        return RecordFilter(visibility=visibility, search_term=search_term)


ADMIN_GALLERY = ListingProfile(
    name="admin_gallery",
    order=ListingOrder.NEWEST_CREATED,
    default_page_size=10,
)

PUBLIC_GALLERY = ListingProfile(
    name="public_gallery",
    order=ListingOrder.NEWEST_CREATED,
    default_page_size=12,
    visibility=Visibility.VISIBLE,
    fallback_records=FALLBACK_GALLERY_ITEMS,
)

ADMIN_MENU = ListingProfile(
    name="admin_menu",
    order=ListingOrder.RECENTLY_UPDATED,
    default_page_size=None,
    accepts_status_filter=True,
    accepts_search=True,
)

PUBLIC_MENU = ListingProfile(
    name="public_menu",
    order=ListingOrder.CATEGORY_THEN_NAME,
    default_page_size=None,
    visibility=Visibility.VISIBLE,
    fallback_records=FALLBACK_MENU_ITEMS,
)


class ListingProjector(Generic[RecordT]):
    """Projects one listing profile over a record source."""

    def __init__(
        self,
        profile: ListingProfile,
        source: ListingSource[RecordT],
        category_aggregator: CategoryAggregator | None = None,
    ) -> None:
        """Initialize the projector.

        Args:
            profile: Listing behaviour (order, defaults, fallback dataset)
            source: Persisted record source
            category_aggregator: Preferred category aggregation strategy; the
                scan strategy over the same source is used when it is absent,
                unsuitable or failing
        """
        self.profile = profile
        self.source = source
        self.category_aggregator = category_aggregator
        self.fallback_source = (
            StaticListingSource(profile.fallback_records) if profile.fallback_records else None
        )

    def resolve_page_size(self, requested: int | None, total: int) -> int:
        """Page size actually used for a request.

        An explicit request is clamped into [1, 50]. Without one the profile
        default applies; a profile without a default lists every match on a
        single page.
        """
        if requested is None and self.profile.default_page_size is None:
            return max(total, 1)
        return clamp_page_size(requested, self.profile.default_page_size or 1)

    @traced("project_listing")
    async def project(self, query: ListingQuery) -> ListingPage[RecordT]:
        """Build one page of the listing plus its metadata.

        Args:
            query: Parsed page, page size, status filter and search term

        Returns:
            ListingPage with the page items and summary metadata
        """
        started = time.perf_counter()
        record_filter = self.profile.build_filter(query)

        source: ListingSource[Any] = self.source
        primary_aggregator = self.category_aggregator
        origin = ListingOrigin.RECORDS

        summary = source.summarize(record_filter)

        if summary.total == 0 and self.fallback_source is not None:
            logger.info(f"No persisted records for {self.profile.name}, serving fallback dataset")
            source = self.fallback_source
            primary_aggregator = None
            origin = ListingOrigin.FALLBACK
            summary = source.summarize(record_filter)

        page_size = self.resolve_page_size(query.page_size, summary.total)
        total_pages = count_pages(summary.total, page_size)
        page = clamp_page(query.page, total_pages)

        items: list[Any] = []
        if summary.total > 0:
            skip = (page - 1) * page_size
            items = source.find_many(record_filter, self.profile.order, skip, page_size)

        category_counts = aggregate_category_counts(
            record_filter,
            primary_aggregator,
            ScanAggregator(source),
            listing=self.profile.name,
            expected_total=summary.total,
        )

        meta = ListingMeta(
            page=page,
            page_size=page_size,
            total_items=summary.total,
            total_pages=total_pages,
            total_categories=len(category_counts),
            category_counts=category_counts,
            latest_created_at=summary.latest_created_at,
            pagination_range=build_pagination_range(page, total_pages),
            source=origin,
        )

        record_listing_request(self.profile.name, origin.value, time.perf_counter() - started)

        return ListingPage(data=items, meta=meta)
