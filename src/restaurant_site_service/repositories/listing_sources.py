"""Read interface shared by every collection the listing projector can project.

Both the DynamoDB catalog repositories and the compiled-in fallback datasets
implement ListingSource, so the projector never needs to know which one it is
reading from.
"""

from collections.abc import Callable, Iterable, Sequence
from typing import Any, Protocol, TypeVar

from restaurant_site_service.models.catalog_models import CatalogRecord
from restaurant_site_service.models.listing_models import (
    ListingOrder,
    ListingSummary,
    RecordFilter,
    Visibility,
)

RecordT = TypeVar("RecordT", bound=CatalogRecord)


class ListingSource(Protocol[RecordT]):
    """Read operations the listing projector needs from a record collection."""

    def summarize(self, record_filter: RecordFilter) -> ListingSummary:
        """Count matching records and find the newest creation timestamp."""
        ...

    def find_many(
        self, record_filter: RecordFilter, order: ListingOrder, skip: int, take: int
    ) -> list[RecordT]:
        """Fetch one window of matching records in the given order."""
        ...

    def list_category_labels(self, record_filter: RecordFilter) -> list[str]:
        """Return the raw category label of every matching record."""
        ...


def matches_filter(record: CatalogRecord, record_filter: RecordFilter) -> bool:
    """Check a record against the visibility precondition and search term.

    Args:
        record: Record to test
        record_filter: Filter to apply

    Returns:
        True if the record belongs to the filtered set
    """
    if record_filter.visibility is Visibility.VISIBLE and record.visible is False:
        return False
    if record_filter.visibility is Visibility.HIDDEN and record.visible is not False:
        return False

    term = record_filter.normalized_search
    if term is not None and not record.matches_search(term):
        return False

    return True


def _sort_key(order: ListingOrder) -> tuple[Callable[[CatalogRecord], Any], bool]:
    if order is ListingOrder.NEWEST_CREATED:
        return (lambda record: (record.created_at, record.id)), True
    if order is ListingOrder.RECENTLY_UPDATED:
        return (lambda record: (record.updated_at, record.id)), True
    return (lambda record: (record.category, record.sort_name, record.id)), False


def sort_records(records: Iterable[RecordT], order: ListingOrder) -> list[RecordT]:
    """Sort records by a listing order, breaking ties on id.

    Args:
        records: Records to sort
        order: Listing order

    Returns:
        A new sorted list
    """
    key, reverse = _sort_key(order)
    return sorted(records, key=key, reverse=reverse)


def summarize_records(records: Iterable[CatalogRecord]) -> ListingSummary:
    """Build a ListingSummary from already-filtered records."""
    total = 0
    latest = None
    for record in records:
        total += 1
        if latest is None or record.created_at > latest:
            latest = record.created_at
    return ListingSummary(total=total, latest_created_at=latest)


class StaticListingSource:
    """ListingSource over an in-memory, read-only sequence of records.

    Used for the compiled-in fallback datasets shown when a public listing
    has no persisted records.
    """

    def __init__(self, records: Sequence[RecordT]) -> None:
        """Initialize the source.

        Args:
            records: Records to serve (never mutated)
        """
        self.records = tuple(records)

    def _matching(self, record_filter: RecordFilter) -> list[CatalogRecord]:
        return [record for record in self.records if matches_filter(record, record_filter)]

    def summarize(self, record_filter: RecordFilter) -> ListingSummary:
        return summarize_records(self._matching(record_filter))

    def find_many(
        self, record_filter: RecordFilter, order: ListingOrder, skip: int, take: int
    ) -> list[Any]:
        ordered = sort_records(self._matching(record_filter), order)
        return ordered[skip : skip + take]

    def list_category_labels(self, record_filter: RecordFilter) -> list[str]:
        return [record.category for record in self._matching(record_filter)]
