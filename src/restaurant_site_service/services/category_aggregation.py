"""Category aggregation strategies for listings.

Two interchangeable strategies compute a label -> count mapping over the full
matching set of a listing. The counter-table strategy reads pre-aggregated
rows and is preferred when it supports the filter. The scan strategy reads
every matching category label and tallies in memory; it always works and is
used whenever the counter table is missing, unsuitable or failing, and
whenever the counters no longer add up to the number of matching records.
CounterReconciler rebuilds drifted counter rows from a scan.
"""

import logging
from collections import Counter
from collections.abc import Iterable
from typing import Protocol

from restaurant_site_service.models.listing_models import (
    RecordFilter,
    Visibility,
    normalize_category_label,
)
from restaurant_site_service.observability import traced
from restaurant_site_service.observability.metrics import record_aggregation_fallback
from restaurant_site_service.repositories.catalog_repositories import CategoryCountRepository
from restaurant_site_service.repositories.listing_sources import ListingSource

logger = logging.getLogger(__name__)


class CategoryAggregator(Protocol):
    """Strategy that counts records per category label."""

    def supports(self, record_filter: RecordFilter) -> bool:
        """Whether this strategy can answer for the given filter."""
        ...

    def aggregate(self, record_filter: RecordFilter) -> dict[str, int]:
        """Count matching records per normalized category label."""
        ...


def tally_categories(labels: Iterable[str]) -> dict[str, int]:
    """Count labels after trimming, with blank labels bucketed as uncategorised.

    Args:
        labels: Raw category labels, one per record

    Returns:
        dict: Label to count, ordered by label
    """
    counts = Counter(normalize_category_label(label) for label in labels)
    return dict(sorted(counts.items()))


class CounterTableAggregator:
    """Reads per-category counter rows maintained on every catalog mutation.

    Counter rows only know totals and visible totals, so filters with a
    search term or a hidden-only precondition are not supported.
    """

    def __init__(self, repository: CategoryCountRepository, listing: str) -> None:
        """Initialize the aggregator.

        Args:
            repository: Counter row repository
            listing: Listing name the counters are kept under
        """
        self.repository = repository
        self.listing = listing

    def supports(self, record_filter: RecordFilter) -> bool:
        return record_filter.normalized_search is None and record_filter.visibility in (
            Visibility.ANY,
            Visibility.VISIBLE,
        )

    def aggregate(self, record_filter: RecordFilter) -> dict[str, int]:
        column = "visible" if record_filter.visibility is Visibility.VISIBLE else "total"

        counts: Counter[str] = Counter()
        for row in self.repository.list_counts(self.listing):
            count = int(row.get(column, 0))
            if count > 0:
                counts[normalize_category_label(row.get("category"))] += count

        return dict(sorted(counts.items()))


class ScanAggregator:
    """Fetches the category label of every matching record and tallies them."""

    def __init__(self, source: ListingSource) -> None:
        """Initialize the aggregator.

        Args:
            source: Listing source to read labels from
        """
        self.source = source

    def supports(self, record_filter: RecordFilter) -> bool:
        return True

    def aggregate(self, record_filter: RecordFilter) -> dict[str, int]:
        return tally_categories(self.source.list_category_labels(record_filter))


class CounterReconciler:
    """Rebuilds counter rows from the records themselves.

    Counter upkeep is best-effort, so a failed or concurrent adjustment
    leaves rows that no longer match the records. Reconciling replaces every
    row of a listing with counts tallied from a scan.
    """

    def __init__(self, repository: CategoryCountRepository, sources: dict[str, ListingSource]) -> None:
        """Initialize the reconciler.

        Args:
            repository: Counter row repository
            sources: Listing name to the record source its counters describe
        """
        self.repository = repository
        self.sources = sources

    @traced("reconcile_category_counters")
    async def reconcile(self) -> dict[str, int]:
        """Rebuild the counters of every listing.

        Returns:
            dict: Listing name to number of counter rows written

        Raises:
            RepositoryError: If records cannot be read or rows cannot be written
        """
        written: dict[str, int] = {}
        for listing, source in self.sources.items():
            totals = tally_categories(source.list_category_labels(RecordFilter()))
            visible = tally_categories(
                source.list_category_labels(RecordFilter(visibility=Visibility.VISIBLE))
            )

            self.repository.replace_counts(
                listing, {label: (total, visible.get(label, 0)) for label, total in totals.items()}
            )
            written[listing] = len(totals)

        logger.info("Category counters reconciled", extra={"listings": written})
        return written


def aggregate_category_counts(
    record_filter: RecordFilter,
    primary: CategoryAggregator | None,
    fallback: CategoryAggregator,
    listing: str = "unknown",
    expected_total: int | None = None,
) -> dict[str, int]:
    """Aggregate category counts, degrading to the fallback strategy.

    The primary strategy is skipped when absent or when it does not support
    the filter. A failing primary strategy is logged and counted, never
    raised; the fallback result is returned instead. When expected_total is
    given, a primary result whose counts do not add up to it is treated as
    drifted and replaced by the fallback result as well.

    Args:
        record_filter: Filter defining the matching set
        primary: Preferred strategy, if configured
        fallback: Strategy that always works
        listing: Listing name for logs and metrics
        expected_total: Number of matching records, when already known

    Returns:
        dict: Normalized category label to record count
    """
    if primary is not None and primary.supports(record_filter):
        try:
            counts = primary.aggregate(record_filter)
        except Exception as e:
            logger.warning(
                f"Category aggregation failed for {listing}, falling back to scan: {e}",
                extra={"listing": listing},
            )
            record_aggregation_fallback(listing, "error")
        else:
            if expected_total is None or sum(counts.values()) == expected_total:
                return counts

            logger.warning(
                f"Category counters for {listing} add up to {sum(counts.values())}, "
                f"expected {expected_total}; falling back to scan",
                extra={"listing": listing},
            )
            record_aggregation_fallback(listing, "drift")

    return fallback.aggregate(record_filter)
