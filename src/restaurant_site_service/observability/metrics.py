"""Custom metrics for the restaurant site service."""

from opentelemetry import metrics

from restaurant_site_service.observability.config import SERVICE_NAME

meter = metrics.get_meter(SERVICE_NAME)

listing_requests_counter = meter.create_counter(
    name="listing_requests_total",
    description="Listing projections served, by listing and data source",
    unit="1",
)

listing_duration_histogram = meter.create_histogram(
    name="listing_projection_duration_seconds",
    description="Time spent projecting a listing page",
    unit="s",
)

aggregation_fallback_counter = meter.create_counter(
    name="category_aggregation_fallback_total",
    description="Category aggregations that fell back to a full scan",
    unit="1",
)

storage_cleanup_failure_counter = meter.create_counter(
    name="storage_cleanup_failure_total",
    description="Stored images left behind after a record was deleted",
    unit="1",
)

email_delivery_counter = meter.create_counter(
    name="email_delivery_total",
    description="Transactional email attempts, by template and outcome",
    unit="1",
)

orphans_deleted_counter = meter.create_counter(
    name="orphaned_objects_deleted_total",
    description="Unreferenced stored images removed by the storage sweep",
    unit="1",
)


def record_listing_request(listing: str, source: str, duration_seconds: float) -> None:
    """Record a served listing projection.

    Args:
        listing: Listing profile name (e.g., "public_gallery")
        source: Where the items came from ("records" or "fallback")
        duration_seconds: Projection duration in seconds
    """
    listing_requests_counter.add(1, {"listing": listing, "source": source})
    listing_duration_histogram.record(duration_seconds, {"listing": listing})


def record_aggregation_fallback(listing: str, reason: str) -> None:
    """Record a category aggregation that degraded to the scan strategy.

    Args:
        listing: Listing the aggregation ran for
        reason: Why the primary strategy was not used
    """
    aggregation_fallback_counter.add(1, {"listing": listing, "reason": reason})


def record_storage_cleanup_failure(listing: str) -> None:
    """Record a failed best-effort image deletion."""
    storage_cleanup_failure_counter.add(1, {"listing": listing})


def record_email_delivery(template: str, sent: bool) -> None:
    """Record a transactional email attempt.

    Args:
        template: Email template name
        sent: Whether the provider accepted the message
    """
    email_delivery_counter.add(1, {"template": template, "outcome": "sent" if sent else "failed"})


def record_orphans_deleted(count: int) -> None:
    """Record objects removed by a storage sweep."""
    if count:
        orphans_deleted_counter.add(count)
