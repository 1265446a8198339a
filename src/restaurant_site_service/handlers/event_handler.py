"""EventBridge event handler for scheduled storage maintenance."""

import logging
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ValidationError, field_validator

from restaurant_site_service.repositories.catalog_repositories import RepositoryError
from restaurant_site_service.services.category_aggregation import CounterReconciler
from restaurant_site_service.services.storage_client import StorageError
from restaurant_site_service.services.storage_sweeper import StorageSweeper, SweepReport

logger = logging.getLogger(__name__)

SWEEP_EVENT_SOURCE = "com.restaurant.site"
SWEEP_EVENT_DETAIL_TYPE = "StorageSweep"


class StorageSweepEvent(BaseModel):
    """Model for storage sweep events from an EventBridge schedule.

    Attributes:
        requested_at: When the sweep was scheduled (defaults to now);
            timestamps without an offset are read as UTC
    """

    requested_at: datetime | None = None

    @field_validator("requested_at")
    @classmethod
    def assume_utc(cls, value: datetime | None) -> datetime | None:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value


def parse_sweep_event(event: dict[str, Any]) -> StorageSweepEvent | None:
    """Parse an EventBridge event into a StorageSweepEvent.

    Args:
        event: Raw EventBridge event dictionary

    Returns:
        StorageSweepEvent if parsing succeeds, None otherwise
    """
    try:
        return StorageSweepEvent(**(event.get("detail") or {}))
    except (ValidationError, TypeError) as e:
        logger.error(f"Failed to parse EventBridge event: {e}")
        return None


class SweepEventHandler:
    """Runs scheduled maintenance: the storage sweep, then counter reconciliation."""

    def __init__(
        self,
        storage_sweeper: StorageSweeper,
        counter_reconciler: CounterReconciler | None = None,
    ) -> None:
        self.storage_sweeper = storage_sweeper
        self.counter_reconciler = counter_reconciler

    async def handle_sweep(self, event: StorageSweepEvent) -> SweepReport | None:
        """Handle a storage sweep event.

        A failed counter rebuild is logged and does not affect the sweep
        result; the next scheduled run tries again.

        Args:
            event: The sweep event to process

        Returns:
            SweepReport, or None if the sweep could not run
        """
        logger.info(f"Starting storage sweep requested at {event.requested_at}")

        try:
            report = await self.storage_sweeper.sweep(now=event.requested_at)
        except (RepositoryError, StorageError) as e:
            logger.error(f"Storage sweep failed: {e}")
            return None

        if self.counter_reconciler is not None:
            try:
                await self.counter_reconciler.reconcile()
            except RepositoryError as e:
                logger.error(f"Category counter rebuild failed: {e}")

        return report
