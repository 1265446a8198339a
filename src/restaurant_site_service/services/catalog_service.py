"""Service for creating, updating and deleting catalog records.

One CatalogService instance manages one listing (menu or gallery). Besides
the record write itself it keeps the category counter rows in step and, on
delete, removes the record's stored image. Both side effects are
best-effort: a failure is logged and counted but never fails the request,
and nothing is retried. Listings ignore counters that no longer add up to
the matching total and count by scan instead. The scheduled maintenance
job rebuilds the counter rows and deletes orphaned images.
"""

import logging
from datetime import UTC, datetime
from typing import Generic, TypeVar
from uuid import uuid4

from pydantic import BaseModel

from restaurant_site_service.models.catalog_models import CatalogRecord
from restaurant_site_service.models.listing_models import normalize_category_label
from restaurant_site_service.observability import traced
from restaurant_site_service.observability.metrics import record_storage_cleanup_failure
from restaurant_site_service.repositories.catalog_repositories import (
    CatalogRepository,
    CategoryCountRepository,
    RepositoryError,
)
from restaurant_site_service.services.storage_client import StorageClient, StorageError

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=CatalogRecord)


class CatalogService(Generic[RecordT]):
    """Mutations for one catalog listing."""

    def __init__(
        self,
        listing: str,
        repository: CatalogRepository[RecordT],
        storage: StorageClient | None = None,
        counters: CategoryCountRepository | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            listing: Listing name ("menu" or "gallery"), also the counter partition
            repository: Record repository
            storage: Object storage client for image cleanup
            counters: Category counter repository; None disables counter upkeep
        """
        self.listing = listing
        self.repository = repository
        self.storage = storage
        self.counters = counters

    def _adjust_counters(self, record: RecordT, direction: int) -> None:
        if self.counters is None:
            return

        try:
            self.counters.adjust(
                self.listing,
                normalize_category_label(record.category),
                total_delta=direction,
                visible_delta=direction if record.visible else 0,
            )
        except RepositoryError as e:
            logger.warning(f"Category counters for {self.listing} may have drifted: {e}")

    def _delete_image(self, image_url: str | None) -> None:
        if self.storage is None:
            return

        key = self.storage.key_from_url(image_url)
        if key is None:
            return

        try:
            self.storage.delete(key)
            logger.info(f"Deleted stored image {key}")
        except StorageError as e:
            logger.warning(f"Left orphaned image {key} after {self.listing} delete: {e}")
            record_storage_cleanup_failure(self.listing)

    async def get(self, record_id: str) -> RecordT | None:
        """Fetch one record by id.

        Args:
            record_id: Record identifier

        Returns:
            The record, or None if not found
        """
        return self.repository.get(record_id)

    @traced("create_catalog_record")
    async def create(self, payload: BaseModel) -> RecordT:
        """Create a record from a validated create payload.

        Args:
            payload: MenuItemCreate or GalleryItemCreate

        Returns:
            The stored record

        Raises:
            RepositoryError: If the record cannot be stored
        """
        now = datetime.now(UTC)
        record = self.repository.record_type(
            id=uuid4().hex,
            created_at=now,
            updated_at=now,
            **payload.model_dump(),
        )

        created = self.repository.create(record)
        self._adjust_counters(created, +1)

        logger.info(f"Created {self.listing} record {created.id}")
        return created

    @traced("update_catalog_record")
    async def update(self, record_id: str, payload: BaseModel) -> RecordT | None:
        """Apply a partial update.

        Args:
            record_id: Record identifier
            payload: MenuItemUpdate or GalleryItemUpdate

        Returns:
            The updated record, or None if not found

        Raises:
            RepositoryError: If the update fails
        """
        existing = self.repository.get(record_id)
        if existing is None:
            return None

        updated = self.repository.update(record_id, payload.changes(), datetime.now(UTC))  # type: ignore[attr-defined]
        if updated is None:
            return None

        if (
            normalize_category_label(existing.category) != normalize_category_label(updated.category)
            or existing.visible != updated.visible
        ):
            self._adjust_counters(existing, -1)
            self._adjust_counters(updated, +1)

        logger.info(f"Updated {self.listing} record {record_id}")
        return updated

    @traced("delete_catalog_record")
    async def delete(self, record_id: str) -> bool:
        """Delete a record and, best-effort, its stored image.

        The record is gone from listings once this returns True, whether or
        not the image could be removed.

        Args:
            record_id: Record identifier

        Returns:
            bool: True if deleted, False if not found

        Raises:
            RepositoryError: If the record delete itself fails
        """
        deleted = self.repository.delete(record_id)
        if deleted is None:
            return False

        logger.info(f"Deleted {self.listing} record {record_id}")

        self._adjust_counters(deleted, -1)
        self._delete_image(deleted.image_url)
        return True
