"""Reconciliation job removing stored images no record references.

Record deletes clean up their image best-effort, and replacing an image URL
never deletes the old object, so unreferenced objects accumulate. The sweep
lists the image prefixes, collects every image URL still referenced by a
menu or gallery record and deletes what is left once it is older than a
grace period. The grace period protects uploads whose record has not been
saved yet.
"""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from restaurant_site_service.observability import traced
from restaurant_site_service.observability.metrics import record_orphans_deleted
from restaurant_site_service.repositories.catalog_repositories import CatalogRepository
from restaurant_site_service.services.storage_client import StorageClient, StorageError

logger = logging.getLogger(__name__)

IMAGE_PREFIXES = ("menu/", "gallery/")
DEFAULT_GRACE_PERIOD = timedelta(hours=24)


@dataclass
class SweepReport:
    """Counts from one sweep run.

    Attributes:
        scanned: Objects listed under the image prefixes
        referenced: Objects still referenced by a record
        deleted: Orphaned objects removed
        failed: Orphaned objects whose delete failed
    """

    scanned: int = 0
    referenced: int = 0
    deleted: int = 0
    failed: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "scanned": self.scanned,
            "referenced": self.referenced,
            "deleted": self.deleted,
            "failed": self.failed,
        }


class StorageSweeper:
    """Deletes stored images that no catalog record points at."""

    def __init__(
        self,
        storage: StorageClient,
        repositories: list[CatalogRepository],
        grace_period: timedelta = DEFAULT_GRACE_PERIOD,
    ) -> None:
        """Initialize the sweeper.

        Args:
            storage: Object storage client
            repositories: Catalog repositories whose records reference images
            grace_period: Minimum object age before it may be deleted
        """
        self.storage = storage
        self.repositories = repositories
        self.grace_period = grace_period

    def referenced_keys(self) -> set[str]:
        """Object keys referenced by any catalog record."""
        keys: set[str] = set()
        for repository in self.repositories:
            for url in repository.list_image_urls():
                key = self.storage.key_from_url(url)
                if key is not None:
                    keys.add(key)
        return keys

    @traced("sweep_orphaned_images")
    async def sweep(self, now: datetime | None = None) -> SweepReport:
        """Run one sweep.

        Args:
            now: Reference time for the grace period (defaults to now)

        Returns:
            SweepReport with per-outcome counts

        Raises:
            RepositoryError: If referenced images cannot be read
            StorageError: If objects cannot be listed
        """
        cutoff = (now or datetime.now(UTC)) - self.grace_period
        referenced = self.referenced_keys()
        report = SweepReport()

        for prefix in IMAGE_PREFIXES:
            for entry in self.storage.list_objects(prefix):
                report.scanned += 1

                if entry.key in referenced:
                    report.referenced += 1
                    continue

                if entry.last_modified > cutoff:
                    continue

                try:
                    self.storage.delete(entry.key)
                    report.deleted += 1
                except StorageError:
                    report.failed += 1

        record_orphans_deleted(report.deleted)
        logger.info("Storage sweep finished", extra=report.to_dict())
        return report
