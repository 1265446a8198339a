"""Unit tests for the storage sweep event handler."""

from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from restaurant_site_service.handlers.event_handler import (
    StorageSweepEvent,
    SweepEventHandler,
    parse_sweep_event,
)
from restaurant_site_service.repositories.catalog_repositories import RepositoryError
from restaurant_site_service.services.storage_client import ObjectListing, StorageError
from restaurant_site_service.services.storage_sweeper import StorageSweeper, SweepReport


@pytest.mark.unit
class TestParseSweepEvent:
    """Tests for parse_sweep_event."""

    def test_parses_requested_at(self, mock_eventbridge_event: dict) -> None:
        event = parse_sweep_event(mock_eventbridge_event)

        assert event is not None
        assert event.requested_at == datetime(2025, 3, 2, 3, 0, tzinfo=UTC)

    def test_empty_detail_is_valid(self) -> None:
        event = parse_sweep_event({"source": "com.restaurant.site", "detail-type": "StorageSweep", "detail": {}})

        assert event == StorageSweepEvent()

    def test_timestamp_without_offset_is_utc(self) -> None:
        event = parse_sweep_event({"detail": {"requested_at": "2025-03-02T03:00:00"}})

        assert event is not None
        assert event.requested_at == datetime(2025, 3, 2, 3, 0, tzinfo=UTC)

    def test_invalid_timestamp_returns_none(self) -> None:
        event = parse_sweep_event({"detail": {"requested_at": "yesterday-ish"}})

        assert event is None

    def test_non_mapping_detail_returns_none(self) -> None:
        event = parse_sweep_event({"detail": ["not", "a", "mapping"]})

        assert event is None


@pytest.mark.unit
class TestSweepEventHandler:
    """Tests for SweepEventHandler."""

    @pytest.fixture
    def sweeper(self) -> MagicMock:
        sweeper = MagicMock()
        sweeper.sweep = AsyncMock(return_value=SweepReport(scanned=4, referenced=2, deleted=2))
        return sweeper

    @pytest.mark.asyncio
    async def test_runs_sweep_at_requested_time(self, sweeper: MagicMock) -> None:
        handler = SweepEventHandler(storage_sweeper=sweeper)
        requested_at = datetime(2025, 3, 2, 3, 0, tzinfo=UTC)

        report = await handler.handle_sweep(StorageSweepEvent(requested_at=requested_at))

        assert report == SweepReport(scanned=4, referenced=2, deleted=2)
        sweeper.sweep.assert_awaited_once_with(now=requested_at)

    @pytest.mark.asyncio
    async def test_returns_none_when_records_unreadable(self, sweeper: MagicMock) -> None:
        sweeper.sweep.side_effect = RepositoryError("Failed to list image URLs")
        handler = SweepEventHandler(storage_sweeper=sweeper)

        assert await handler.handle_sweep(StorageSweepEvent()) is None

    @pytest.mark.asyncio
    async def test_returns_none_when_listing_fails(self, sweeper: MagicMock) -> None:
        sweeper.sweep.side_effect = StorageError("Failed to list stored images")
        handler = SweepEventHandler(storage_sweeper=sweeper)

        assert await handler.handle_sweep(StorageSweepEvent()) is None

    @pytest.mark.asyncio
    async def test_unexpected_errors_propagate(self, sweeper: MagicMock) -> None:
        sweeper.sweep.side_effect = RuntimeError("boom")
        handler = SweepEventHandler(storage_sweeper=sweeper)

        with pytest.raises(RuntimeError):
            await handler.handle_sweep(StorageSweepEvent())

    @pytest.mark.asyncio
    async def test_sweep_with_timestamp_without_offset(self) -> None:
        storage = MagicMock()
        storage.list_objects.side_effect = lambda prefix: [
            ObjectListing(key=f"{prefix}old.jpg", last_modified=datetime(2025, 2, 1, tzinfo=UTC)),
            ObjectListing(key=f"{prefix}new.jpg", last_modified=datetime(2025, 3, 2, 2, 0, tzinfo=UTC)),
        ]
        handler = SweepEventHandler(StorageSweeper(storage, [], grace_period=timedelta(hours=24)))
        event = parse_sweep_event({"detail": {"requested_at": "2025-03-02T03:00:00"}})

        report = await handler.handle_sweep(event)  # type: ignore[arg-type]

        assert report == SweepReport(scanned=4, referenced=0, deleted=2)
        storage.delete.assert_any_call("menu/old.jpg")
        storage.delete.assert_any_call("gallery/old.jpg")

    @pytest.mark.asyncio
    async def test_reconciles_counters_after_sweep(self, sweeper: MagicMock) -> None:
        reconciler = MagicMock()
        reconciler.reconcile = AsyncMock(return_value={"menu": 3, "gallery": 1})
        handler = SweepEventHandler(storage_sweeper=sweeper, counter_reconciler=reconciler)

        report = await handler.handle_sweep(StorageSweepEvent())

        assert report == SweepReport(scanned=4, referenced=2, deleted=2)
        reconciler.reconcile.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_failed_reconcile_keeps_sweep_report(self, sweeper: MagicMock) -> None:
        reconciler = MagicMock()
        reconciler.reconcile = AsyncMock(side_effect=RepositoryError("Failed to rebuild category counters"))
        handler = SweepEventHandler(storage_sweeper=sweeper, counter_reconciler=reconciler)

        report = await handler.handle_sweep(StorageSweepEvent())

        assert report == SweepReport(scanned=4, referenced=2, deleted=2)

    @pytest.mark.asyncio
    async def test_failed_sweep_skips_reconcile(self, sweeper: MagicMock) -> None:
        sweeper.sweep.side_effect = StorageError("Failed to list stored images")
        reconciler = MagicMock()
        reconciler.reconcile = AsyncMock()
        handler = SweepEventHandler(storage_sweeper=sweeper, counter_reconciler=reconciler)

        assert await handler.handle_sweep(StorageSweepEvent()) is None
        reconciler.reconcile.assert_not_awaited()
