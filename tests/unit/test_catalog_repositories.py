"""Unit tests for catalog repository classes."""

from datetime import UTC, datetime
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from catalog_factories import make_gallery_item, make_menu_item
from restaurant_site_service.models.listing_models import ListingOrder, RecordFilter, Visibility
from restaurant_site_service.repositories.catalog_repositories import (
    CategoryCountRepository,
    GalleryItemRepository,
    MenuItemRepository,
    RepositoryError,
    scan_all,
    visibility_condition,
)


def client_error(code: str, operation: str = "PutItem") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": "boom"}}, operation)


@pytest.mark.unit
class TestScanHelpers:
    """Tests for scan pagination and visibility conditions."""

    def test_scan_all_follows_last_evaluated_key(self) -> None:
        table = MagicMock()
        table.scan.side_effect = [
            {"Items": [{"id": "a"}], "LastEvaluatedKey": {"id": "a"}},
            {"Items": [{"id": "b"}]},
        ]

        items = list(scan_all(table, Limit=1))

        assert [item["id"] for item in items] == ["a", "b"]
        assert table.scan.call_count == 2
        assert table.scan.call_args_list[1].kwargs == {"Limit": 1, "ExclusiveStartKey": {"id": "a"}}

    def test_visibility_condition_any_is_none(self) -> None:
        assert visibility_condition(Visibility.ANY) is None

    def test_visibility_conditions_are_built(self) -> None:
        assert visibility_condition(Visibility.VISIBLE) is not None
        assert visibility_condition(Visibility.HIDDEN) is not None


@pytest.mark.unit
class TestMenuItemRepository:
    """Test suite for MenuItemRepository."""

    @pytest.fixture
    def mock_dynamodb(self) -> MagicMock:
        """Create a mock DynamoDB resource."""
        return MagicMock()

    @pytest.fixture
    def repository(self, mock_dynamodb: MagicMock) -> MenuItemRepository:
        return MenuItemRepository(dynamodb_resource=mock_dynamodb, table_name="test-menu")

    @pytest.fixture
    def table(self, mock_dynamodb: MagicMock) -> MagicMock:
        return mock_dynamodb.Table.return_value

    def test_repository_initialization(self, mock_dynamodb: MagicMock) -> None:
        repo = MenuItemRepository(dynamodb_resource=mock_dynamodb, table_name="test-table")

        assert repo.table_name == "test-table"
        mock_dynamodb.Table.assert_called_once_with("test-table")

    def test_create(self, repository: MenuItemRepository, table: MagicMock) -> None:
        item = make_menu_item(1)

        assert repository.create(item) == item
        table.put_item.assert_called_once_with(Item=item.to_dynamodb_item())

    def test_create_failure(self, repository: MenuItemRepository, table: MagicMock) -> None:
        table.put_item.side_effect = client_error("InternalServerError")

        with pytest.raises(RepositoryError, match="Failed to create menu item"):
            repository.create(make_menu_item(1))

    def test_get_found(self, repository: MenuItemRepository, table: MagicMock) -> None:
        item = make_menu_item(1)
        table.get_item.return_value = {"Item": item.to_dynamodb_item()}

        assert repository.get(item.id) == item
        table.get_item.assert_called_once_with(Key={"id": item.id})

    def test_get_missing(self, repository: MenuItemRepository, table: MagicMock) -> None:
        table.get_item.return_value = {}

        assert repository.get("missing") is None

    def test_update_builds_set_and_remove(self, repository: MenuItemRepository, table: MagicMock) -> None:
        updated = make_menu_item(1, visible=False)
        table.update_item.return_value = {"Attributes": updated.to_dynamodb_item()}
        now = datetime(2025, 4, 1, tzinfo=UTC)

        result = repository.update(updated.id, {"visible": False, "image_url": None}, now)

        assert result == updated
        kwargs = table.update_item.call_args.kwargs
        assert kwargs["Key"] == {"id": updated.id}
        assert kwargs["UpdateExpression"] == (
            "SET #updated_at = :updated_at, #visible = :visible REMOVE #image_url"
        )
        assert kwargs["ExpressionAttributeNames"] == {
            "#updated_at": "updated_at",
            "#visible": "visible",
            "#image_url": "image_url",
        }
        assert kwargs["ExpressionAttributeValues"] == {
            ":updated_at": now.isoformat(),
            ":visible": False,
        }
        assert kwargs["ReturnValues"] == "ALL_NEW"

    def test_update_missing_returns_none(self, repository: MenuItemRepository, table: MagicMock) -> None:
        table.update_item.side_effect = client_error("ConditionalCheckFailedException", "UpdateItem")

        assert repository.update("missing", {"name": "x"}, datetime.now(UTC)) is None

    def test_update_failure(self, repository: MenuItemRepository, table: MagicMock) -> None:
        table.update_item.side_effect = client_error("ProvisionedThroughputExceededException")

        with pytest.raises(RepositoryError, match="Failed to update menu item"):
            repository.update("id", {"name": "x"}, datetime.now(UTC))

    def test_delete_returns_old_record(self, repository: MenuItemRepository, table: MagicMock) -> None:
        item = make_menu_item(1)
        table.delete_item.return_value = {"Attributes": item.to_dynamodb_item()}

        assert repository.delete(item.id) == item
        assert table.delete_item.call_args.kwargs["ReturnValues"] == "ALL_OLD"

    def test_delete_missing(self, repository: MenuItemRepository, table: MagicMock) -> None:
        table.delete_item.side_effect = client_error("ConditionalCheckFailedException", "DeleteItem")

        assert repository.delete("missing") is None

    def test_summarize(self, repository: MenuItemRepository, table: MagicMock) -> None:
        items = [make_menu_item(i) for i in (1, 3, 2)]
        table.scan.return_value = {
            "Items": [{"id": i.id, "created_at": i.created_at.isoformat()} for i in items]
        }

        summary = repository.summarize(RecordFilter(visibility=Visibility.VISIBLE))

        assert summary.total == 3
        assert summary.latest_created_at == items[1].created_at
        kwargs = table.scan.call_args.kwargs
        assert "FilterExpression" in kwargs
        assert kwargs["ExpressionAttributeNames"] == {"#p_created_at": "created_at", "#p_id": "id"}
        assert kwargs["ProjectionExpression"] == "#p_created_at, #p_id"

    def test_summarize_with_search_projects_search_fields(
        self, repository: MenuItemRepository, table: MagicMock
    ) -> None:
        salmon = make_menu_item(1, name="Salmon")
        lamb = make_menu_item(2, name="Lamb")
        table.scan.return_value = {
            "Items": [
                {"id": salmon.id, "created_at": salmon.created_at.isoformat(), "name": "Salmon", "category": "mains"},
                {"id": lamb.id, "created_at": lamb.created_at.isoformat(), "name": "Lamb", "category": "mains"},
            ]
        }

        summary = repository.summarize(RecordFilter(search_term="salm"))

        assert summary.total == 1
        projected = set(table.scan.call_args.kwargs["ExpressionAttributeNames"].values())
        assert {"name", "category", "description"} <= projected
        assert "FilterExpression" not in table.scan.call_args.kwargs

    def test_find_many_sorts_and_slices(self, repository: MenuItemRepository, table: MagicMock) -> None:
        items = [make_menu_item(i) for i in (1, 2, 3, 4)]
        table.scan.return_value = {"Items": [i.to_dynamodb_item() for i in items]}

        page = repository.find_many(RecordFilter(), ListingOrder.NEWEST_CREATED, skip=1, take=2)

        assert [i.id for i in page] == [items[2].id, items[1].id]

    def test_list_category_labels(self, repository: MenuItemRepository, table: MagicMock) -> None:
        table.scan.return_value = {"Items": [{"category": "mains"}, {}, {"category": " "}]}

        assert repository.list_category_labels(RecordFilter()) == ["mains", "", " "]

    def test_scan_failure(self, repository: MenuItemRepository, table: MagicMock) -> None:
        table.scan.side_effect = client_error("InternalServerError", "Scan")

        with pytest.raises(RepositoryError, match="Failed to load menu item records"):
            repository.summarize(RecordFilter())

    def test_connection_failure_is_repository_error(
        self, repository: MenuItemRepository, table: MagicMock
    ) -> None:
        table.scan.side_effect = EndpointConnectionError(endpoint_url="http://localhost:8000")

        with pytest.raises(RepositoryError, match="Failed to load menu item records"):
            repository.find_many(RecordFilter(), ListingOrder.CATEGORY_THEN_NAME, skip=0, take=10)


@pytest.mark.unit
class TestGalleryItemRepository:
    """Test suite for GalleryItemRepository."""

    def test_list_image_urls(self) -> None:
        mock_dynamodb = MagicMock()
        table = mock_dynamodb.Table.return_value
        table.scan.return_value = {"Items": [{"image_url": "https://a/1.jpg"}, {"image_url": ""}, {}]}
        repository = GalleryItemRepository(mock_dynamodb, "test-gallery")

        assert repository.list_image_urls() == ["https://a/1.jpg"]

    def test_get_found(self) -> None:
        mock_dynamodb = MagicMock()
        item = make_gallery_item(1, caption="Terrace")
        mock_dynamodb.Table.return_value.get_item.return_value = {"Item": item.to_dynamodb_item()}
        repository = GalleryItemRepository(mock_dynamodb, "test-gallery")

        assert repository.get(item.id) == item


@pytest.mark.unit
class TestCategoryCountRepository:
    """Test suite for CategoryCountRepository."""

    @pytest.fixture
    def mock_dynamodb(self) -> MagicMock:
        return MagicMock()

    @pytest.fixture
    def repository(self, mock_dynamodb: MagicMock) -> CategoryCountRepository:
        return CategoryCountRepository(mock_dynamodb, "test-counts")

    def test_adjust_uses_atomic_add(self, repository: CategoryCountRepository, mock_dynamodb: MagicMock) -> None:
        repository.adjust("menu", "mains", total_delta=1, visible_delta=0)

        kwargs = mock_dynamodb.Table.return_value.update_item.call_args.kwargs
        assert kwargs["Key"] == {"listing": "menu", "category": "mains"}
        assert kwargs["UpdateExpression"] == "ADD #total :total, #visible :visible"
        assert kwargs["ExpressionAttributeValues"] == {":total": 1, ":visible": 0}

    def test_adjust_noop_for_zero_deltas(
        self, repository: CategoryCountRepository, mock_dynamodb: MagicMock
    ) -> None:
        repository.adjust("menu", "mains", total_delta=0, visible_delta=0)

        mock_dynamodb.Table.return_value.update_item.assert_not_called()

    def test_adjust_failure(self, repository: CategoryCountRepository, mock_dynamodb: MagicMock) -> None:
        mock_dynamodb.Table.return_value.update_item.side_effect = client_error("InternalServerError")

        with pytest.raises(RepositoryError):
            repository.adjust("menu", "mains", total_delta=1, visible_delta=1)

    def test_list_counts_paginates(self, repository: CategoryCountRepository, mock_dynamodb: MagicMock) -> None:
        table = mock_dynamodb.Table.return_value
        table.query.side_effect = [
            {"Items": [{"category": "mains"}], "LastEvaluatedKey": {"k": 1}},
            {"Items": [{"category": "starters"}]},
        ]

        rows = repository.list_counts("menu")

        assert [row["category"] for row in rows] == ["mains", "starters"]
        assert table.query.call_args_list[1].kwargs["ExclusiveStartKey"] == {"k": 1}

    def test_list_counts_failure(self, repository: CategoryCountRepository, mock_dynamodb: MagicMock) -> None:
        mock_dynamodb.Table.return_value.query.side_effect = client_error("InternalServerError", "Query")

        with pytest.raises(RepositoryError, match="Failed to list category counters"):
            repository.list_counts("menu")

    def test_list_counts_connection_failure(
        self, repository: CategoryCountRepository, mock_dynamodb: MagicMock
    ) -> None:
        mock_dynamodb.Table.return_value.query.side_effect = EndpointConnectionError(
            endpoint_url="http://localhost:8000"
        )

        with pytest.raises(RepositoryError, match="Failed to list category counters"):
            repository.list_counts("menu")

    def test_replace_counts_writes_rows_and_drops_stale(
        self, repository: CategoryCountRepository, mock_dynamodb: MagicMock
    ) -> None:
        table = mock_dynamodb.Table.return_value
        table.query.return_value = {"Items": [{"category": "mains"}, {"category": "specials"}]}
        batch = table.batch_writer.return_value.__enter__.return_value

        repository.replace_counts("menu", {"mains": (3, 2), "starters": (1, 0)})

        batch.put_item.assert_any_call(
            Item={"listing": "menu", "category": "mains", "total": 3, "visible": 2}
        )
        batch.put_item.assert_any_call(
            Item={"listing": "menu", "category": "starters", "total": 1, "visible": 0}
        )
        batch.delete_item.assert_called_once_with(Key={"listing": "menu", "category": "specials"})

    def test_replace_counts_failure(self, repository: CategoryCountRepository, mock_dynamodb: MagicMock) -> None:
        table = mock_dynamodb.Table.return_value
        table.query.return_value = {"Items": []}
        table.batch_writer.return_value.__enter__.return_value.put_item.side_effect = client_error(
            "ProvisionedThroughputExceededException", "BatchWriteItem"
        )

        with pytest.raises(RepositoryError, match="Failed to rebuild category counters"):
            repository.replace_counts("menu", {"mains": (1, 1)})
