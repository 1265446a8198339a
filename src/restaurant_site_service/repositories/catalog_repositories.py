"""DynamoDB repository classes for catalog records.

Menu items and gallery images live in one table each, keyed by id. Both
repositories implement the ListingSource read interface used by the listing
projector. A separate counter table keeps per-category totals so category
aggregation does not need a full scan.

Missing records are reported with None. Unexpected DynamoDB failures are
logged and raised as RepositoryError so the HTTP layer can answer with a 500.
"""

import logging
from collections.abc import Iterator
from datetime import datetime
from typing import Any, Generic, TypeVar

from boto3.dynamodb.conditions import Attr, ConditionBase, Key
from botocore.exceptions import BotoCoreError, ClientError
from mypy_boto3_dynamodb.service_resource import DynamoDBServiceResource, Table

from restaurant_site_service.models.catalog_models import CatalogRecord, GalleryItem, MenuItem
from restaurant_site_service.models.listing_models import (
    ListingOrder,
    ListingSummary,
    RecordFilter,
    Visibility,
)
from restaurant_site_service.repositories.listing_sources import sort_records

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=CatalogRecord)

CONDITIONAL_CHECK_FAILED = "ConditionalCheckFailedException"


class RepositoryError(Exception):
    """Raised when a persistence call fails for an unexpected reason."""


def is_conditional_check_failure(error: Exception) -> bool:
    """Check whether a DynamoDB error is a failed ConditionExpression."""
    return (
        isinstance(error, ClientError)
        and error.response.get("Error", {}).get("Code") == CONDITIONAL_CHECK_FAILED
    )


def visibility_condition(visibility: Visibility) -> ConditionBase | None:
    """Build the DynamoDB filter for a visibility precondition.

    Records stored without a visibility flag count as visible.

    Args:
        visibility: Visibility precondition

    Returns:
        Filter condition, or None when every record qualifies
    """
    if visibility is Visibility.VISIBLE:
        return Attr("visible").ne(False) | Attr("visible").not_exists()
    if visibility is Visibility.HIDDEN:
        return Attr("visible").eq(False)
    return None


def scan_all(table: Table, **scan_kwargs: Any) -> Iterator[dict[str, Any]]:
    """Scan a table to the end, following LastEvaluatedKey.

    Args:
        table: DynamoDB table
        **scan_kwargs: Extra arguments passed to every scan call

    Yields:
        Raw DynamoDB items
    """
    while True:
        response = table.scan(**scan_kwargs)
        yield from response.get("Items", [])

        last_key = response.get("LastEvaluatedKey")
        if not last_key:
            return
        scan_kwargs["ExclusiveStartKey"] = last_key


class CatalogRepository(Generic[RecordT]):
    """Repository for one kind of catalog record.

    Subclasses set record_type to the pydantic model stored in the table.
    """

    record_type: type[RecordT]
    record_label = "record"

    def __init__(self, dynamodb_resource: DynamoDBServiceResource, table_name: str) -> None:
        """Initialize repository.

        Args:
            dynamodb_resource: Boto3 DynamoDB resource
            table_name: Name of the DynamoDB table
        """
        self.dynamodb = dynamodb_resource
        self.table_name = table_name
        self.table: Table = dynamodb_resource.Table(table_name)

    def create(self, record: RecordT) -> RecordT:
        """Store a new record.

        Args:
            record: Record to store

        Returns:
            The stored record

        Raises:
            RepositoryError: If the write fails
        """
        try:
            self.table.put_item(Item=record.to_dynamodb_item())  # type: ignore[attr-defined]
            return record

        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to create {self.record_label}: {e}")
            raise RepositoryError(f"Failed to create {self.record_label}") from e

    def get(self, record_id: str) -> RecordT | None:
        """Retrieve a record by id.

        Args:
            record_id: Record identifier

        Returns:
            The record if found, None otherwise

        Raises:
            RepositoryError: If the read fails
        """
        try:
            response = self.table.get_item(Key={"id": record_id})

            if "Item" not in response:
                return None

            return self.record_type.from_dynamodb_item(response["Item"])  # type: ignore[attr-defined]

        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to get {self.record_label}: {e}")
            raise RepositoryError(f"Failed to load {self.record_label}") from e

    def update(self, record_id: str, changes: dict[str, Any], updated_at: datetime) -> RecordT | None:
        """Apply a partial update to an existing record.

        Fields set to None are removed from the stored item.

        Args:
            record_id: Record identifier
            changes: Attribute name to new value
            updated_at: New update timestamp

        Returns:
            The updated record, or None if no record has this id

        Raises:
            RepositoryError: If the write fails
        """
        names: dict[str, str] = {"#updated_at": "updated_at"}
        values: dict[str, Any] = {":updated_at": updated_at.isoformat()}
        set_clauses = ["#updated_at = :updated_at"]
        remove_clauses = []

        for field_name, value in changes.items():
            names[f"#{field_name}"] = field_name
            if value is None:
                remove_clauses.append(f"#{field_name}")
            else:
                values[f":{field_name}"] = value
                set_clauses.append(f"#{field_name} = :{field_name}")

        expression = "SET " + ", ".join(set_clauses)
        if remove_clauses:
            expression += " REMOVE " + ", ".join(remove_clauses)

        try:
            response = self.table.update_item(
                Key={"id": record_id},
                UpdateExpression=expression,
                ConditionExpression=Attr("id").exists(),
                ExpressionAttributeNames=names,
                ExpressionAttributeValues=values,
                ReturnValues="ALL_NEW",
            )
            return self.record_type.from_dynamodb_item(response["Attributes"])  # type: ignore[attr-defined]

        except (ClientError, BotoCoreError) as e:
            if is_conditional_check_failure(e):
                return None
            logger.error(f"Failed to update {self.record_label}: {e}")
            raise RepositoryError(f"Failed to update {self.record_label}") from e

    def delete(self, record_id: str) -> RecordT | None:
        """Delete a record.

        Args:
            record_id: Record identifier

        Returns:
            The deleted record, or None if no record has this id

        Raises:
            RepositoryError: If the delete fails
        """
        try:
            response = self.table.delete_item(
                Key={"id": record_id},
                ConditionExpression=Attr("id").exists(),
                ReturnValues="ALL_OLD",
            )
            return self.record_type.from_dynamodb_item(response["Attributes"])  # type: ignore[attr-defined]

        except (ClientError, BotoCoreError) as e:
            if is_conditional_check_failure(e):
                return None
            logger.error(f"Failed to delete {self.record_label}: {e}")
            raise RepositoryError(f"Failed to delete {self.record_label}") from e

    def _scan_items(
        self, record_filter: RecordFilter, attributes: tuple[str, ...] | None = None
    ) -> list[dict[str, Any]]:
        """Scan items matching a filter, optionally projecting a subset of attributes.

        The visibility precondition runs in DynamoDB. The search term is
        applied here because DynamoDB has no case-insensitive contains.
        """
        scan_kwargs: dict[str, Any] = {}

        condition = visibility_condition(record_filter.visibility)
        if condition is not None:
            scan_kwargs["FilterExpression"] = condition

        term = record_filter.normalized_search
        search_fields = self.record_type.search_fields

        if attributes is not None:
            projected = set(attributes)
            if term is not None:
                projected.update(search_fields)
            placeholders = {f"#p_{name}": name for name in sorted(projected)}
            scan_kwargs["ProjectionExpression"] = ", ".join(placeholders)
            scan_kwargs["ExpressionAttributeNames"] = placeholders

        try:
            items = list(scan_all(self.table, **scan_kwargs))

        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to scan {self.record_label} table: {e}")
            raise RepositoryError(f"Failed to load {self.record_label} records") from e

        if term is None:
            return items

        return [
            item
            for item in items
            if any(term in str(item.get(field) or "").lower() for field in search_fields)
        ]

    def summarize(self, record_filter: RecordFilter) -> ListingSummary:
        """Count matching records and find the newest creation timestamp.

        Args:
            record_filter: Filter to apply

        Returns:
            ListingSummary over the full matching set
        """
        items = self._scan_items(record_filter, attributes=("id", "created_at"))

        latest = None
        for item in items:
            created_at = datetime.fromisoformat(item["created_at"])
            if latest is None or created_at > latest:
                latest = created_at

        return ListingSummary(total=len(items), latest_created_at=latest)

    def find_many(
        self, record_filter: RecordFilter, order: ListingOrder, skip: int, take: int
    ) -> list[RecordT]:
        """Fetch one window of matching records in the given order.

        Args:
            record_filter: Filter to apply
            order: Sort order (ties break on id)
            skip: Number of records to skip
            take: Maximum number of records to return

        Returns:
            list: Records in the requested window
        """
        records = [
            self.record_type.from_dynamodb_item(item)  # type: ignore[attr-defined]
            for item in self._scan_items(record_filter)
        ]
        return sort_records(records, order)[skip : skip + take]

    def list_category_labels(self, record_filter: RecordFilter) -> list[str]:
        """Return the raw category label of every matching record.

        Args:
            record_filter: Filter to apply

        Returns:
            list: One label per matching record (may repeat)
        """
        items = self._scan_items(record_filter, attributes=("category",))
        return [str(item.get("category") or "") for item in items]

    def list_image_urls(self) -> list[str]:
        """Return every image URL referenced by a stored record."""
        items = self._scan_items(RecordFilter(), attributes=("image_url",))
        return [item["image_url"] for item in items if item.get("image_url")]


class MenuItemRepository(CatalogRepository[MenuItem]):
    """Repository for menu items, keyed by id."""

    record_type = MenuItem
    record_label = "menu item"


class GalleryItemRepository(CatalogRepository[GalleryItem]):
    """Repository for gallery images, keyed by id."""

    record_type = GalleryItem
    record_label = "gallery item"


class CategoryCountRepository:
    """Repository for per-category counter rows.

    Manages counter rows with composite key (listing, category). Each row holds
    a total count and a visible count, adjusted atomically with ADD.
    """

    def __init__(self, dynamodb_resource: DynamoDBServiceResource, table_name: str) -> None:
        """Initialize repository.

        Args:
            dynamodb_resource: Boto3 DynamoDB resource
            table_name: Name of the DynamoDB table
        """
        self.dynamodb = dynamodb_resource
        self.table_name = table_name
        self.table: Table = dynamodb_resource.Table(table_name)

    def adjust(self, listing: str, category: str, total_delta: int, visible_delta: int) -> None:
        """Atomically add deltas to a category's counters.

        Args:
            listing: Listing name (e.g., 'menu', 'gallery')
            category: Normalized category label
            total_delta: Change in total record count
            visible_delta: Change in visible record count

        Raises:
            RepositoryError: If the update fails
        """
        if total_delta == 0 and visible_delta == 0:
            return

        try:
            self.table.update_item(
                Key={"listing": listing, "category": category},
                UpdateExpression="ADD #total :total, #visible :visible",
                ExpressionAttributeNames={"#total": "total", "#visible": "visible"},
                ExpressionAttributeValues={":total": total_delta, ":visible": visible_delta},
            )

        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to adjust category counter: {e}")
            raise RepositoryError("Failed to adjust category counter") from e

    def list_counts(self, listing: str) -> list[dict[str, Any]]:
        """List every counter row for a listing.

        Args:
            listing: Listing name

        Returns:
            list: Raw counter rows with category, total and visible attributes

        Raises:
            RepositoryError: If the query fails
        """
        query_kwargs: dict[str, Any] = {"KeyConditionExpression": Key("listing").eq(listing)}
        rows: list[dict[str, Any]] = []

        try:
            while True:
                response = self.table.query(**query_kwargs)
                rows.extend(response.get("Items", []))

                last_key = response.get("LastEvaluatedKey")
                if not last_key:
                    return rows
                query_kwargs["ExclusiveStartKey"] = last_key

        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to list category counters: {e}")
            raise RepositoryError("Failed to list category counters") from e

    def replace_counts(self, listing: str, counts: dict[str, tuple[int, int]]) -> None:
        """Overwrite a listing's counter rows with freshly computed values.

        Rows for categories missing from counts are removed.

        Args:
            listing: Listing name
            counts: Normalized category label to (total, visible)

        Raises:
            RepositoryError: If a row cannot be written or removed
        """
        stale = {row["category"] for row in self.list_counts(listing)} - set(counts)

        try:
            with self.table.batch_writer() as batch:
                for category, (total, visible) in counts.items():
                    batch.put_item(
                        Item={"listing": listing, "category": category, "total": total, "visible": visible}
                    )
                for category in stale:
                    batch.delete_item(Key={"listing": listing, "category": category})

        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to rebuild category counters: {e}")
            raise RepositoryError("Failed to rebuild category counters") from e

        logger.info(f"Rebuilt {len(counts)} category counters for {listing}, removed {len(stale)}")
