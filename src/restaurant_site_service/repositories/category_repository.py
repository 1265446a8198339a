"""DynamoDB repository for menu categories."""

import logging

from botocore.exceptions import BotoCoreError, ClientError
from mypy_boto3_dynamodb.service_resource import DynamoDBServiceResource, Table

from restaurant_site_service.models.category_models import MenuCategory
from restaurant_site_service.repositories.catalog_repositories import RepositoryError, scan_all

logger = logging.getLogger(__name__)


class MenuCategoryRepository:
    """Repository for menu categories, keyed by id."""

    def __init__(self, dynamodb_resource: DynamoDBServiceResource, table_name: str) -> None:
        """Initialize repository.

        Args:
            dynamodb_resource: Boto3 DynamoDB resource
            table_name: Name of the DynamoDB table
        """
        self.dynamodb = dynamodb_resource
        self.table_name = table_name
        self.table: Table = dynamodb_resource.Table(table_name)

    def create(self, category: MenuCategory) -> MenuCategory:
        """Store a new category.

        Args:
            category: Category to store

        Returns:
            The stored category

        Raises:
            RepositoryError: If the write fails
        """
        try:
            self.table.put_item(Item=category.to_dynamodb_item())
            return category

        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to create menu category: {e}")
            raise RepositoryError("Failed to create category") from e

    def list_all(self) -> list[MenuCategory]:
        """All categories ordered by position, then name.

        Raises:
            RepositoryError: If the scan fails
        """
        try:
            categories = [MenuCategory.from_dynamodb_item(item) for item in scan_all(self.table)]

        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to list menu categories: {e}")
            raise RepositoryError("Failed to fetch categories") from e

        return sorted(categories, key=lambda category: (category.order, category.name, category.id))
