"""DynamoDB repository for admin dashboard preferences."""

import logging

from botocore.exceptions import BotoCoreError, ClientError
from mypy_boto3_dynamodb.service_resource import DynamoDBServiceResource, Table

from restaurant_site_service.models.preference_models import AdminPreferences
from restaurant_site_service.repositories.catalog_repositories import RepositoryError

logger = logging.getLogger(__name__)


class PreferenceRepository:
    """Repository for per-admin preferences, keyed by admin email."""

    def __init__(self, dynamodb_resource: DynamoDBServiceResource, table_name: str) -> None:
        """Initialize repository.

        Args:
            dynamodb_resource: Boto3 DynamoDB resource
            table_name: Name of the DynamoDB table
        """
        self.dynamodb = dynamodb_resource
        self.table_name = table_name
        self.table: Table = dynamodb_resource.Table(table_name)

    def get(self, email: str) -> AdminPreferences:
        """Load preferences for an admin, falling back to defaults.

        Args:
            email: Admin email address

        Returns:
            AdminPreferences (defaults when nothing is stored)
        """
        try:
            response = self.table.get_item(Key={"email": email})

            if "Item" not in response:
                return AdminPreferences()

            return AdminPreferences.from_dynamodb_item(response["Item"])

        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to get admin preferences: {e}")
            raise RepositoryError("Failed to load preferences") from e

    def save(self, email: str, preferences: AdminPreferences) -> AdminPreferences:
        """Store preferences for an admin.

        Args:
            email: Admin email address
            preferences: Preferences to store

        Returns:
            The stored preferences
        """
        try:
            self.table.put_item(Item=preferences.to_dynamodb_item(email))
            return preferences

        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to save admin preferences: {e}")
            raise RepositoryError("Failed to save preferences") from e
