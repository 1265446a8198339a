"""DynamoDB repository classes for reservations and contact messages."""

import logging
from datetime import datetime

from boto3.dynamodb.conditions import Attr
from botocore.exceptions import BotoCoreError, ClientError
from mypy_boto3_dynamodb.service_resource import DynamoDBServiceResource, Table

from restaurant_site_service.models.booking_models import (
    ContactMessage,
    Reservation,
    ReservationStatus,
)
from restaurant_site_service.repositories.catalog_repositories import (
    RepositoryError,
    is_conditional_check_failure,
    scan_all,
)

logger = logging.getLogger(__name__)


class ReservationRepository:
    """Repository for reservation CRUD operations.

    Manages reservation records in DynamoDB with id as partition key.
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

    def create(self, reservation: Reservation) -> Reservation:
        """Store a new reservation.

        Args:
            reservation: Reservation to store

        Returns:
            The stored reservation

        Raises:
            RepositoryError: If the write fails
        """
        try:
            self.table.put_item(Item=reservation.to_dynamodb_item())
            return reservation

        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to create reservation: {e}")
            raise RepositoryError("Failed to create reservation") from e

    def get(self, reservation_id: str) -> Reservation | None:
        """Retrieve a reservation by id.

        Args:
            reservation_id: Reservation identifier

        Returns:
            Reservation if found, None otherwise
        """
        try:
            response = self.table.get_item(Key={"id": reservation_id})

            if "Item" not in response:
                return None

            return Reservation.from_dynamodb_item(response["Item"])

        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to get reservation: {e}")
            raise RepositoryError("Failed to load reservation") from e

    def list_all(self) -> list[Reservation]:
        """List every reservation, newest first.

        Returns:
            list: Reservations ordered by creation time descending
        """
        try:
            reservations = [Reservation.from_dynamodb_item(item) for item in scan_all(self.table)]

        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to list reservations: {e}")
            raise RepositoryError("Failed to load reservations") from e

        return sorted(reservations, key=lambda r: (r.created_at, r.id), reverse=True)

    def update_status(
        self, reservation_id: str, status: ReservationStatus, updated_at: datetime
    ) -> Reservation | None:
        """Update the status of an existing reservation.

        Args:
            reservation_id: Reservation identifier
            status: New status
            updated_at: New update timestamp

        Returns:
            The updated reservation, or None if no reservation has this id
        """
        try:
            response = self.table.update_item(
                Key={"id": reservation_id},
                UpdateExpression="SET #status = :status, #updated_at = :updated_at",
                ConditionExpression=Attr("id").exists(),
                ExpressionAttributeNames={"#status": "status", "#updated_at": "updated_at"},
                ExpressionAttributeValues={
                    ":status": status.value,
                    ":updated_at": updated_at.isoformat(),
                },
                ReturnValues="ALL_NEW",
            )
            return Reservation.from_dynamodb_item(response["Attributes"])

        except (ClientError, BotoCoreError) as e:
            if is_conditional_check_failure(e):
                return None
            logger.error(f"Failed to update reservation status: {e}")
            raise RepositoryError("Failed to update reservation") from e


class MessageRepository:
    """Repository for contact message CRUD operations.

    Manages contact message records in DynamoDB with id as partition key.
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

    def create(self, message: ContactMessage) -> ContactMessage:
        """Store a new contact message.

        Args:
            message: Message to store

        Returns:
            The stored message
        """
        try:
            self.table.put_item(Item=message.to_dynamodb_item())
            return message

        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to create contact message: {e}")
            raise RepositoryError("Failed to send message") from e

    def get(self, message_id: str) -> ContactMessage | None:
        """Retrieve a message by id.

        Args:
            message_id: Message identifier

        Returns:
            ContactMessage if found, None otherwise
        """
        try:
            response = self.table.get_item(Key={"id": message_id})

            if "Item" not in response:
                return None

            return ContactMessage.from_dynamodb_item(response["Item"])

        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to get contact message: {e}")
            raise RepositoryError("Failed to load message") from e

    def list_all(self) -> list[ContactMessage]:
        """List every message, newest first."""
        try:
            messages = [ContactMessage.from_dynamodb_item(item) for item in scan_all(self.table)]

        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to list contact messages: {e}")
            raise RepositoryError("Failed to load messages") from e

        return sorted(messages, key=lambda m: (m.created_at, m.id), reverse=True)

    def set_read(self, message_id: str, read: bool, updated_at: datetime) -> ContactMessage | None:
        """Mark a message read or unread.

        Args:
            message_id: Message identifier
            read: New read flag
            updated_at: New update timestamp

        Returns:
            The updated message, or None if no message has this id
        """
        try:
            response = self.table.update_item(
                Key={"id": message_id},
                UpdateExpression="SET #read = :read, #updated_at = :updated_at",
                ConditionExpression=Attr("id").exists(),
                ExpressionAttributeNames={"#read": "read", "#updated_at": "updated_at"},
                ExpressionAttributeValues={":read": read, ":updated_at": updated_at.isoformat()},
                ReturnValues="ALL_NEW",
            )
            return ContactMessage.from_dynamodb_item(response["Attributes"])

        except (ClientError, BotoCoreError) as e:
            if is_conditional_check_failure(e):
                return None
            logger.error(f"Failed to update contact message: {e}")
            raise RepositoryError("Failed to update message") from e

    def delete(self, message_id: str) -> bool:
        """Delete a message.

        Args:
            message_id: Message identifier

        Returns:
            bool: True if a message was deleted, False if none had this id
        """
        try:
            self.table.delete_item(
                Key={"id": message_id},
                ConditionExpression=Attr("id").exists(),
            )
            return True

        except (ClientError, BotoCoreError) as e:
            if is_conditional_check_failure(e):
                return False
            logger.error(f"Failed to delete contact message: {e}")
            raise RepositoryError("Failed to delete message") from e
