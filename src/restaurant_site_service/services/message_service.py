"""Service for contact form messages."""

import logging
from datetime import UTC, datetime
from uuid import uuid4

from restaurant_site_service.models.booking_models import ContactMessage, MessageCreate
from restaurant_site_service.repositories.booking_repositories import MessageRepository

logger = logging.getLogger(__name__)


class MessageService:
    """Stores contact messages and serves the admin inbox."""

    def __init__(self, repository: MessageRepository) -> None:
        """Initialize the service.

        Args:
            repository: Message repository
        """
        self.repository = repository

    async def submit(self, payload: MessageCreate) -> ContactMessage:
        """Store a message from the public contact form.

        Args:
            payload: Validated form payload

        Returns:
            The stored message (unread)
        """
        now = datetime.now(UTC)
        message = ContactMessage(
            id=uuid4().hex,
            name=payload.name,
            email=payload.email,
            subject=payload.subject,
            message=payload.message,
            read=False,
            created_at=now,
            updated_at=now,
        )

        created = self.repository.create(message)
        logger.info(f"Received contact message {created.id}")
        return created

    async def list_messages(self) -> list[ContactMessage]:
        """All messages, newest first."""
        return self.repository.list_all()

    async def get(self, message_id: str) -> ContactMessage | None:
        return self.repository.get(message_id)

    async def mark_read(self, message_id: str, read: bool) -> ContactMessage | None:
        """Set the read flag on a message.

        Args:
            message_id: Message identifier
            read: New read flag

        Returns:
            The updated message, or None if not found
        """
        return self.repository.set_read(message_id, read, datetime.now(UTC))

    async def delete(self, message_id: str) -> bool:
        """Delete a message; False when it does not exist."""
        deleted = self.repository.delete(message_id)
        if deleted:
            logger.info(f"Deleted contact message {message_id}")
        return deleted
