"""Reservation and contact message models.

Reservations are submitted by visitors and approved or rejected by an admin.
Contact messages are submitted through the public contact form and triaged
from the admin inbox.
"""

from datetime import date, datetime
from enum import Enum
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, EmailStr, Field, StringConstraints, field_validator
from pydantic.alias_generators import to_camel


class ReservationStatus(str, Enum):
    """Enumeration of reservation status values."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


DECISION_STATUSES = (ReservationStatus.APPROVED, ReservationStatus.REJECTED)


class Reservation(BaseModel):
    """Table reservation request."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(..., description="Unique reservation identifier")
    name: str = Field(..., description="Guest name")
    phone: str = Field(..., description="Guest phone number")
    email: str = Field(..., description="Guest email address")
    reservation_date: date = Field(..., alias="date", description="Requested date")
    time: str = Field(..., description="Requested time slot")
    comments: str | None = Field(None, description="Guest comments")
    status: ReservationStatus = Field(default=ReservationStatus.PENDING)
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")

    def to_dynamodb_item(self) -> dict[str, Any]:
        """Convert to DynamoDB item format.

        Returns:
            dict: DynamoDB-compatible representation
        """
        item: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "phone": self.phone,
            "email": self.email,
            "date": self.reservation_date.isoformat(),
            "time": self.time,
            "status": self.status.value,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

        if self.comments is not None:
            item["comments"] = self.comments

        return item

    @classmethod
    def from_dynamodb_item(cls, item: dict[str, Any]) -> "Reservation":
        """Create Reservation from DynamoDB item.

        Args:
            item: DynamoDB item dictionary

        Returns:
            Reservation: Parsed model instance
        """
        return cls(
            id=item["id"],
            name=item["name"],
            phone=item["phone"],
            email=item["email"],
            reservation_date=date.fromisoformat(item["date"]),
            time=item["time"],
            comments=item.get("comments"),
            status=ReservationStatus(item.get("status", ReservationStatus.PENDING.value)),
            created_at=datetime.fromisoformat(item["created_at"]),
            updated_at=datetime.fromisoformat(item["updated_at"]),
        )


class ReservationCreate(BaseModel):
    """Payload submitted by the public reservation form."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
    phone: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
    email: EmailStr
    reservation_date: date = Field(..., alias="date")
    time: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
    comments: Annotated[str, StringConstraints(strip_whitespace=True)] | None = None

    @field_validator("reservation_date", mode="before")
    @classmethod
    def drop_time_component(cls, value: Any) -> Any:
        """Accept full ISO timestamps from date pickers by keeping the date part."""
        if isinstance(value, str) and "T" in value:
            return value.split("T", 1)[0]
        return value


class ReservationStatusUpdate(BaseModel):
    """Payload for an admin approve/reject decision."""

    status: ReservationStatus

    def is_decision(self) -> bool:
        """Only approve and reject are accepted from the dashboard."""
        return self.status in DECISION_STATUSES


class ReservationDecision(Reservation):
    """Reservation returned after a status change, with email outcome."""

    email_sent: bool = Field(..., description="Whether the guest notification was delivered")


class ContactMessage(BaseModel):
    """Message submitted through the public contact form."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(..., description="Unique message identifier")
    name: str = Field(..., description="Sender name")
    email: str = Field(..., description="Sender email address")
    subject: str = Field(..., description="Message subject")
    message: str = Field(..., description="Message body")
    read: bool = Field(default=False, description="Whether an admin has read the message")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")

    def to_dynamodb_item(self) -> dict[str, Any]:
        """Convert to DynamoDB item format.

        Returns:
            dict: DynamoDB-compatible representation
        """
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "subject": self.subject,
            "message": self.message,
            "read": self.read,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dynamodb_item(cls, item: dict[str, Any]) -> "ContactMessage":
        """Create ContactMessage from DynamoDB item.

        Args:
            item: DynamoDB item dictionary

        Returns:
            ContactMessage: Parsed model instance
        """
        return cls(
            id=item["id"],
            name=item["name"],
            email=item["email"],
            subject=item["subject"],
            message=item["message"],
            read=bool(item.get("read", False)),
            created_at=datetime.fromisoformat(item["created_at"]),
            updated_at=datetime.fromisoformat(item["updated_at"]),
        )


class MessageCreate(BaseModel):
    """Payload submitted by the public contact form."""

    model_config = ConfigDict(extra="ignore")

    name: Annotated[str, StringConstraints(strip_whitespace=True, min_length=2, max_length=100)]
    email: EmailStr
    subject: Annotated[str, StringConstraints(strip_whitespace=True, min_length=3, max_length=200)]
    message: Annotated[str, StringConstraints(strip_whitespace=True, min_length=10, max_length=5000)]


class MessageReadUpdate(BaseModel):
    """Payload for marking a message read or unread."""

    read: bool
