"""Menu category models.

Categories fill the category dropdowns of the admin menu forms. Menu items
store the category label itself, so a category record is a suggestion list
entry rather than a foreign key.
"""

from datetime import datetime
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, field_validator
from pydantic.alias_generators import to_camel


class MenuCategory(BaseModel):
    """Named menu category with a display position."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(..., description="Unique category identifier")
    name: str = Field(..., description="Display name")
    slug: str | None = Field(None, description="Optional URL slug")
    order: int = Field(default=0, description="Position in category lists, ascending")
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
            "order": self.order,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

        if self.slug is not None:
            item["slug"] = self.slug

        return item

    @classmethod
    def from_dynamodb_item(cls, item: dict[str, Any]) -> "MenuCategory":
        return cls(
            id=item["id"],
            name=item["name"],
            slug=item.get("slug"),
            order=int(item.get("order", 0)),
            created_at=datetime.fromisoformat(item["created_at"]),
            updated_at=datetime.fromisoformat(item["updated_at"]),
        )


class MenuCategoryCreate(BaseModel):
    """Payload for creating a menu category."""

    model_config = ConfigDict(extra="ignore")

    name: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]
    slug: str | None = None
    order: int = 0

    @field_validator("slug", mode="before")
    @classmethod
    def blank_slug_to_none(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip() or None
        return value
