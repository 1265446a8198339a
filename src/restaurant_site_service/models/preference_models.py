"""Admin dashboard preference models."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class AdminPreferences(BaseModel):
    """UI preferences persisted per admin account."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    sidebar_collapsed: bool = Field(default=False, description="Whether the admin sidebar is collapsed")

    def to_dynamodb_item(self, email: str) -> dict[str, Any]:
        """Convert to DynamoDB item format keyed by admin email."""
        return {"email": email, "sidebar_collapsed": self.sidebar_collapsed}

    @classmethod
    def from_dynamodb_item(cls, item: dict[str, Any]) -> "AdminPreferences":
        """Create AdminPreferences from DynamoDB item."""
        return cls(sidebar_collapsed=bool(item.get("sidebar_collapsed", False)))
