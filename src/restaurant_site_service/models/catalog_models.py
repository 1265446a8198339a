"""Catalog data models.

Menu items and gallery images are the two record kinds shown on the public
site and managed from the admin dashboard. Records are stored in DynamoDB in
snake_case and exposed over the API in camelCase.
"""

from datetime import datetime
from decimal import Decimal
from typing import Annotated, Any, ClassVar
from urllib.parse import urlparse

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PlainSerializer,
    StringConstraints,
    field_serializer,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

LEGACY_STORAGE_HOST_SUFFIX = ".storage.supabase.co"
PUBLIC_STORAGE_HOST_SUFFIX = ".supabase.co"

Price = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]
RequiredText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


def normalize_image_url(url: str | None) -> str | None:
    """Rewrite legacy storage hostnames to their public equivalent.

    Args:
        url: Stored image URL

    Returns:
        The URL with a public hostname, the input unchanged if it is not a
        parseable URL, or None for empty input
    """
    if not url:
        return None

    parsed = urlparse(url)
    if not parsed.scheme or not parsed.hostname:
        return url

    if LEGACY_STORAGE_HOST_SUFFIX in parsed.netloc:
        netloc = parsed.netloc.replace(LEGACY_STORAGE_HOST_SUFFIX, PUBLIC_STORAGE_HOST_SUFFIX)
        return parsed._replace(netloc=netloc).geturl()

    return url


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


def _validate_http_url(value: str | None) -> str | None:
    if value is None:
        return None
    parsed = urlparse(value)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError("Image URL must be a valid http(s) URL.")
    return value


class CatalogRecord(BaseModel):
    """Fields shared by every record a listing can project."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    search_fields: ClassVar[tuple[str, ...]] = ("category",)

    id: str = Field(..., description="Unique record identifier")
    category: str = Field(..., description="Free-text category label")
    image_url: str | None = Field(None, description="Public URL of the stored image")
    visible: bool = Field(default=True, description="Whether the record appears publicly")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")

    @field_serializer("image_url", when_used="json")
    def serialize_image_url(self, value: str | None) -> str | None:
        """Expose stored image URLs with their public hostname."""
        return normalize_image_url(value)

    @property
    def sort_name(self) -> str:
        """Secondary sort label used after the category, compared case-sensitively."""
        return ""

    def matches_search(self, term: str) -> bool:
        """Check whether a lower-cased term occurs in any searchable field.

        Args:
            term: Lower-cased search term

        Returns:
            True if any searchable field contains the term
        """
        for field_name in self.search_fields:
            value = getattr(self, field_name, None)
            if value and term in value.lower():
                return True
        return False


class MenuItem(CatalogRecord):
    """Menu item model."""

    search_fields: ClassVar[tuple[str, ...]] = ("name", "category", "description")

    name: str = Field(..., description="Item name")
    description: str | None = Field(None, description="Item description")
    price: Price = Field(..., description="Item price", ge=0)

    @property
    def sort_name(self) -> str:
        return self.name

    def to_dynamodb_item(self) -> dict[str, Any]:
        """Convert to DynamoDB item format.

        Returns:
            dict: DynamoDB-compatible representation
        """
        item: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "price": self.price,
            "category": self.category,
            "visible": self.visible,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

        if self.description is not None:
            item["description"] = self.description

        if self.image_url is not None:
            item["image_url"] = self.image_url

        return item

    @classmethod
    def from_dynamodb_item(cls, item: dict[str, Any]) -> "MenuItem":
        """Create MenuItem from DynamoDB item.

        Args:
            item: DynamoDB item dictionary

        Returns:
            MenuItem: Parsed model instance
        """
        return cls(
            id=item["id"],
            name=item["name"],
            description=item.get("description"),
            price=Decimal(str(item["price"])),
            category=item.get("category", ""),
            image_url=item.get("image_url"),
            visible=item.get("visible", True) is not False,
            created_at=datetime.fromisoformat(item["created_at"]),
            updated_at=datetime.fromisoformat(item["updated_at"]),
        )


class GalleryItem(CatalogRecord):
    """Gallery image model."""

    search_fields: ClassVar[tuple[str, ...]] = ("category", "caption")

    caption: str | None = Field(None, description="Optional caption")
    image_url: str = Field(..., description="Public URL of the stored image", min_length=1)

    @property
    def sort_name(self) -> str:
        return self.caption or ""

    def to_dynamodb_item(self) -> dict[str, Any]:
        """Convert to DynamoDB item format.

        Returns:
            dict: DynamoDB-compatible representation
        """
        item: dict[str, Any] = {
            "id": self.id,
            "category": self.category,
            "image_url": self.image_url,
            "visible": self.visible,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

        if self.caption is not None:
            item["caption"] = self.caption

        return item

    @classmethod
    def from_dynamodb_item(cls, item: dict[str, Any]) -> "GalleryItem":
        """Create GalleryItem from DynamoDB item.

        A stored item without a visibility flag is treated as visible.

        Args:
            item: DynamoDB item dictionary

        Returns:
            GalleryItem: Parsed model instance
        """
        return cls(
            id=item["id"],
            category=item.get("category", ""),
            caption=item.get("caption"),
            image_url=item["image_url"],
            visible=item.get("visible", True) is not False,
            created_at=datetime.fromisoformat(item["created_at"]),
            updated_at=datetime.fromisoformat(item["updated_at"]),
        )


class _Payload(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    required_when_present: ClassVar[tuple[str, ...]] = ()

    @model_validator(mode="after")
    def reject_null_required_fields(self) -> "_Payload":
        for field_name in self.required_when_present:
            if field_name in self.model_fields_set and getattr(self, field_name) is None:
                raise ValueError(f"{to_camel(field_name)} cannot be null.")
        return self

    def changes(self) -> dict[str, Any]:
        """Fields explicitly supplied by the caller, keyed by attribute name."""
        return self.model_dump(exclude_unset=True)


class _PartialPayload(_Payload):
    @model_validator(mode="after")
    def require_any_field(self) -> "_PartialPayload":
        if not self.model_fields_set:
            raise ValueError("Provide at least one field to update.")
        return self


class MenuItemCreate(_Payload):
    """Payload for creating a menu item."""

    name: RequiredText
    description: str | None = None
    price: Decimal = Field(..., ge=0)
    category: RequiredText
    image_url: str | None = None
    visible: bool = True

    strip_blank = field_validator("description", "image_url", mode="before")(_blank_to_none)
    check_url = field_validator("image_url")(_validate_http_url)


class MenuItemUpdate(_PartialPayload):
    """Payload for partially updating a menu item."""

    required_when_present: ClassVar[tuple[str, ...]] = ("name", "price", "category", "visible")

    name: RequiredText | None = None
    description: str | None = None
    price: Decimal | None = Field(None, ge=0)
    category: RequiredText | None = None
    image_url: str | None = None
    visible: bool | None = None

    strip_blank = field_validator("description", "image_url", mode="before")(_blank_to_none)
    check_url = field_validator("image_url")(_validate_http_url)


class GalleryItemCreate(_Payload):
    """Payload for creating a gallery item."""

    category: RequiredText
    caption: str | None = None
    image_url: RequiredText
    visible: bool = True

    strip_blank = field_validator("caption", mode="before")(_blank_to_none)
    check_url = field_validator("image_url")(_validate_http_url)


class GalleryItemUpdate(_PartialPayload):
    """Payload for partially updating a gallery item."""

    required_when_present: ClassVar[tuple[str, ...]] = ("category", "image_url", "visible")

    category: RequiredText | None = None
    caption: str | None = None
    image_url: RequiredText | None = None
    visible: bool | None = None

    strip_blank = field_validator("caption", mode="before")(_blank_to_none)
    check_url = field_validator("image_url")(_validate_http_url)
