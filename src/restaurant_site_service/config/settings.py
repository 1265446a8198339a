"""Environment configuration.

All settings come from environment variables and are validated together at
startup, so a misconfigured deployment fails once with every problem listed
instead of failing on first use.
"""

import os
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator


class ConfigurationError(Exception):
    """Raised when the environment does not describe a usable configuration."""


def _is_http_url(value: str) -> bool:
    return value.startswith(("http://", "https://")) and len(value.split("://", 1)[1]) > 0


class Settings(BaseModel):
    """Validated service configuration, one field per environment variable."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    environment: str = Field("development", alias="ENVIRONMENT")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    aws_region: str = Field("us-east-1", alias="AWS_REGION")
    dynamodb_endpoint: str | None = Field(None, alias="DYNAMODB_ENDPOINT")

    menu_items_table: str = Field("restaurant-menu-items", alias="DYNAMODB_MENU_ITEMS_TABLE")
    gallery_items_table: str = Field("restaurant-gallery-items", alias="DYNAMODB_GALLERY_ITEMS_TABLE")
    category_counts_table: str | None = Field(None, alias="DYNAMODB_CATEGORY_COUNTS_TABLE")
    reservations_table: str = Field("restaurant-reservations", alias="DYNAMODB_RESERVATIONS_TABLE")
    messages_table: str = Field("restaurant-messages", alias="DYNAMODB_MESSAGES_TABLE")
    preferences_table: str = Field("restaurant-admin-preferences", alias="DYNAMODB_PREFERENCES_TABLE")
    categories_table: str = Field("restaurant-menu-categories", alias="DYNAMODB_CATEGORIES_TABLE")

    session_secret: str = Field(..., alias="SESSION_SECRET")

    storage_endpoint_url: str = Field(..., alias="STORAGE_ENDPOINT_URL")
    storage_region: str = Field(..., alias="STORAGE_REGION", min_length=1)
    storage_access_key_id: str = Field(..., alias="STORAGE_ACCESS_KEY_ID", min_length=1)
    storage_secret_access_key: str = Field(..., alias="STORAGE_SECRET_ACCESS_KEY", min_length=1)
    storage_bucket: str = Field("flamingo-cafe", alias="STORAGE_BUCKET", min_length=1)
    storage_public_base_url: str | None = Field(None, alias="STORAGE_PUBLIC_BASE_URL")

    email_api_key: str | None = Field(None, alias="EMAIL_API_KEY")
    email_api_base_url: str = Field("https://api.resend.com", alias="EMAIL_API_BASE_URL")
    email_from: str = Field("Reservation System <onboarding@resend.dev>", alias="EMAIL_FROM")
    admin_email: str | None = Field(None, alias="ADMIN_EMAIL")
    public_base_url: str = Field("http://localhost:8000", alias="PUBLIC_BASE_URL")

    orphan_grace_hours: int = Field(24, alias="ORPHAN_GRACE_HOURS", ge=0)

    @field_validator("session_secret")
    @classmethod
    def check_session_secret(cls, value: str) -> str:
        if len(value) < 32:
            raise ValueError("SESSION_SECRET must be at least 32 characters")
        return value

    @field_validator(
        "storage_endpoint_url",
        "storage_public_base_url",
        "email_api_base_url",
        "public_base_url",
    )
    @classmethod
    def check_url(cls, value: str | None) -> str | None:
        if value is not None and not _is_http_url(value):
            raise ValueError("must be a valid http(s) URL")
        return value

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        """Build settings from environment variables.

        Empty variables are treated as unset.

        Args:
            environ: Variables to read (defaults to os.environ)

        Returns:
            Settings: Validated configuration

        Raises:
            ConfigurationError: Listing every invalid or missing variable
        """
        source = os.environ if environ is None else environ
        aliases = {field.alias for field in cls.model_fields.values() if field.alias}
        values: dict[str, Any] = {
            name: value for name, value in source.items() if name in aliases and value != ""
        }

        try:
            return cls.model_validate(values)
        except ValidationError as e:
            lines = ["Environment configuration is invalid:"]
            for error in e.errors():
                location = ".".join(str(part) for part in error["loc"]) or "<root>"
                lines.append(f"- {location}: {error['msg']}")
            raise ConfigurationError("\n".join(lines)) from e

