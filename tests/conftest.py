"""Shared pytest fixtures and configuration for all tests."""

import os

# Entry-point modules skip building real clients when imported in test mode
os.environ.setdefault("ENVIRONMENT", "test")

import pytest  # noqa: E402

from catalog_factories import make_menu_item  # noqa: E402
from restaurant_site_service.auth.session_validator import SessionValidator  # noqa: E402
from restaurant_site_service.models.catalog_models import MenuItem  # noqa: E402

TEST_SESSION_SECRET = "test-session-secret-with-at-least-32-chars"


@pytest.fixture
def session_validator() -> SessionValidator:
    """Fixture providing a session validator with the test secret."""
    return SessionValidator(TEST_SESSION_SECRET)


@pytest.fixture
def admin_token(session_validator: SessionValidator) -> str:
    """Fixture providing a valid admin session token."""
    return session_validator.issue("owner@example.com", is_admin=True)


@pytest.fixture
def admin_headers(admin_token: str) -> dict[str, str]:
    """Fixture providing Authorization headers for an admin."""
    return {"Authorization": f"Bearer {admin_token}"}


@pytest.fixture
def sample_menu_items() -> list[MenuItem]:
    """Fixture providing a small mixed menu."""
    return [
        make_menu_item(1, name="Smoked Salmon Blini", category="starters", visible=False),
        make_menu_item(2, name="Salmon Teriyaki", category="mains", visible=True),
        make_menu_item(3, name="Garden Salad", category="starters", visible=False,
                       description="Leaves with salmon roe"),
        make_menu_item(4, name="Lamb Shank", category="mains", visible=False),
        make_menu_item(5, name="Espresso", category="  ", visible=True),
    ]


@pytest.fixture
def sample_storage_endpoint() -> str:
    """Fixture providing an S3 endpoint in the storage provider's format."""
    return "https://proj.storage.supabase.co/storage/v1/s3"


@pytest.fixture
def mock_eventbridge_event() -> dict:
    """Fixture providing a sample scheduled storage sweep event."""
    return {
        "version": "0",
        "id": "event_123",
        "detail-type": "StorageSweep",
        "source": "com.restaurant.site",
        "account": "123456789012",
        "time": "2025-03-02T03:00:00Z",
        "region": "us-east-1",
        "resources": [],
        "detail": {"requested_at": "2025-03-02T03:00:00Z"},
    }
