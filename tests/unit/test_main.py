"""Unit tests for main application entry point."""

import os
from unittest.mock import MagicMock, Mock, patch

import pytest
from fastapi import FastAPI

from main import create_application
from restaurant_site_service.config.settings import ConfigurationError


@pytest.mark.unit
class TestCreateApplication:
    """Tests for create_application function."""

    @patch("main.setup_observability")
    @patch("main.get_s3_client")
    @patch("main.get_dynamodb_resource")
    @patch("main.build_services")
    @patch("main.configure_logging")
    @patch("main.Settings")
    def test_wires_services_into_app(
        self,
        mock_settings: Mock,
        mock_configure_logging: Mock,
        mock_build: Mock,
        mock_dynamodb: Mock,
        mock_s3: Mock,
        mock_observability: Mock,
    ) -> None:
        """Test that the app is built from validated settings."""
        settings = MagicMock(log_level="WARNING")
        mock_settings.from_env.return_value = settings
        services = MagicMock()
        mock_build.return_value = services

        app = create_application()

        assert isinstance(app, FastAPI)
        assert app.state.services is services
        mock_configure_logging.assert_called_once_with("WARNING")
        mock_dynamodb.assert_called_once_with(settings)
        mock_s3.assert_called_once_with(settings)
        mock_build.assert_called_once_with(settings, mock_dynamodb.return_value, mock_s3.return_value)
        mock_observability.assert_called_once_with(app)

    @patch.dict(os.environ, {}, clear=True)
    @patch("main.build_services")
    def test_fails_before_building_clients(self, mock_build: Mock) -> None:
        """Test that a misconfigured environment fails before any client is created."""
        with pytest.raises(ConfigurationError):
            create_application()

        mock_build.assert_not_called()

    def test_health_route_registered(self) -> None:
        with (
            patch("main.Settings") as mock_settings,
            patch("main.get_dynamodb_resource"),
            patch("main.get_s3_client"),
            patch("main.build_services", return_value=MagicMock()),
            patch("main.setup_observability"),
            patch("main.configure_logging"),
        ):
            mock_settings.from_env.return_value = MagicMock(log_level="INFO")
            app = create_application()

        paths = {route.path for route in app.routes}
        assert "/health" in paths
        assert "/api/menu/public" in paths
        assert "/api/reservations-admin/{reservation_id}" in paths
