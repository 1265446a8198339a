"""Shared dependency factory for Lambda handlers.

Dependencies are created once and reused across invocations within the same
Lambda container.
"""

import logging

from fastapi import FastAPI

from restaurant_site_service.bootstrap import (
    SiteServices,
    build_services,
    get_dynamodb_resource,
    get_s3_client,
)
from restaurant_site_service.config.settings import Settings
from restaurant_site_service.handlers.api_handler import create_app
from restaurant_site_service.handlers.event_handler import SweepEventHandler
from restaurant_site_service.observability import configure_logging, setup_observability

logger = logging.getLogger(__name__)

# Module-level caches for Lambda container reuse
_settings: Settings | None = None
_services: SiteServices | None = None
_event_handler: SweepEventHandler | None = None
_fastapi_app: FastAPI | None = None


def get_settings() -> Settings:
    """Load or retrieve cached settings.

    Raises:
        ConfigurationError: If the environment is invalid
    """
    global _settings

    if _settings is None:
        _settings = Settings.from_env()

    return _settings


def get_services() -> SiteServices:
    """Create or retrieve cached services.

    Returns:
        SiteServices wired to DynamoDB and object storage
    """
    global _services

    if _services is not None:
        return _services

    settings = get_settings()
    _services = build_services(settings, get_dynamodb_resource(settings), get_s3_client(settings))

    logger.info("Site services initialized")
    return _services


def get_event_handler() -> SweepEventHandler:
    """Create or retrieve cached event handler."""
    global _event_handler

    if _event_handler is not None:
        return _event_handler

    services = get_services()
    _event_handler = SweepEventHandler(
        storage_sweeper=services.storage_sweeper,
        counter_reconciler=services.counter_reconciler,
    )

    logger.info("Event handler initialized")
    return _event_handler


def get_fastapi_app() -> FastAPI:
    """Create or retrieve cached FastAPI application.

    Returns:
        Configured FastAPI application instance
    """
    global _fastapi_app

    if _fastapi_app is not None:
        return _fastapi_app

    _fastapi_app = create_app(get_services())
    setup_observability(_fastapi_app)

    logger.info("FastAPI application initialized")
    return _fastapi_app


def initialize_lambda_environment() -> None:
    """Initialize Lambda environment with validated settings and logging.

    Should be called once during Lambda cold start.
    """
    settings = get_settings()
    configure_logging(settings.log_level)

    logger.info("Lambda environment initialized")
