"""Main application entry point for the restaurant site service.

This module provides the FastAPI application factory and configuration
for running the service locally or in production.
"""

import logging
import os

from fastapi import FastAPI

from restaurant_site_service.bootstrap import build_services, get_dynamodb_resource, get_s3_client
from restaurant_site_service.config.settings import Settings
from restaurant_site_service.handlers.api_handler import create_app
from restaurant_site_service.observability import configure_logging, setup_observability

logger = logging.getLogger(__name__)


def create_application() -> FastAPI:
    """Create and configure the FastAPI application with all dependencies.

    Settings are validated first so a misconfigured environment fails
    before any client is created.

    Returns:
        Configured FastAPI application instance

    Raises:
        ConfigurationError: If the environment is invalid
    """
    settings = Settings.from_env()
    configure_logging(settings.log_level)

    logger.info("Initializing restaurant site service...")

    services = build_services(settings, get_dynamodb_resource(settings), get_s3_client(settings))
    logger.info("Services initialized")

    app = create_app(services)
    setup_observability(app)

    logger.info("Restaurant site service initialized successfully")
    return app


# Create the FastAPI application instance (only when not in test mode)
# This prevents the app from being created during test collection
if os.getenv("ENVIRONMENT") != "test":  # noqa: SIM108
    app = create_application()
else:
    # Create a placeholder app for test imports
    app = FastAPI()


if __name__ == "__main__":
    """Run the application with uvicorn when executed directly."""
    import uvicorn

    port = int(os.getenv("PORT", "8000"))
    host = os.getenv("HOST", "0.0.0.0")

    logger.info(f"Starting development server on {host}:{port}")
    logger.info(f"API documentation available at http://{host}:{port}/docs")

    uvicorn.run(
        "main:app",
        host=host,
        port=port,
        reload=True,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )
