"""Construction of AWS clients, repositories and services from settings."""

import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Any

import boto3
from botocore.config import Config

from restaurant_site_service.auth.action_links import ActionLinkSigner
from restaurant_site_service.auth.session_validator import SessionValidator
from restaurant_site_service.config.settings import Settings
from restaurant_site_service.models.catalog_models import GalleryItem, MenuItem
from restaurant_site_service.repositories.booking_repositories import (
    MessageRepository,
    ReservationRepository,
)
from restaurant_site_service.repositories.catalog_repositories import (
    CategoryCountRepository,
    GalleryItemRepository,
    MenuItemRepository,
)
from restaurant_site_service.repositories.category_repository import MenuCategoryRepository
from restaurant_site_service.repositories.preference_repository import PreferenceRepository
from restaurant_site_service.services.catalog_service import CatalogService
from restaurant_site_service.services.category_aggregation import (
    CounterReconciler,
    CounterTableAggregator,
)
from restaurant_site_service.services.email_client import EmailClient
from restaurant_site_service.services.email_templates import TemplateRenderer
from restaurant_site_service.services.listing_projector import (
    ADMIN_GALLERY,
    ADMIN_MENU,
    PUBLIC_GALLERY,
    PUBLIC_MENU,
    ListingProjector,
)
from restaurant_site_service.services.message_service import MessageService
from restaurant_site_service.services.reservation_service import ReservationService
from restaurant_site_service.services.storage_client import StorageClient
from restaurant_site_service.services.storage_sweeper import StorageSweeper

logger = logging.getLogger(__name__)

MENU_LISTING = "menu"
GALLERY_LISTING = "gallery"


@dataclass
class SiteServices:
    """Everything the HTTP and event handlers need, built once per process."""

    session_validator: SessionValidator
    admin_gallery: ListingProjector[GalleryItem]
    public_gallery: ListingProjector[GalleryItem]
    admin_menu: ListingProjector[MenuItem]
    public_menu: ListingProjector[MenuItem]
    gallery_service: CatalogService[GalleryItem]
    menu_service: CatalogService[MenuItem]
    reservation_service: ReservationService
    message_service: MessageService
    preference_repository: PreferenceRepository
    category_repository: MenuCategoryRepository
    storage: StorageClient
    storage_sweeper: StorageSweeper
    counter_reconciler: CounterReconciler | None = None


def get_dynamodb_resource(settings: Settings) -> Any:
    """Create the DynamoDB resource for the configured region or local endpoint.

    Args:
        settings: Service settings

    Returns:
        Boto3 DynamoDB resource
    """
    if settings.dynamodb_endpoint:
        logger.info(f"Using local DynamoDB at {settings.dynamodb_endpoint}")
        return boto3.resource(
            "dynamodb",
            endpoint_url=settings.dynamodb_endpoint,
            region_name=settings.aws_region,
        )

    logger.info(f"Using AWS DynamoDB in region {settings.aws_region}")
    return boto3.resource("dynamodb", region_name=settings.aws_region)


def get_s3_client(settings: Settings) -> Any:
    """Create the S3 client for the image store.

    The store only supports path-style addressing; virtual-host style would
    put the bucket name into the TLS hostname.

    Args:
        settings: Service settings

    Returns:
        Boto3 S3 client
    """
    return boto3.client(
        "s3",
        endpoint_url=settings.storage_endpoint_url,
        region_name=settings.storage_region,
        aws_access_key_id=settings.storage_access_key_id,
        aws_secret_access_key=settings.storage_secret_access_key,
        config=Config(s3={"addressing_style": "path"}),
    )


def build_services(settings: Settings, dynamodb_resource: Any, s3_client: Any) -> SiteServices:
    """Wire repositories and services together.

    Args:
        settings: Service settings
        dynamodb_resource: Boto3 DynamoDB resource
        s3_client: Boto3 S3 client

    Returns:
        SiteServices ready to hand to the app or event handler
    """
    menu_repository = MenuItemRepository(dynamodb_resource, settings.menu_items_table)
    gallery_repository = GalleryItemRepository(dynamodb_resource, settings.gallery_items_table)

    counters: CategoryCountRepository | None = None
    if settings.category_counts_table:
        counters = CategoryCountRepository(dynamodb_resource, settings.category_counts_table)
    else:
        logger.info("No category counter table configured, category counts will use scans")

    def counter_aggregator(listing: str) -> CounterTableAggregator | None:
        return CounterTableAggregator(counters, listing) if counters is not None else None

    storage = StorageClient(
        s3_client,
        bucket=settings.storage_bucket,
        endpoint_url=settings.storage_endpoint_url,
        public_base_url=settings.storage_public_base_url,
    )

    email_client = EmailClient(
        api_key=settings.email_api_key,
        sender=settings.email_from,
        base_url=settings.email_api_base_url,
    )
    if not email_client.enabled:
        logger.warning("EMAIL_API_KEY not configured, reservation emails will not be sent")

    reservation_service = ReservationService(
        repository=ReservationRepository(dynamodb_resource, settings.reservations_table),
        email_client=email_client,
        renderer=TemplateRenderer(),
        link_signer=ActionLinkSigner(settings.session_secret, settings.public_base_url),
        admin_email=settings.admin_email,
    )

    logger.info(
        f"Repositories configured - menu: {settings.menu_items_table}, "
        f"gallery: {settings.gallery_items_table}"
    )

    return SiteServices(
        session_validator=SessionValidator(settings.session_secret),
        admin_gallery=ListingProjector(ADMIN_GALLERY, gallery_repository, counter_aggregator(GALLERY_LISTING)),
        public_gallery=ListingProjector(PUBLIC_GALLERY, gallery_repository, counter_aggregator(GALLERY_LISTING)),
        admin_menu=ListingProjector(ADMIN_MENU, menu_repository, counter_aggregator(MENU_LISTING)),
        public_menu=ListingProjector(PUBLIC_MENU, menu_repository, counter_aggregator(MENU_LISTING)),
        gallery_service=CatalogService(GALLERY_LISTING, gallery_repository, storage, counters),
        menu_service=CatalogService(MENU_LISTING, menu_repository, storage, counters),
        reservation_service=reservation_service,
        message_service=MessageService(MessageRepository(dynamodb_resource, settings.messages_table)),
        preference_repository=PreferenceRepository(dynamodb_resource, settings.preferences_table),
        category_repository=MenuCategoryRepository(dynamodb_resource, settings.categories_table),
        storage=storage,
        storage_sweeper=StorageSweeper(
            storage,
            [menu_repository, gallery_repository],
            grace_period=timedelta(hours=settings.orphan_grace_hours),
        ),
        counter_reconciler=(
            CounterReconciler(counters, {MENU_LISTING: menu_repository, GALLERY_LISTING: gallery_repository})
            if counters is not None
            else None
        ),
    )
