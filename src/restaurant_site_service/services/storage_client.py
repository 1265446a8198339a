"""Client for the S3-compatible object store holding menu and gallery images."""

import logging
import re
import uuid
from collections.abc import Iterator
from dataclasses import dataclass
from datetime import UTC, datetime
from urllib.parse import urlparse

from botocore.exceptions import BotoCoreError, ClientError
from mypy_boto3_s3.client import S3Client

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"
DEFAULT_BASENAME = "image"


class StorageError(Exception):
    """Raised when the object store rejects or fails a request."""


@dataclass(frozen=True)
class StoredObject:
    """An object written to storage.

    Attributes:
        key: Object key inside the bucket
        url: Public URL the object is served from
    """

    key: str
    url: str


@dataclass(frozen=True)
class ObjectListing:
    """An entry returned by a bucket listing."""

    key: str
    last_modified: datetime


def slugify_filename(filename: str) -> tuple[str, str]:
    """Split an upload filename into a URL-safe base name and lower-case extension.

    Args:
        filename: Client-supplied filename

    Returns:
        tuple: (slug, extension including the dot, or "")
    """
    trimmed = filename.strip().lower()
    dot = trimmed.rfind(".")
    extension = re.sub(r"[^a-z0-9.]", "", trimmed[dot:]) if dot > -1 else ""
    if extension == ".":
        extension = ""
    base = trimmed[:dot] if dot > 0 else trimmed

    slug = re.sub(r"[^a-z0-9]+", "-", base).strip("-")
    return slug or DEFAULT_BASENAME, extension


def build_object_key(prefix: str, filename: str, now: datetime | None = None) -> str:
    """Build a unique object key: <prefix>/<yyyy-mm-dd>/<uuid>-<slug><ext>.

    Args:
        prefix: Top-level folder (e.g., "menu", "gallery")
        filename: Client-supplied filename
        now: Upload time (defaults to the current UTC time)

    Returns:
        str: Object key
    """
    slug, extension = slugify_filename(filename)
    date_prefix = (now or datetime.now(UTC)).date().isoformat()
    return f"{prefix}/{date_prefix}/{uuid.uuid4()}-{slug}{extension}"


def derive_public_base_url(endpoint_url: str) -> str:
    """Derive the public object URL base from an S3 API endpoint.

    The storage provider serves S3 under ``<project>.storage.<host>/.../s3``
    and public objects under ``<project>.<host>/.../object/public``.

    Args:
        endpoint_url: S3 API endpoint

    Returns:
        str: Base URL without a trailing slash
    """
    parsed = urlparse(endpoint_url)
    netloc = parsed.netloc.replace(".storage.", ".")
    path = re.sub(r"/s3/?$", "/object/public", parsed.path).rstrip("/")
    return f"{parsed.scheme}://{netloc}{path}"


class StorageClient:
    """Uploads, deletes and lists objects in a single bucket.

    Failures are logged and raised as StorageError; callers decide whether
    the failure is fatal (uploads) or best-effort (cleanup).
    """

    def __init__(
        self,
        s3_client: S3Client,
        bucket: str,
        endpoint_url: str,
        public_base_url: str | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            s3_client: Boto3 S3 client configured for path-style addressing
            bucket: Bucket holding site images
            endpoint_url: S3 API endpoint, used to derive public URLs
            public_base_url: Explicit public URL base, overriding derivation
        """
        self.s3 = s3_client
        self.bucket = bucket
        self.public_base_url = (public_base_url or derive_public_base_url(endpoint_url)).rstrip("/")

    def public_url(self, key: str) -> str:
        """Public URL of an object key."""
        return f"{self.public_base_url}/{self.bucket}/{key}"

    def key_from_url(self, url: str | None) -> str | None:
        """Recover the object key from a public URL served from this bucket.

        Legacy ``.storage.`` hostnames are accepted as well.

        Args:
            url: Public image URL stored on a record

        Returns:
            The object key, or None when the URL does not point into the bucket
        """
        if not url:
            return None

        parsed = urlparse(url)
        base = urlparse(self.public_base_url)
        if parsed.netloc.replace(".storage.", ".") != base.netloc:
            return None

        marker = f"{base.path}/{self.bucket}/"
        if not parsed.path.startswith(marker):
            return None

        key = parsed.path[len(marker) :]
        return key or None

    def upload(self, prefix: str, filename: str, body: bytes, content_type: str | None) -> StoredObject:
        """Store an uploaded file under a fresh key.

        Args:
            prefix: Top-level folder for the key
            filename: Client-supplied filename
            body: File contents
            content_type: Client-supplied MIME type

        Returns:
            StoredObject with the key and public URL

        Raises:
            StorageError: If the upload fails
        """
        key = build_object_key(prefix, filename or "image.jpg")

        try:
            self.s3.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=body,
                ContentType=content_type or DEFAULT_CONTENT_TYPE,
            )

        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to upload object {key}: {e}")
            raise StorageError("Failed to upload image") from e

        logger.info(f"Uploaded object {key}", extra={"bucket": self.bucket, "size": len(body)})
        return StoredObject(key=key, url=self.public_url(key))

    def delete(self, key: str) -> None:
        """Delete an object.

        Args:
            key: Object key

        Raises:
            StorageError: If the delete fails
        """
        try:
            self.s3.delete_object(Bucket=self.bucket, Key=key)

        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to delete object {key}: {e}")
            raise StorageError("Failed to delete image") from e

    def list_objects(self, prefix: str) -> Iterator[ObjectListing]:
        """List every object under a prefix.

        Args:
            prefix: Key prefix (e.g., "menu/")

        Yields:
            ObjectListing entries

        Raises:
            StorageError: If the listing fails
        """
        paginator = self.s3.get_paginator("list_objects_v2")

        try:
            for page in paginator.paginate(Bucket=self.bucket, Prefix=prefix):
                for entry in page.get("Contents", []):
                    yield ObjectListing(key=entry["Key"], last_modified=entry["LastModified"])

        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to list objects under {prefix}: {e}")
            raise StorageError("Failed to list stored images") from e
