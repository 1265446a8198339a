"""Unit tests for the object storage client."""

from datetime import UTC, datetime
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from restaurant_site_service.services.storage_client import (
    StorageClient,
    StorageError,
    build_object_key,
    derive_public_base_url,
    slugify_filename,
)

ENDPOINT = "https://proj.storage.supabase.co/storage/v1/s3"
PUBLIC_BASE = "https://proj.supabase.co/storage/v1/object/public"


@pytest.mark.unit
class TestKeyHelpers:
    """Tests for filename slugging and key construction."""

    @pytest.mark.parametrize(
        "filename,expected",
        [
            ("Grilled Sea Bass.JPG", ("grilled-sea-bass", ".jpg")),
            ("  --Crème brûlée!!.png", ("cr-me-br-l-e", ".png")),
            ("no_extension", ("no-extension", "")),
            (".jpg", ("jpg", ".jpg")),
            ("???.webp", ("image", ".webp")),
            ("menu.JP G", ("menu", ".jpg")),
            ("odd.%20", ("odd", ".20")),
            ("trailing.??", ("trailing", "")),
        ],
    )
    def test_slugify_filename(self, filename: str, expected: tuple[str, str]) -> None:
        assert slugify_filename(filename) == expected

    def test_build_object_key(self) -> None:
        key = build_object_key("menu", "Soup.jpg", now=datetime(2025, 3, 1, 23, 59, tzinfo=UTC))

        prefix, day, name = key.split("/")
        assert prefix == "menu"
        assert day == "2025-03-01"
        assert name.endswith("-soup.jpg")
        assert len(name) == len("-soup.jpg") + 36

    def test_derive_public_base_url(self) -> None:
        assert derive_public_base_url(ENDPOINT) == PUBLIC_BASE
        assert derive_public_base_url(ENDPOINT + "/") == PUBLIC_BASE


@pytest.mark.unit
class TestStorageClient:
    """Test suite for StorageClient."""

    @pytest.fixture
    def s3(self) -> MagicMock:
        return MagicMock()

    @pytest.fixture
    def client(self, s3: MagicMock) -> StorageClient:
        return StorageClient(s3, bucket="flamingo-cafe", endpoint_url=ENDPOINT)

    def test_public_url(self, client: StorageClient) -> None:
        assert client.public_url("menu/a.jpg") == f"{PUBLIC_BASE}/flamingo-cafe/menu/a.jpg"

    def test_explicit_public_base_url(self, s3: MagicMock) -> None:
        client = StorageClient(s3, "b", ENDPOINT, public_base_url="https://cdn.example.com/")

        assert client.public_url("k.jpg") == "https://cdn.example.com/b/k.jpg"

    @pytest.mark.parametrize(
        "url,expected",
        [
            (f"{PUBLIC_BASE}/flamingo-cafe/menu/2025-03-01/a.jpg", "menu/2025-03-01/a.jpg"),
            (
                "https://proj.storage.supabase.co/storage/v1/object/public/flamingo-cafe/gallery/b.jpg",
                "gallery/b.jpg",
            ),
            (f"{PUBLIC_BASE}/other-bucket/menu/a.jpg", None),
            ("https://cdn.example.com/menu/a.jpg", None),
            ("/assets/food-main.jpg", None),
            (f"{PUBLIC_BASE}/flamingo-cafe/", None),
            (None, None),
        ],
    )
    def test_key_from_url(self, client: StorageClient, url: str | None, expected: str | None) -> None:
        assert client.key_from_url(url) == expected

    def test_upload(self, client: StorageClient, s3: MagicMock) -> None:
        stored = client.upload("gallery", "Terrace.PNG", b"data", "image/png")

        kwargs = s3.put_object.call_args.kwargs
        assert kwargs["Bucket"] == "flamingo-cafe"
        assert kwargs["Key"] == stored.key
        assert kwargs["ContentType"] == "image/png"
        assert stored.key.startswith("gallery/")
        assert stored.key.endswith("-terrace.png")
        assert stored.url == client.public_url(stored.key)
        assert client.key_from_url(stored.url) == stored.key

    def test_upload_defaults_content_type(self, client: StorageClient, s3: MagicMock) -> None:
        client.upload("menu", "", b"data", None)

        kwargs = s3.put_object.call_args.kwargs
        assert kwargs["ContentType"] == "application/octet-stream"
        assert kwargs["Key"].endswith("-image.jpg")

    def test_upload_failure(self, client: StorageClient, s3: MagicMock) -> None:
        s3.put_object.side_effect = ClientError({"Error": {"Code": "AccessDenied"}}, "PutObject")

        with pytest.raises(StorageError, match="Failed to upload image"):
            client.upload("menu", "a.jpg", b"data", "image/jpeg")

    def test_delete_failure(self, client: StorageClient, s3: MagicMock) -> None:
        s3.delete_object.side_effect = EndpointConnectionError(endpoint_url=ENDPOINT)

        with pytest.raises(StorageError, match="Failed to delete image"):
            client.delete("menu/a.jpg")

    def test_list_objects(self, client: StorageClient, s3: MagicMock) -> None:
        modified = datetime(2025, 3, 1, tzinfo=UTC)
        s3.get_paginator.return_value.paginate.return_value = [
            {"Contents": [{"Key": "menu/a.jpg", "LastModified": modified}]},
            {},
        ]

        entries = list(client.list_objects("menu/"))

        assert [(e.key, e.last_modified) for e in entries] == [("menu/a.jpg", modified)]
        s3.get_paginator.assert_called_once_with("list_objects_v2")
        s3.get_paginator.return_value.paginate.assert_called_once_with(Bucket="flamingo-cafe", Prefix="menu/")
