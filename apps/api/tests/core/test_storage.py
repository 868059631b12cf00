"""
Unit tests for Spaces storage.
"""

from unittest.mock import MagicMock

import pytest

from hero_banners.core.storage import SpacesStorage, safe_filename, upload_object_key


@pytest.fixture
def mock_s3():
    client = MagicMock()
    client.generate_presigned_url.return_value = "https://signed.example/upload"
    return client


@pytest.fixture
def storage(mock_s3):
    return SpacesStorage(
        bucket="banners",
        endpoint="nyc3.digitaloceanspaces.com",
        region="nyc3",
        access_key="key",
        secret_key="secret",
        client=mock_s3,
    )


class TestKeys:
    """Tests for object key helpers."""

    def test_safe_filename(self):
        assert safe_filename("my photo (1).jpg") == "my_photo__1_.jpg"
        assert safe_filename("../etc/passwd") == ".._etc_passwd"

    def test_upload_key_is_unique_and_sanitised(self):
        first = upload_object_key("dad's photo.png")
        second = upload_object_key("dad's photo.png")

        assert first.startswith("uploads/")
        assert first.endswith("-dad_s_photo.png")
        assert first != second


class TestSpacesStorage:
    """Tests for SpacesStorage."""

    def test_from_settings_returns_none_when_unconfigured(self, settings):
        assert SpacesStorage.from_settings(settings) is None

    def test_public_url(self, storage):
        assert (
            storage.public_url("contracts/a.pdf")
            == "https://banners.nyc3.digitaloceanspaces.com/contracts/a.pdf"
        )

    def test_presign_upload(self, storage, mock_s3):
        url = storage.presign_upload("uploads/a.jpg", "image/jpeg")

        assert url == "https://signed.example/upload"
        args, kwargs = mock_s3.generate_presigned_url.call_args
        assert args == ("put_object",)
        assert kwargs["Params"]["ContentType"] == "image/jpeg"
        assert kwargs["Params"]["ACL"] == "public-read"
        assert kwargs["ExpiresIn"] == 300

    @pytest.mark.asyncio
    async def test_put_object_returns_public_url(self, storage, mock_s3):
        url = await storage.put_object("contracts/a.pdf", b"%PDF", "application/pdf")

        assert url == "https://banners.nyc3.digitaloceanspaces.com/contracts/a.pdf"
        mock_s3.put_object.assert_called_once_with(
            Bucket="banners",
            Key="contracts/a.pdf",
            Body=b"%PDF",
            ContentType="application/pdf",
            ACL="public-read",
        )
