"""
Unit tests for submissions service layer.

These tests cover:
- Upload URL issuance
- Photo fetching
- Contract storage and photo copies
- Reviewer notifications with per-reviewer signed links
- Transactional email
"""

from datetime import datetime
from unittest.mock import AsyncMock, patch
from urllib.parse import parse_qs, urlsplit

import httpx
import pytest
import pytest_asyncio

from hero_banners.modules.review_actions.links import parse_and_verify
from hero_banners.modules.submissions.schemas import PhotoMetadata, SendEmailRequest
from hero_banners.modules.submissions.service import (
    EmailNotConfiguredError,
    EmailSendFailedError,
    MissingFieldsError,
    StorageNotConfiguredError,
    create_upload_url,
    fetch_photos,
    process_submission,
    send_transactional_email,
)

SERVICE = "hero_banners.modules.submissions.service"


def _photo_handler(request: httpx.Request) -> httpx.Response:
    if request.url.path.endswith("one.jpg"):
        return httpx.Response(200, content=b"jpeg-bytes")
    return httpx.Response(404)


@pytest_asyncio.fixture
async def http_client():
    async with httpx.AsyncClient(transport=httpx.MockTransport(_photo_handler)) as client:
        yield client


@pytest.fixture
def mock_notifications():
    with (
        patch(f"{SERVICE}.send_submission_notification", new_callable=AsyncMock) as mock_notify,
        patch(f"{SERVICE}.send_submission_confirmation", new_callable=AsyncMock) as mock_confirm,
    ):
        mock_notify.return_value = True
        mock_confirm.return_value = True
        yield mock_notify, mock_confirm


class TestCreateUploadUrl:
    """Tests for create_upload_url."""

    def test_returns_signed_url_and_public_url(self, storage, mock_s3):
        result = create_upload_url(storage, "my photo.jpg", "image/jpeg")

        assert result.upload_url == "https://banners.nyc3.digitaloceanspaces.com/signed"
        assert result.object_key.startswith("uploads/")
        assert result.object_key.endswith("-my_photo.jpg")
        assert result.public_url == f"https://banners.nyc3.digitaloceanspaces.com/{result.object_key}"
        mock_s3.generate_presigned_url.assert_called_once()

    def test_storage_not_configured(self):
        with pytest.raises(StorageNotConfiguredError):
            create_upload_url(None, "a.jpg", "image/jpeg")

    def test_missing_fields(self, storage):
        with pytest.raises(MissingFieldsError):
            create_upload_url(storage, "a.jpg", None)


class TestFetchPhotos:
    """Tests for fetch_photos."""

    @pytest.mark.asyncio
    async def test_skips_unreachable_and_incomplete(self, http_client):
        photos = [
            PhotoMetadata(public_url="https://p/one.jpg", content_type="image/jpeg", filename="one.jpg"),
            PhotoMetadata(public_url="https://p/gone.jpg", content_type="image/jpeg", filename="gone.jpg"),
            PhotoMetadata(public_url="https://p/one.jpg", content_type="", filename="no-type.jpg"),
        ]

        fetched = await fetch_photos(photos, http_client)

        assert [(photo.filename, data) for photo, data in fetched] == [("one.jpg", b"jpeg-bytes")]


class TestProcessSubmission:
    """Tests for process_submission."""

    @pytest.mark.asyncio
    async def test_stores_contract_and_copies_photos(
        self, sample_submission, storage, mock_s3, settings, http_client, mock_notifications
    ):
        result = await process_submission(
            submission=sample_submission,
            signature_png=None,
            storage=storage,
            settings=settings,
            base_url="https://banners.example.org",
            http_client=http_client,
            now=datetime(2025, 5, 3),
        )

        assert result.contract_folder.startswith("contracts/John_Doe-")
        assert result.contract_url.endswith("/banner-contract-John_Doe-05-2025.pdf")
        assert result.total_photos == 2
        assert result.photos_copied == 1
        assert result.copied_photos[0].copied_url.endswith("/photo-1-one.jpg")

        keys = [call.kwargs["Key"] for call in mock_s3.put_object.call_args_list]
        assert keys == [
            f"{result.contract_folder}/banner-contract-John_Doe-05-2025.pdf",
            f"{result.contract_folder}/photo-1-one.jpg",
        ]
        contract_call = mock_s3.put_object.call_args_list[0]
        assert contract_call.kwargs["Body"].startswith(b"%PDF")
        assert contract_call.kwargs["ContentType"] == "application/pdf"

    @pytest.mark.asyncio
    async def test_each_reviewer_gets_own_signed_links(
        self, sample_submission, storage, settings, secret, http_client, mock_notifications
    ):
        mock_notify, mock_confirm = mock_notifications

        await process_submission(
            submission=sample_submission,
            signature_png=None,
            storage=storage,
            settings=settings,
            base_url="https://banners.example.org",
            http_client=http_client,
        )

        recipients = [call.kwargs["to_email"] for call in mock_notify.call_args_list]
        assert recipients == [
            "admin@example.org",
            "shared@example.org",
            "shared@example.org",
            "clerk@example.org",
        ]

        for call in mock_notify.call_args_list:
            kwargs = call.kwargs
            assert kwargs["service_branch"] == "Army (Reserve)"
            for url, action in ((kwargs["approve_url"], "approve"), (kwargs["issue_url"], "issue")):
                assert url.startswith("https://banners.example.org/review?")
                params = {k: v[0] for k, v in parse_qs(urlsplit(url).query).items()}
                assert params["action"] == action
                payload = parse_and_verify(params, secret)
                assert payload.recipient_email == kwargs["to_email"]
                assert payload.sponsor_email == "jane@example.org"
                assert payload.actor == params["actor"]

        mock_confirm.assert_called_once()
        assert mock_confirm.call_args.kwargs["to_email"] == "jane@example.org"
        assert mock_confirm.call_args.kwargs["attachment"]["filename"].endswith(".pdf")

    @pytest.mark.asyncio
    async def test_test_submission_skips_town(
        self, sample_submission, storage, settings_factory, http_client, mock_notifications
    ):
        mock_notify, _ = mock_notifications
        settings = settings_factory(
            test_email_addresses="jane@example.org", skip_town_for_test_submissions=True
        )

        await process_submission(
            submission=sample_submission,
            signature_png=None,
            storage=storage,
            settings=settings,
            base_url="https://banners.example.org",
            http_client=http_client,
        )

        recipients = [call.kwargs["to_email"] for call in mock_notify.call_args_list]
        assert recipients == ["admin@example.org", "shared@example.org"]

    @pytest.mark.asyncio
    async def test_links_are_placeholders_without_secret(
        self, sample_submission, storage, settings_factory, http_client, mock_notifications
    ):
        mock_notify, _ = mock_notifications
        settings = settings_factory(action_link_secret=None)

        await process_submission(
            submission=sample_submission,
            signature_png=None,
            storage=storage,
            settings=settings,
            base_url="https://banners.example.org",
            http_client=http_client,
        )

        kwargs = mock_notify.call_args_list[0].kwargs
        assert kwargs["approve_url"] == "#"
        assert kwargs["issue_url"] == "#"

    @pytest.mark.asyncio
    async def test_no_email_without_api_key(
        self, sample_submission, storage, settings_factory, http_client, mock_notifications
    ):
        mock_notify, mock_confirm = mock_notifications

        result = await process_submission(
            submission=sample_submission,
            signature_png=None,
            storage=storage,
            settings=settings_factory(resend_api_key=None),
            base_url="https://banners.example.org",
            http_client=http_client,
        )

        assert result.contract_url
        mock_notify.assert_not_called()
        mock_confirm.assert_not_called()

    @pytest.mark.asyncio
    async def test_storage_not_configured(self, sample_submission, settings):
        with pytest.raises(StorageNotConfiguredError):
            await process_submission(
                submission=sample_submission,
                signature_png=None,
                storage=None,
                settings=settings,
                base_url="https://banners.example.org",
            )


class TestSendTransactionalEmail:
    """Tests for send_transactional_email."""

    @pytest.mark.asyncio
    async def test_sends(self, settings):
        request = SendEmailRequest(to="a@example.org", subject="Hi", text="Hello")
        with patch(f"{SERVICE}.send_email", new_callable=AsyncMock) as mock_send:
            mock_send.return_value = True
            await send_transactional_email(request, settings)

        kwargs = mock_send.call_args.kwargs
        assert kwargs["to"] == "a@example.org"
        assert kwargs["text_content"] == "Hello"

    @pytest.mark.asyncio
    async def test_requires_api_key(self, settings_factory):
        request = SendEmailRequest(to="a@example.org", subject="Hi", text="Hello")
        with pytest.raises(EmailNotConfiguredError):
            await send_transactional_email(request, settings_factory(resend_api_key=None))

    @pytest.mark.asyncio
    async def test_requires_a_body(self, settings):
        request = SendEmailRequest(to="a@example.org", subject="Hi")
        with pytest.raises(MissingFieldsError):
            await send_transactional_email(request, settings)

    @pytest.mark.asyncio
    async def test_provider_failure(self, settings):
        request = SendEmailRequest(to=["a@example.org"], subject="Hi", html="<p>Hello</p>")
        with patch(f"{SERVICE}.send_email", new_callable=AsyncMock) as mock_send:
            mock_send.return_value = False
            with pytest.raises(EmailSendFailedError):
                await send_transactional_email(request, settings)
