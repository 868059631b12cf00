"""
Submissions Service Layer

Banner intake: everything that happens after the sponsor presses Submit.

This module implements:
1. Upload URLs:
   - Pre-signed PUT URLs so the browser uploads photos straight to Spaces

2. Submission Flow:
   - Fetch the already-uploaded photos
   - Render the contract PDF and store it in a per-submission folder
   - Copy the photos next to the contract
   - Email each admin and town reviewer their own signed Approve / Needs
     Attention links, then send the sponsor a receipt

3. Transactional email:
   - Generic send used by the front-end

Email and photo failures are logged and skipped; they never fail a
submission once the contract is stored.
"""

import asyncio
import logging
from datetime import datetime
from uuid import uuid4

import httpx

from hero_banners.core.config import Settings
from hero_banners.core.email import (
    pdf_attachment,
    send_email,
    send_submission_confirmation,
    send_submission_notification,
)
from hero_banners.core.storage import SpacesStorage, safe_filename, upload_object_key
from hero_banners.modules.review_actions.links import build_action_link
from hero_banners.modules.review_actions.schemas import ActionPayload, Actor, ReviewAction
from hero_banners.modules.submissions.contract import ContractPhoto, render_contract_pdf
from hero_banners.modules.submissions.helpers import (
    contract_location,
    is_test_submission,
    photo_copy_key,
    should_notify_town,
)
from hero_banners.modules.submissions.schemas import (
    BannerSubmission,
    CopiedPhoto,
    PhotoMetadata,
    SendEmailRequest,
    SubmissionResponse,
    UploadImageResponse,
)

logger = logging.getLogger(__name__)

PHOTO_FETCH_TIMEOUT_SECONDS = 20.0


class SubmissionError(Exception):
    """Base exception for submission service errors."""

    def __init__(self, message: str, error_code: str, status_code: int = 400):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        super().__init__(message)


class MissingFieldsError(SubmissionError):
    """Raised when a request body lacks required fields."""

    def __init__(self, message: str):
        super().__init__(message=message, error_code="MISSING_FIELDS", status_code=400)


class StorageNotConfiguredError(SubmissionError):
    """Raised when Spaces credentials are incomplete."""

    def __init__(self):
        super().__init__(
            message="Server configuration error: Missing Spaces credentials or configuration.",
            error_code="STORAGE_NOT_CONFIGURED",
            status_code=500,
        )


class EmailNotConfiguredError(SubmissionError):
    """Raised when a send is requested without a Resend API key."""

    def __init__(self):
        super().__init__(
            message="Server configuration error: Missing Resend API key.",
            error_code="EMAIL_NOT_CONFIGURED",
            status_code=500,
        )


class EmailSendFailedError(SubmissionError):
    """Raised when a requested transactional email could not be sent."""

    def __init__(self):
        super().__init__(
            message="Failed to send email.",
            error_code="EMAIL_SEND_FAILED",
            status_code=500,
        )


def create_upload_url(
    storage: SpacesStorage | None,
    filename: str | None,
    content_type: str | None,
) -> UploadImageResponse:
    """
    Issue a pre-signed upload URL for one photo.

    Raises:
        StorageNotConfiguredError: If Spaces is not configured
        MissingFieldsError: If filename or content type is missing
    """
    if storage is None:
        raise StorageNotConfiguredError()
    if not filename or not content_type:
        raise MissingFieldsError("Missing filename or contentType in request.")

    key = upload_object_key(filename)
    return UploadImageResponse(
        upload_url=storage.presign_upload(key, content_type),
        object_key=key,
        public_url=storage.public_url(key),
    )


async def fetch_photos(
    photos: list[PhotoMetadata],
    client: httpx.AsyncClient,
) -> list[tuple[PhotoMetadata, bytes]]:
    """Download submitted photos, skipping any that are incomplete or unreachable."""
    fetched = []
    for index, photo in enumerate(photos, start=1):
        if not photo.public_url or not photo.content_type:
            logger.warning(f"Skipping photo {index}: missing publicUrl or contentType")
            continue
        try:
            response = await client.get(photo.public_url)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"Failed to fetch photo {index} ({photo.filename}): {e}")
            continue
        fetched.append((photo, response.content))
    logger.info(f"Fetched {len(fetched)} of {len(photos)} submitted photos")
    return fetched


async def _copy_photos(
    storage: SpacesStorage,
    folder: str,
    fetched: list[tuple[PhotoMetadata, bytes]],
) -> list[CopiedPhoto]:
    copied = []
    for index, (photo, data) in enumerate(fetched, start=1):
        if not photo.filename:
            continue
        key = photo_copy_key(folder, index, photo.filename)
        content_type = photo.content_type or "image/jpeg"
        try:
            url = await storage.put_object(key, data, content_type)
        except Exception as e:
            logger.error(f"Failed to copy photo {photo.filename}: {e}")
            continue
        copied.append(
            CopiedPhoto(
                original_url=photo.public_url,
                copied_url=url,
                filename=safe_filename(photo.filename),
                content_type=content_type,
            )
        )
    return copied


def _review_links(
    submission: BannerSubmission,
    actor: Actor,
    recipient_email: str,
    contract_url: str,
    settings: Settings,
    base_url: str,
) -> tuple[str, str]:
    """Approve and Needs Attention links for one reviewer; "#" without a secret."""
    secret = settings.action_link_secret
    if not secret:
        return "#", "#"

    payload = ActionPayload(
        actor=actor.value,
        veteran_name=submission.veteran_name or "N/A",
        sponsor_name=submission.sponsor_name or "Applicant",
        sponsor_email=submission.sponsor_email,
        contract_url=contract_url,
        recipient_email=recipient_email,
    )
    return (
        build_action_link(base_url, ReviewAction.APPROVE.value, actor.value, payload, secret),
        build_action_link(base_url, ReviewAction.ISSUE.value, actor.value, payload, secret),
    )


async def _notify_group(
    actor: Actor,
    recipients: list[str],
    submission: BannerSubmission,
    contract_url: str,
    copied: list[CopiedPhoto],
    attachment: dict,
    settings: Settings,
    base_url: str,
) -> int:
    """One notification per reviewer, each with links naming that reviewer."""
    sent = 0
    for recipient in recipients:
        approve_url, issue_url = _review_links(
            submission, actor, recipient, contract_url, settings, base_url
        )
        ok = await send_submission_notification(
            to_email=recipient,
            sponsor_name=submission.sponsor_name or "N/A",
            sponsor_email=submission.sponsor_email or "N/A",
            relationship=submission.relationship_to_veteran or "N/A",
            veteran_name=submission.veteran_name or "N/A",
            veteran_address=submission.veteran_address or "N/A",
            years_in_town=submission.veteran_years_in_town or "N/A",
            service_branch=submission.service_branch_label,
            service_period=submission.service_period_or_conflict or "N/A",
            contract_url=contract_url,
            approve_url=approve_url,
            issue_url=issue_url,
            photos=[(photo.copied_url, photo.filename) for photo in copied],
            attachment=attachment,
        )
        sent += int(ok)
    logger.info(f"{actor.value} notifications sent: {sent}/{len(recipients)}")
    return sent


async def notify_submission(
    submission: BannerSubmission,
    contract_url: str,
    contract_filename: str,
    contract_pdf: bytes,
    copied: list[CopiedPhoto],
    settings: Settings,
    base_url: str,
) -> None:
    """Email admin reviewers, town reviewers and the sponsor about a new submission."""
    if not settings.resend_api_key:
        logger.warning("RESEND_API_KEY not set. Emails not sent.")
        return

    attachment = pdf_attachment(contract_filename, contract_pdf)
    if is_test_submission(submission.sponsor_email, settings):
        logger.info("Test submission detected")

    if settings.admin_emails:
        await _notify_group(
            Actor.ADMIN, settings.admin_emails, submission, contract_url, copied,
            attachment, settings, base_url,
        )
    else:
        logger.warning("ADMIN_EMAIL_RECIPIENTS not set. Admin email not sent.")

    if not settings.town_emails:
        logger.warning("TOWN_EMAIL_RECIPIENTS not set. Town email not sent.")
    elif not should_notify_town(submission.sponsor_email, settings):
        logger.info("Skipping town notification for test submission")
    else:
        await _notify_group(
            Actor.TOWN, settings.town_emails, submission, contract_url, copied,
            attachment, settings, base_url,
        )

    if not submission.sponsor_email:
        logger.warning("Sponsor email not provided. Confirmation email not sent.")
        return

    await send_submission_confirmation(
        to_email=submission.sponsor_email,
        sponsor_name=submission.sponsor_name or "Applicant",
        veteran_name=submission.veteran_name or "N/A",
        veteran_address=submission.veteran_address or "N/A",
        years_in_town=submission.veteran_years_in_town or "N/A",
        service_branch=submission.service_branch_label,
        service_period=submission.service_period_or_conflict or "N/A",
        contract_url=contract_url,
        attachment=attachment,
    )


async def process_submission(
    submission: BannerSubmission,
    signature_png: bytes | None,
    storage: SpacesStorage | None,
    settings: Settings,
    base_url: str,
    http_client: httpx.AsyncClient | None = None,
    now: datetime | None = None,
) -> SubmissionResponse:
    """
    Turn a completed form into a stored contract and reviewer notifications.

    Args:
        submission: Parsed form fields and photo metadata
        signature_png: Drawn signature, if provided
        storage: Spaces client (None when not configured)
        settings: Application settings
        base_url: Origin used for review links
        http_client: Client used to fetch photos (one is created if omitted)
        now: Submission time

    Returns:
        Contract location and photo copy summary

    Raises:
        StorageNotConfiguredError: If Spaces is not configured
    """
    if storage is None:
        raise StorageNotConfiguredError()

    now = now or datetime.now()

    if http_client is None:
        async with httpx.AsyncClient(timeout=PHOTO_FETCH_TIMEOUT_SECONDS) as client:
            fetched = await fetch_photos(submission.photos, client)
    else:
        fetched = await fetch_photos(submission.photos, http_client)

    contract_photos = [
        ContractPhoto(filename=photo.filename, content_type=photo.content_type, data=data)
        for photo, data in fetched
    ]
    pdf_bytes = await asyncio.to_thread(
        render_contract_pdf, submission, contract_photos, signature_png, now
    )

    folder, filename = contract_location(submission.veteran_name, uuid4().hex[:8], now)
    contract_url = await storage.put_object(f"{folder}/{filename}", pdf_bytes, "application/pdf")

    copied = await _copy_photos(storage, folder, fetched)
    logger.info(f"Copied {len(copied)} of {len(submission.photos)} photos to {folder}")

    await notify_submission(submission, contract_url, filename, pdf_bytes, copied, settings, base_url)

    return SubmissionResponse(
        message="Submission processed and contract generated.",
        contract_url=contract_url,
        contract_folder=folder,
        copied_photos=copied,
        total_photos=len(submission.photos),
        photos_copied=len(copied),
    )


async def send_transactional_email(request: SendEmailRequest, settings: Settings) -> None:
    """
    Send an arbitrary email on behalf of the front-end.

    Raises:
        EmailNotConfiguredError: If no Resend API key is configured
        MissingFieldsError: If recipient, subject or both bodies are missing
        EmailSendFailedError: If Resend rejects the message
    """
    if not settings.resend_api_key:
        raise EmailNotConfiguredError()
    if not request.to or not request.subject or not (request.text or request.html):
        raise MissingFieldsError("Missing required fields (to, subject and either text or html).")

    sent = await send_email(
        to=request.to,
        subject=request.subject,
        html_content=request.html,
        text_content=request.text,
        from_email=request.from_email,
    )
    if not sent:
        raise EmailSendFailedError()
