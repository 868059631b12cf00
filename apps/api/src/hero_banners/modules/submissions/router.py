"""
Submissions Router

Public endpoints used by the banner form front-end. No authentication:
they run before any review takes place.

Endpoints:
- POST /api/upload-image - Pre-signed upload URL for a photo
- POST /api/submit-banner - Submit the completed form (multipart)
- POST /api/send-email - Generic transactional email

Security:
- Rate limiting on endpoints that send email
- Uploaded object keys are sanitised and made unique
- All user values HTML-escaped in outbound email templates
"""

import logging

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile, status

from hero_banners.core.config import Settings, get_settings
from hero_banners.core.rate_limit import rate_limit
from hero_banners.core.storage import SpacesStorage
from hero_banners.modules.review_actions.links import resolve_base_url
from hero_banners.modules.submissions import service
from hero_banners.modules.submissions.helpers import parse_flag, parse_photos_metadata
from hero_banners.modules.submissions.schemas import (
    BannerSubmission,
    SendEmailRequest,
    SubmissionResponse,
    UploadImageRequest,
    UploadImageResponse,
)
from hero_banners.modules.submissions.service import SubmissionError

logger = logging.getLogger(__name__)

router = APIRouter()


def get_storage(settings: Settings = Depends(get_settings)) -> SpacesStorage | None:
    """Spaces client for this request, or None when not configured."""
    return SpacesStorage.from_settings(settings)


def _service_error(e: SubmissionError) -> HTTPException:
    return HTTPException(
        status_code=e.status_code,
        detail={"error": e.error_code, "message": e.message},
    )


@router.post(
    "/upload-image",
    response_model=UploadImageResponse,
    summary="Get Photo Upload URL",
)
async def upload_image(
    data: UploadImageRequest,
    storage: SpacesStorage | None = Depends(get_storage),
) -> UploadImageResponse:
    """
    Issue a pre-signed PUT URL valid for five minutes.

    Raises:
        HTTPException 400: If filename or contentType is missing
        HTTPException 500: If storage is not configured or signing fails
    """
    try:
        return service.create_upload_url(storage, data.filename, data.content_type)
    except SubmissionError as e:
        if e.status_code >= 500:
            logger.error(f"Upload URL unavailable: {e.message}")
        raise _service_error(e) from e
    except Exception as e:
        logger.exception(f"Failed to generate pre-signed URL: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "INTERNAL_ERROR", "message": "Failed to generate pre-signed URL."},
        ) from e


@router.post(
    "/submit-banner",
    response_model=SubmissionResponse,
    summary="Submit Banner Application",
)
@rate_limit(limit=5, window_seconds=60)
async def submit_banner(
    request: Request,
    sponsor_name: str = Form("", alias="sponsorName"),
    sponsor_email: str = Form("", alias="sponsorEmail"),
    relationship_to_veteran: str = Form("", alias="relationshipToVeteran"),
    veteran_name: str = Form("", alias="veteranName"),
    veteran_address: str = Form("", alias="veteranAddress"),
    veteran_years_in_town: str = Form("", alias="veteranYearsInBH"),
    veteran_town_connection: str = Form("", alias="veteranBHConnection"),
    service_branch: str = Form("", alias="serviceBranch"),
    is_reserve: str | None = Form(None, alias="isReserve"),
    service_period_or_conflict: str = Form("", alias="servicePeriodOrConflict"),
    consent_given: str | None = Form(None, alias="consentGiven"),
    unknown_branch_info: str = Form("", alias="unknownBranchInfo"),
    photos_metadata: str | None = Form(None, alias="photosMetadata"),
    signature_image: UploadFile | None = File(None, alias="signatureImage"),
    settings: Settings = Depends(get_settings),
    storage: SpacesStorage | None = Depends(get_storage),
) -> SubmissionResponse:
    """
    Generate, store and distribute the contract for a completed form.

    Returns:
        Contract URL and folder plus the photo copy summary

    Raises:
        HTTPException 500: If storage is not configured or processing fails
    """
    submission = BannerSubmission(
        sponsor_name=sponsor_name,
        sponsor_email=sponsor_email.strip(),
        relationship_to_veteran=relationship_to_veteran,
        veteran_name=veteran_name,
        veteran_address=veteran_address,
        veteran_years_in_town=veteran_years_in_town,
        veteran_town_connection=veteran_town_connection,
        service_branch=service_branch,
        is_reserve=parse_flag(is_reserve),
        service_period_or_conflict=service_period_or_conflict,
        consent_given=parse_flag(consent_given),
        unknown_branch_info=unknown_branch_info,
        photos=parse_photos_metadata(photos_metadata),
    )

    try:
        signature_png = await signature_image.read() if signature_image else None

        response = await service.process_submission(
            submission=submission,
            signature_png=signature_png or None,
            storage=storage,
            settings=settings,
            base_url=resolve_base_url(request, settings),
        )
        logger.info(f"Submission processed: folder={response.contract_folder}")
        return response

    except SubmissionError as e:
        logger.error(f"Submission rejected: {e.message}")
        raise _service_error(e) from e
    except Exception as e:
        logger.exception(f"Error processing submission: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "INTERNAL_ERROR", "message": "Failed to process submission."},
        ) from e
    finally:
        if signature_image:
            await signature_image.close()


@router.post("/send-email", summary="Send Transactional Email")
@rate_limit(limit=10, window_seconds=60)
async def send_email_endpoint(
    request: Request,
    data: SendEmailRequest,
    settings: Settings = Depends(get_settings),
) -> dict[str, str]:
    """
    Send an email through Resend.

    Raises:
        HTTPException 400: If to, subject or a body is missing
        HTTPException 500: If the API key is missing or Resend fails
    """
    try:
        await service.send_transactional_email(data, settings)
        return {"message": "Email sent successfully."}
    except SubmissionError as e:
        logger.error(f"Transactional email not sent: {e.message}")
        raise _service_error(e) from e
    except Exception as e:
        logger.exception(f"Unexpected error sending email: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "INTERNAL_ERROR", "message": "Unexpected server error."},
        ) from e
