"""
Review Actions Router

Endpoints reached from the Approve / Needs Attention links in reviewer emails.
There is no login: possession of a correctly signed link is the only
credential, and both endpoints verify it independently.

Endpoints:
- GET /review - Render the compose form for a signed link
- POST /api/send-review-action - Send the composed message

Security:
- HMAC signature checked on every request (constant-time comparison)
- Signature and missing-field failures return the same 400 class of response
- All payload values HTML-escaped before rendering
- Rate limiting on the sending endpoint
"""

import logging
import time

from fastapi import APIRouter, Depends, Form, HTTPException, Request, status
from fastapi.responses import HTMLResponse, PlainTextResponse

from hero_banners.core.config import Settings, get_settings
from hero_banners.core.rate_limit import rate_limit
from hero_banners.modules.review_actions import pages, service
from hero_banners.modules.review_actions.links import (
    ConfigurationError,
    InvalidSignatureError,
    MissingParameterError,
    ReviewActionError,
    parse_and_verify,
    resolve_base_url,
)

logger = logging.getLogger(__name__)

router = APIRouter()

DISPATCH_PATH = "/api/send-review-action"


@router.get(
    "/review",
    response_class=HTMLResponse,
    summary="Review Submission",
    responses={
        200: {"description": "Compose form", "content": {"text/html": {}}},
        400: {"description": "Missing parameters or invalid signature"},
        500: {"description": "Unexpected error"},
    },
)
async def review_submission(
    request: Request,
    action: str | None = None,
    actor: str | None = None,
    data: str | None = None,
    sig: str | None = None,
    settings: Settings = Depends(get_settings),
):
    """
    Render the compose page for a signed review link.

    Returns:
        HTML form pre-filled with the default message for the action,
        with an X-Render-Time-ms header
    """
    started = time.perf_counter()
    try:
        try:
            payload = parse_and_verify(
                {"action": action, "actor": actor, "data": data, "sig": sig},
                settings.action_link_secret,
            )
        except (MissingParameterError, ConfigurationError):
            return PlainTextResponse("Invalid or missing parameters.", status_code=400)
        except InvalidSignatureError:
            return PlainTextResponse("Invalid signature.", status_code=400)

        html = service.render_review_page(
            action=action,
            actor=actor,
            data=data,
            sig=sig,
            payload=payload,
            settings=settings,
            submit_url=f"{resolve_base_url(request, settings)}{DISPATCH_PATH}",
        )

        render_ms = round((time.perf_counter() - started) * 1000)
        logger.info(f"Review page rendered: render_ms={render_ms}, actor={actor}, action={action}")
        return HTMLResponse(html, headers={"X-Render-Time-ms": str(render_ms)})

    except Exception as e:
        logger.exception(f"Error rendering review page: {e}")
        return PlainTextResponse("Failed to render review page", status_code=500)


@router.post(
    DISPATCH_PATH,
    response_class=HTMLResponse,
    summary="Send Review Message",
    responses={
        200: {"description": "Message processed", "content": {"text/html": {}}},
        400: {"description": "Missing fields, invalid signature or no sponsor email"},
        429: {"description": "Rate limit exceeded"},
        500: {"description": "Server missing configuration or unexpected error"},
    },
)
@rate_limit(limit=20, window_seconds=60)
async def send_review_action(
    request: Request,
    action: str | None = Form(None),
    actor: str | None = Form(None),
    data: str | None = Form(None),
    sig: str | None = Form(None),
    subject: str | None = Form(None),
    body: str | None = Form(None),
    settings: Settings = Depends(get_settings),
):
    """
    Send the composed message to the applicant and an FYI copy to both groups.

    Email delivery is best-effort: once the link verifies, the response is a
    success page even if a send failed.

    Raises:
        HTTPException 400: Missing fields, invalid signature, no sponsor email
        HTTPException 500: Missing secret or email API key, unexpected error
    """
    if not all([action, actor, data, sig, subject, body]):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": "MISSING_PARAMETER", "message": "Missing required fields"},
        )

    try:
        if not settings.resend_api_key:
            raise ConfigurationError()

        payload = parse_and_verify(
            {"action": action, "actor": actor, "data": data, "sig": sig},
            settings.action_link_secret,
        )

        result = await service.dispatch_review_action(
            action=action,
            actor=actor,
            payload=payload,
            subject=subject,
            body=body,
            settings=settings,
        )

        return HTMLResponse(
            pages.dispatch_success_page(
                applicant=result.applicant,
                sender=result.sender,
                groups_notified=result.groups_notified,
            )
        )

    except ConfigurationError as e:
        logger.error("Review dispatch misconfigured: ACTION_LINK_SECRET or RESEND_API_KEY missing")
        raise HTTPException(
            status_code=e.status_code,
            detail={"error": e.error_code, "message": e.message},
        ) from e
    except InvalidSignatureError as e:
        logger.warning(f"Rejected review dispatch with invalid signature: actor={actor}")
        raise HTTPException(
            status_code=e.status_code,
            detail={"error": e.error_code, "message": e.message},
        ) from e
    except ReviewActionError as e:
        logger.error(f"Review action error: {e.message}")
        raise HTTPException(
            status_code=e.status_code,
            detail={"error": e.error_code, "message": e.message},
        ) from e
    except Exception as e:
        logger.exception(f"Error sending review action email: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "INTERNAL_ERROR", "message": "Failed to send email"},
        ) from e
