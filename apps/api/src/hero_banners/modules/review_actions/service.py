"""
Review Actions Service Layer

Business logic behind the signed review links sent to internal reviewers.

This module implements:
1. Review rendering:
   - Pick the default subject/body for the chosen action
   - Work out who gets the FYI copy and who the reviewer is
   - Produce the compose page

2. Review dispatch:
   - Send the composed message to the applicant (sponsor)
   - Send an FYI copy to both internal groups, de-duplicated
   - Each send is independent and best-effort

Callers must verify the link with `links.parse_and_verify` first; nothing
here checks signatures. There is no persistence: a link can be rendered and
dispatched any number of times.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime

from hero_banners.core.config import Settings
from hero_banners.core.email import send_applicant_message, send_review_fyi
from hero_banners.modules.review_actions import pages
from hero_banners.modules.review_actions.event_window import suggested_event_phrase
from hero_banners.modules.review_actions.links import ReviewActionError
from hero_banners.modules.review_actions.schemas import ActionPayload, Actor, ReviewAction

logger = logging.getLogger(__name__)

PRINT_CUTOFF_DAYS = 21


class MissingSponsorEmailError(ReviewActionError):
    """Raised when the verified payload has no applicant address to write to."""

    def __init__(self):
        super().__init__(
            message="Missing sponsor email in payload",
            error_code="MISSING_SPONSOR_EMAIL",
            status_code=400,
        )


@dataclass(frozen=True)
class ReviewDraft:
    """Pre-filled compose form content."""

    heading: str
    subject: str
    body: str


@dataclass
class DispatchResult:
    """Who a review message went to, and whether each send succeeded."""

    applicant: list[str]
    sender: str
    groups_notified: list[str] = field(default_factory=list)
    applicant_sent: bool = False
    groups_sent: bool | None = None


def is_approval(action: str) -> bool:
    return action == ReviewAction.APPROVE.value


def is_admin(actor: str) -> bool:
    return actor == Actor.ADMIN.value


def actor_label(actor: str) -> str:
    return "Admin" if is_admin(actor) else "Town Clerk"


def alert_group(actor: str, settings: Settings) -> list[str]:
    """The opposite internal group: town for admins, admins for town."""
    return settings.town_emails if is_admin(actor) else settings.admin_emails


def notified_groups(settings: Settings) -> list[str]:
    """Admin and town recipients combined, order kept, duplicates dropped."""
    return list(dict.fromkeys(settings.admin_emails + settings.town_emails))


def reply_to_address(payload: ActionPayload, settings: Settings) -> str | None:
    """Primary admin address, else the reviewer the link was issued to."""
    return settings.admin_primary_email.strip() or payload.recipient_email.strip() or None


def compose_default_message(
    action: str,
    payload: ActionPayload,
    admin_primary_email: str,
    now: datetime | date | None = None,
) -> ReviewDraft:
    """
    Default subject and body for the compose form.

    Approvals say when the banner will be printed; anything else asks the
    applicant for a clearer photo.
    """
    if is_approval(action):
        event_phrase = suggested_event_phrase(now, PRINT_CUTOFF_DAYS)
        return ReviewDraft(
            heading="Approve Submission",
            subject=f"Your Hometown Hero banner for {payload.veteran_name} has been approved",
            body=(
                f"Hello {payload.sponsor_name},\n\n"
                f"Your Hometown Hero banner for {payload.veteran_name} has been approved. "
                f"It looks good and will be printed {event_phrase}.\n\n"
                "Thank you!"
            ),
        )

    contact = f" or email {admin_primary_email}" if admin_primary_email else ""
    return ReviewDraft(
        heading="Flag Submission for Update",
        subject="Update needed for your Hometown Hero banner",
        body=(
            f"Hello {payload.sponsor_name},\n\n"
            f"Thank you for your Hometown Hero banner submission for {payload.veteran_name}. "
            "We took a look and need a small update before we can approve it. "
            "Could you please send a clearer photo of the veteran?\n\n"
            f"If you have any questions, please use the Reply button below{contact} "
            "and we will be happy to help.\n\n"
            "Thank you!\n"
            "The Berkeley Heights Veterans Affairs Committee"
        ),
    )


def render_review_page(
    *,
    action: str,
    actor: str,
    data: str,
    sig: str,
    payload: ActionPayload,
    settings: Settings,
    submit_url: str,
    now: datetime | date | None = None,
) -> str:
    """
    Build the compose page for a verified link.

    The hidden form fields re-carry the link parameters unchanged so the
    dispatch endpoint can verify them again.
    """
    draft = compose_default_message(action, payload, settings.admin_primary_email, now)
    group = alert_group(actor, settings)
    copy_to = ", ".join(group) or (
        "the Town Clerk group" if is_admin(actor) else "the Admin group"
    )

    return pages.review_page(
        heading=draft.heading,
        greeting_name=payload.recipient_email or actor_label(actor),
        sponsor_name=payload.sponsor_name,
        sponsor_email=payload.sponsor_email,
        veteran_name=payload.veteran_name,
        copy_to=copy_to,
        submit_url=submit_url,
        hidden_fields={"action": action, "actor": actor, "data": data, "sig": sig},
        subject=draft.subject,
        body=draft.body,
    )


async def dispatch_review_action(
    *,
    action: str,
    actor: str,
    payload: ActionPayload,
    subject: str,
    body: str,
    settings: Settings,
) -> DispatchResult:
    """
    Send a reviewer's message to the applicant and an FYI to both groups.

    The two sends are independent: a failure of one is logged and does not
    stop the other.

    Raises:
        MissingSponsorEmailError: If the payload has no sponsor address
    """
    sponsor_email = payload.sponsor_email.strip()
    if not sponsor_email:
        raise MissingSponsorEmailError()

    sender = payload.recipient_email.strip()
    reply_to = reply_to_address(payload, settings)
    result = DispatchResult(applicant=[sponsor_email], sender=sender)

    logger.info(
        f"Sending review message to applicant: action={action}, actor={actor}, "
        f"veteran={payload.veteran_name}"
    )
    try:
        result.applicant_sent = await send_applicant_message(
            to_email=sponsor_email,
            subject=subject,
            body=body,
            reply_to=reply_to,
            include_reply_cta=not is_approval(action),
        )
    except Exception as e:
        logger.exception(f"Applicant review email raised: {e}")
        result.applicant_sent = False
    if not result.applicant_sent:
        logger.error(f"Applicant review email failed for {sponsor_email}")

    groups = notified_groups(settings)
    if not groups:
        logger.warning("No admin or town recipients configured; FYI copy not sent")
        return result

    result.groups_notified = groups
    sent_by = sender or actor_label(actor)
    logger.info(f"Notifying groups of review action: recipients={len(groups)}, sent_by={sent_by}")
    try:
        result.groups_sent = await send_review_fyi(
            to_emails=groups,
            sponsor_name=payload.sponsor_name,
            sponsor_email=sponsor_email,
            veteran_name=payload.veteran_name,
            sent_by=sent_by,
            subject=subject,
            body=body,
        )
    except Exception as e:
        logger.exception(f"Group FYI email raised: {e}")
        result.groups_sent = False
    if not result.groups_sent:
        logger.error("Group FYI email failed")

    return result
