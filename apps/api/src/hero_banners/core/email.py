"""
Email Service using Resend

Handles sending emails for the banner submission and review flow.
"""

import asyncio
import logging
from datetime import datetime
from html import escape
from typing import Any
from urllib.parse import quote

import resend

from hero_banners.core.config import settings

logger = logging.getLogger(__name__)

# Initialize Resend with API key
resend.api_key = settings.resend_api_key

COMMITTEE_NAME = "Berkeley Heights Veterans Affairs Committee"

_BASE_STYLES = """
            body { font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Arial, sans-serif; line-height: 1.55; color: #111827; }
            .container { max-width: 680px; margin: 0 auto; padding: 24px 16px; }
            .card { background-color: #ffffff; border: 1px solid #e5e7eb; border-radius: 12px; padding: 16px 20px; }
            .header { color: #0f3d6e; margin: 0 0 16px 0; }
            .button { display: inline-block; color: #ffffff; padding: 12px 16px; text-decoration: none; border-radius: 10px; font-weight: 700; margin: 4px 8px 4px 0; }
            .approve { background-color: #16a34a; }
            .attention { background-color: #dc2626; }
            .reply { background-color: #2563eb; }
            .message { white-space: pre-wrap; }
            .quote { white-space: pre-wrap; border-left: 4px solid #2563eb; background-color: #f1f5f9; padding: 12px 14px; border-radius: 8px; font-family: ui-monospace, SFMono-Regular, Menlo, monospace; font-size: 14px; }
            .muted { color: #6b7280; font-size: 13px; }
            .footer { margin-top: 32px; padding-top: 16px; border-top: 1px solid #e5e7eb; color: #6b7280; font-size: 13px; }
"""


def pdf_attachment(filename: str, content: bytes) -> dict[str, Any]:
    """Resend attachment for a generated PDF."""
    return {"filename": filename, "content": list(content)}


def _page(title: str, inner_html: str) -> str:
    return f"""
    <!DOCTYPE html>
    <html>
    <head>
        <meta charset="utf-8" />
        <title>{escape(title)}</title>
        <style>{_BASE_STYLES}</style>
    </head>
    <body>
        <div class="container">
            <div class="card">
            {inner_html}
            </div>
        </div>
    </body>
    </html>
    """


async def send_email(
    to: str | list[str],
    subject: str,
    html_content: str | None = None,
    reply_to: str | None = None,
    text_content: str | None = None,
    attachments: list[dict[str, Any]] | None = None,
    from_email: str | None = None,
) -> bool:
    """
    Send an email using Resend.

    Args:
        to: Recipient address or list of addresses
        subject: Email subject line
        html_content: HTML body
        reply_to: Optional Reply-To address
        text_content: Optional plain text body
        attachments: Optional Resend attachments
        from_email: Sender override, defaults to EMAIL_FROM

    Returns:
        True if the email was sent (or logged in development), False on failure
    """
    recipients = [to] if isinstance(to, str) else list(to)

    if not resend.api_key:
        logger.warning("RESEND_API_KEY not set - logging email instead of sending")
        logger.info(f"EMAIL TO: {', '.join(recipients)} | SUBJECT: {subject}")
        return True

    try:
        params: resend.Emails.SendParams = {
            "from": from_email or settings.email_from,
            "to": recipients,
            "subject": subject,
        }
        if html_content:
            params["html"] = html_content
        if text_content:
            params["text"] = text_content
        if reply_to:
            params["reply_to"] = reply_to
        if attachments:
            params["attachments"] = attachments

        # Run sync Resend call in thread pool to avoid blocking event loop
        email = await asyncio.to_thread(resend.Emails.send, params)
        logger.info(f"Email sent successfully to {', '.join(recipients)}, id: {email['id']}")
        return True
    except Exception as e:
        logger.error(f"Failed to send email to {', '.join(recipients)}: {e}")
        return False


async def send_submission_notification(
    to_email: str,
    sponsor_name: str,
    sponsor_email: str,
    relationship: str,
    veteran_name: str,
    veteran_address: str,
    years_in_town: str,
    service_branch: str,
    service_period: str,
    contract_url: str,
    approve_url: str,
    issue_url: str,
    photos: list[tuple[str, str]],
    attachment: dict[str, Any] | None = None,
) -> bool:
    """Send a new-submission notice with review action links to one internal reviewer."""
    if photos:
        items = "".join(
            f'<li><strong>Photo {index}:</strong> <a href="{escape(url)}">{escape(filename)}</a></li>'
            for index, (url, filename) in enumerate(photos, start=1)
        )
        photos_html = f"<ul>{items}</ul>"
    else:
        photos_html = '<p class="muted"><strong>Photos:</strong> No photos submitted</p>'

    safe_veteran_name = escape(veteran_name)
    inner = f"""
            <h2 class="header">New Hometown Hero Banner Submission</h2>

            <p><strong>Quick Actions</strong></p>
            <a href="{escape(approve_url)}" class="button approve">Approve &amp; Notify Applicant</a>
            <a href="{escape(issue_url)}" class="button attention">Needs Attention</a>

            <h3>Applicant Information</h3>
            <p><strong>Name:</strong> {escape(sponsor_name)}</p>
            <p><strong>Email:</strong> {escape(sponsor_email)}</p>
            <p><strong>Relationship to Veteran:</strong> {escape(relationship)}</p>

            <h3>Veteran Information</h3>
            <p><strong>Name:</strong> {safe_veteran_name}</p>
            <p><strong>Berkeley Heights Address:</strong> {escape(veteran_address)}</p>
            <p><strong>Years in Berkeley Heights:</strong> {escape(years_in_town)}</p>
            <p><strong>Service Branch:</strong> {escape(service_branch)}</p>
            <p><strong>Conflict/Service Period:</strong> {escape(service_period)}</p>

            <h3>Attachments &amp; Links</h3>
            <p><strong>Contract URL:</strong> <a href="{escape(contract_url)}">{escape(contract_url)}</a></p>
            <p>The contract PDF is attached to this email.</p>
            <p><strong>Submitted Photos (copied to contract folder):</strong></p>
            {photos_html}

            <p class="muted">Submitted on {datetime.now().strftime("%m/%d/%Y")}</p>
    """

    return await send_email(
        to=[to_email],
        subject=f"New Hometown Hero Banner Submission: {veteran_name}",
        html_content=_page("New Hometown Hero Banner Submission", inner),
        attachments=[attachment] if attachment else None,
    )


async def send_submission_confirmation(
    to_email: str,
    sponsor_name: str,
    veteran_name: str,
    veteran_address: str,
    years_in_town: str,
    service_branch: str,
    service_period: str,
    contract_url: str,
    attachment: dict[str, Any] | None = None,
) -> bool:
    """Send the sponsor a receipt for their submission."""
    inner = f"""
            <p>Dear {escape(sponsor_name)},</p>

            <p>Thank you for submitting a Hometown Hero banner application for <strong>{escape(veteran_name)}</strong>.</p>

            <p>Your submission (attached) is now under review. You will receive another email if your banner is approved, or a member of the {COMMITTEE_NAME} may contact you if further information is required.</p>

            <p>Application Details:</p>
            <ul>
                <li><strong>Veteran Name:</strong> {escape(veteran_name)}</li>
                <li><strong>Berkeley Heights Address:</strong> {escape(veteran_address)}</li>
                <li><strong>Years in Berkeley Heights:</strong> {escape(years_in_town)}</li>
                <li><strong>Service Branch:</strong> {escape(service_branch)}</li>
                <li><strong>Conflict/Service Period:</strong> {escape(service_period)}</li>
            </ul>

            <p>For your records, a copy of the submission contract is attached to this email. You can also access it here: <a href="{escape(contract_url)}">{escape(contract_url)}</a></p>

            <div class="footer">
                <p>Sincerely,</p>
                <p>The Berkeley Heights Hometown Heroes Program</p>
            </div>
    """

    return await send_email(
        to=[to_email],
        subject=f"Your Hometown Hero Banner Submission for {veteran_name} Received",
        html_content=_page("Submission Received", inner),
        attachments=[attachment] if attachment else None,
    )


async def send_applicant_message(
    to_email: str,
    subject: str,
    body: str,
    reply_to: str | None,
    include_reply_cta: bool,
) -> bool:
    """
    Send the reviewer's composed message to the banner applicant.

    The body is plain text typed by a reviewer; it is escaped and shown with
    preserved line breaks. The reply button is only added when a reply address
    exists and `include_reply_cta` is set.
    """
    reply_html = ""
    if include_reply_cta and reply_to:
        mailto = f"mailto:{quote(reply_to, safe='')}?subject={quote('Re: ' + subject, safe='')}"
        reply_html = f"""
            <div style="margin-top: 16px;">
                <a href="{escape(mailto)}" class="button reply">Reply to the {COMMITTEE_NAME}</a>
                <p class="muted">If the button does not work, email {escape(reply_to)}.</p>
            </div>
        """

    inner = f"""
            <div class="message">{escape(body)}</div>
            {reply_html}
    """

    return await send_email(
        to=[to_email],
        subject=subject,
        html_content=_page(subject, inner),
        reply_to=reply_to,
    )


async def send_review_fyi(
    to_emails: list[str],
    sponsor_name: str,
    sponsor_email: str,
    veteran_name: str,
    sent_by: str,
    subject: str,
    body: str,
) -> bool:
    """Send both internal groups a copy of a message that went to an applicant."""
    inner = f"""
            <h2 class="header">FYI: Message sent to {escape(sponsor_name)}</h2>
            <p class="muted">No action needed. You are receiving this for awareness.</p>

            <p>
                <strong>To:</strong> {escape(sponsor_name)} &lt;{escape(sponsor_email)}&gt;<br/>
                <strong>Regarding:</strong> {escape(veteran_name)}<br/>
                <strong>Sent by:</strong> {escape(sent_by)}<br/>
                <strong>Subject:</strong> {escape(subject)}
            </p>

            <div class="quote">{escape(body)}</div>
    """

    return await send_email(
        to=to_emails,
        subject=f"[FYI] Copy of message sent to {sponsor_name} • {veteran_name}",
        html_content=_page("FYI", inner),
        reply_to=sent_by if "@" in sent_by else None,
    )
