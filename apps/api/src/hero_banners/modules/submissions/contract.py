"""
Banner Contract PDF

Renders the one-page submission contract (US Letter) with reportlab:
sponsor and veteran details, terms & conditions, up to three photo
thumbnails and the sponsor's drawn signature.
"""

import io
import logging
from dataclasses import dataclass
from datetime import datetime

from reportlab.lib import colors
from reportlab.lib.pagesizes import letter
from reportlab.lib.utils import ImageReader, simpleSplit
from reportlab.pdfgen import canvas

from hero_banners.modules.submissions.schemas import BannerSubmission

logger = logging.getLogger(__name__)

PAGE_WIDTH, PAGE_HEIGHT = letter
LEFT_MARGIN = 50
RIGHT_MARGIN = PAGE_WIDTH - 50
USABLE_WIDTH = PAGE_WIDTH - 2 * LEFT_MARGIN

BODY_LEADING = 15
HEADING_LEADING = 20
SECTION_SPACING = BODY_LEADING * 1.5

THUMBNAIL_SIZE = 80
THUMBNAIL_GAP = 10
MAX_THUMBNAILS = 3

SIGNATURE_BOX_WIDTH = 200
SIGNATURE_BOX_HEIGHT = 80

SUPPORTED_PHOTO_TYPES = ("image/jpeg", "image/jpg", "image/png")


@dataclass(frozen=True)
class ContractPhoto:
    """A fetched photo ready to embed."""

    filename: str
    content_type: str
    data: bytes


def terms_and_conditions(sponsor_name: str) -> list[str]:
    return [
        "ELIGIBILITY REQUIREMENT: This program is exclusively for veterans who actually lived in "
        "Berkeley Heights, NJ. Veterans who never resided in our town are not eligible for "
        "hometown hero banners.",
        "1. Residency Verification: All applications are reviewed to verify the veteran's genuine "
        "connection to Berkeley Heights. Applications for veterans who did not live in Berkeley "
        "Heights will be rejected.",
        "2. I will receive an email once my submission has been approved.",
        "3. New banner submissions are sent to the printers 2 weeks before Memorial Day (mid-May) "
        "and 2 weeks before Veterans Day (late October). Once the banners arrive, they will be "
        "hung on one of the main streets of Berkeley Heights.",
        "4. The location of banners cannot be controlled; placement is determined by the "
        "Department of Public Works (DPW), who works hard to put them up, take them down, and "
        "maintain the banners.",
        "5. To locate a specific banner, you will need to drive around Berkeley Heights and look "
        "on Springfield Avenue, Plainfield Avenue, Snyder Avenue, and Park Avenue.",
        "6. Each veteran can only have one banner; multiple submissions for the same veteran "
        "will be rejected.",
        "7. Once printed, the town will continue to display the banner each Memorial Day and "
        "Veterans Day. The banners are reusable, heavy-duty, and designed for long-term use.",
        "8. The banners are paid for by the Berkeley Heights Veterans Affairs Committee and are "
        "at no cost to you or the veteran.",
        f"9. I, {sponsor_name or '[Sponsor Name]'}, approve and authorize the usage of my or my "
        "family member's photograph and name to be used on printed Hometown Hero Banners in "
        "Berkeley Heights.",
    ]


class _ContractWriter:
    """Top-down text cursor over a single reportlab page."""

    def __init__(self, pdf: canvas.Canvas):
        self.pdf = pdf
        self.y = PAGE_HEIGHT - 50

    def text(self, value: str, x: float = LEFT_MARGIN, font: str = "Times-Roman", size: float = 10):
        self.pdf.setFont(font, size)
        self.pdf.drawString(x, self.y, value)

    def line(self, value: str, x: float = LEFT_MARGIN + 10):
        self.text(value, x)
        self.y -= BODY_LEADING

    def heading(self, value: str):
        self.text(value, font="Times-Bold", size=13)
        self.y -= HEADING_LEADING

    def wrapped(
        self,
        value: str,
        x: float = LEFT_MARGIN + 10,
        width: float = USABLE_WIDTH - 10,
        size: float = 10,
        leading: float = BODY_LEADING,
    ):
        for chunk in simpleSplit(value.replace("\n", " "), "Times-Roman", size, width):
            self.text(chunk, x, size=size)
            self.y -= leading

    def rule(self):
        self.pdf.setStrokeColor(colors.Color(0.75, 0.75, 0.75))
        self.pdf.setLineWidth(0.5)
        mid = self.y + BODY_LEADING / 2
        self.pdf.line(LEFT_MARGIN, mid, RIGHT_MARGIN, mid)
        self.y -= BODY_LEADING


def _draw_photos(writer: _ContractWriter, photos: list[ContractPhoto]) -> None:
    writer.heading("Submitted Photos (Thumbnails):")
    if not photos:
        writer.pdf.setFont("Times-Roman", 10)
        writer.pdf.drawString(
            LEFT_MARGIN, writer.y - THUMBNAIL_SIZE / 2, "No photos submitted or metadata missing."
        )
        writer.y -= THUMBNAIL_SIZE + SECTION_SPACING
        return

    x = LEFT_MARGIN
    for photo in photos[:MAX_THUMBNAILS]:
        if not photo.content_type.startswith(SUPPORTED_PHOTO_TYPES):
            logger.warning(f"Unsupported photo content type {photo.content_type} for {photo.filename}")
            continue
        try:
            image = ImageReader(io.BytesIO(photo.data))
            width, height = image.getSize()
            scale = min(THUMBNAIL_SIZE / width, THUMBNAIL_SIZE / height)
            writer.pdf.drawImage(
                image,
                x,
                writer.y - THUMBNAIL_SIZE,
                width=width * scale,
                height=height * scale,
            )
            x += THUMBNAIL_SIZE + THUMBNAIL_GAP
        except Exception as e:
            logger.error(f"Failed to embed photo {photo.filename}: {e}")

    writer.y -= THUMBNAIL_SIZE + SECTION_SPACING


def _draw_signature(
    writer: _ContractWriter,
    sponsor_name: str,
    signature_png: bytes | None,
    now: datetime,
) -> None:
    writer.heading("Authorization Signature:")
    pdf = writer.pdf

    if not signature_png:
        pdf.setFont("Times-Roman", 10)
        pdf.drawString(LEFT_MARGIN, writer.y - 20, "No signature provided.")
        writer.y -= SIGNATURE_BOX_HEIGHT + BODY_LEADING
        return

    try:
        image = ImageReader(io.BytesIO(signature_png))
        width, height = image.getSize()
        scale = min(SIGNATURE_BOX_WIDTH / width, SIGNATURE_BOX_HEIGHT / height)
        box_bottom = writer.y - SIGNATURE_BOX_HEIGHT

        pdf.setFillColor(colors.Color(0.95, 0.95, 0.95))
        pdf.rect(LEFT_MARGIN, box_bottom, SIGNATURE_BOX_WIDTH, SIGNATURE_BOX_HEIGHT, stroke=0, fill=1)
        pdf.setFillColor(colors.black)
        pdf.drawImage(
            image,
            LEFT_MARGIN + (SIGNATURE_BOX_WIDTH - width * scale) / 2,
            box_bottom + (SIGNATURE_BOX_HEIGHT - height * scale) / 2,
            width=width * scale,
            height=height * scale,
            mask="auto",
        )
        writer.y -= SIGNATURE_BOX_HEIGHT + BODY_LEADING
        writer.text(f"Signed by: {sponsor_name or 'N/A'}", LEFT_MARGIN)
        writer.y -= BODY_LEADING
        writer.text(f"Date: {now:%m/%d/%Y, %I:%M:%S %p}", LEFT_MARGIN)
    except Exception as e:
        logger.error(f"Error embedding signature: {e}")
        pdf.setFont("Times-Roman", 10)
        pdf.drawString(LEFT_MARGIN, writer.y - 20, "Signature could not be embedded.")
        writer.y -= SIGNATURE_BOX_HEIGHT + BODY_LEADING


def render_contract_pdf(
    submission: BannerSubmission,
    photos: list[ContractPhoto],
    signature_png: bytes | None,
    now: datetime,
) -> bytes:
    """
    Render the contract for a submission.

    Args:
        submission: Form fields
        photos: Fetched photos in submission order (first three are drawn)
        signature_png: PNG bytes of the drawn signature, if any
        now: Submission time printed on the contract

    Returns:
        PDF document bytes
    """
    buffer = io.BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=letter)
    pdf.setTitle(f"Hometown Hero Banner Contract - {submission.veteran_name or 'N/A'}")
    writer = _ContractWriter(pdf)

    writer.text("Hometown Hero Banner Program - Submission Contract", font="Helvetica-Bold", size=18)
    writer.y -= HEADING_LEADING * 1.5
    writer.text(f"Submission Date: {now:%m/%d/%Y}")
    writer.y -= BODY_LEADING * 1.5

    writer.heading("Applicant (Sponsor) Information:")
    writer.line(f"Name: {submission.sponsor_name or 'N/A'}")
    writer.line(f"Email: {submission.sponsor_email or 'N/A'}")
    writer.line(f"Relationship to Veteran: {submission.relationship_to_veteran or 'N/A'}")
    writer.y -= SECTION_SPACING - BODY_LEADING

    writer.heading("Veteran Information:")
    writer.line(f"Name: {submission.veteran_name or 'N/A'}")
    writer.line(f"Berkeley Heights Address: {submission.veteran_address or 'N/A'}")
    writer.line(f"Years in Berkeley Heights: {submission.veteran_years_in_town or 'N/A'}")
    if submission.veteran_town_connection:
        writer.wrapped(f"Berkeley Heights Connection: {submission.veteran_town_connection}")
    writer.line(f"Branch of Service: {submission.service_branch_label}")
    writer.line(f"Period of Service / Conflict: {submission.service_period_or_conflict or 'N/A'}")
    if submission.unknown_branch_info:
        writer.wrapped(f"Additional Branch Info: {submission.unknown_branch_info}")
    writer.y -= SECTION_SPACING - BODY_LEADING

    writer.rule()
    writer.heading("Terms & Conditions:")
    for paragraph in terms_and_conditions(submission.sponsor_name):
        writer.wrapped(paragraph, x=LEFT_MARGIN, width=USABLE_WIDTH, size=9, leading=12)
        writer.y -= BODY_LEADING / 2.5
    writer.y -= SECTION_SPACING

    _draw_photos(writer, photos)
    writer.rule()
    _draw_signature(writer, submission.sponsor_name, signature_png, now)

    pdf.showPage()
    pdf.save()
    data = buffer.getvalue()
    logger.info(f"Contract PDF generated, size: {len(data)} bytes")
    return data
