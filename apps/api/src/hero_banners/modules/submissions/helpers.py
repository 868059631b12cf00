"""
Submissions Helpers

Small pure functions shared by the intake service and router.
"""

import json
import logging
from datetime import datetime

from pydantic import ValidationError

from hero_banners.core.config import Settings
from hero_banners.core.storage import safe_filename
from hero_banners.modules.submissions.schemas import PhotoMetadata

logger = logging.getLogger(__name__)


def parse_photos_metadata(raw: str | None) -> list[PhotoMetadata]:
    """
    Parse the photosMetadata form field.

    Malformed input yields an empty list; the contract is still generated
    with a "no photos" placeholder.
    """
    if not raw:
        return []
    try:
        items = json.loads(raw)
    except ValueError:
        logger.error("Failed to parse photosMetadata JSON")
        return []
    if not isinstance(items, list):
        logger.warning("photosMetadata was not a list")
        return []

    photos = []
    for item in items:
        try:
            photos.append(PhotoMetadata.model_validate(item))
        except ValidationError:
            logger.warning("Skipping malformed photo metadata entry")
    return photos


def parse_flag(value: str | None) -> bool:
    """Form checkboxes arrive as the string "true"."""
    return (value or "").strip().lower() == "true"


def is_test_submission(sponsor_email: str, settings: Settings) -> bool:
    return bool(sponsor_email) and sponsor_email.strip().lower() in settings.test_emails


def should_notify_town(sponsor_email: str, settings: Settings) -> bool:
    """Town reviewers are skipped for test submissions when configured to."""
    return not (
        settings.skip_town_for_test_submissions and is_test_submission(sponsor_email, settings)
    )


def contract_location(veteran_name: str, suffix: str, now: datetime) -> tuple[str, str]:
    """
    Folder and filename for a submission's contract.

    Returns:
        (folder, filename), e.g. ("contracts/John_Doe-1a2b3c4d",
        "banner-contract-John_Doe-05-2025.pdf")
    """
    safe_name = safe_filename(veteran_name or "unknown-veteran")
    folder = f"contracts/{safe_name}-{suffix}"
    filename = f"banner-contract-{safe_name}-{now:%m}-{now:%Y}.pdf"
    return folder, filename


def photo_copy_key(folder: str, index: int, filename: str) -> str:
    """Key for the n-th (1-based) photo copied next to the contract."""
    return f"{folder}/photo-{index}-{safe_filename(filename)}"
