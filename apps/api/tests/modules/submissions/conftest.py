"""
Fixtures for submissions tests.
"""

from unittest.mock import MagicMock

import pytest

from hero_banners.core.storage import SpacesStorage
from hero_banners.modules.submissions.schemas import BannerSubmission, PhotoMetadata


@pytest.fixture
def mock_s3():
    """Create a mock boto3 S3 client."""
    client = MagicMock()
    client.generate_presigned_url.return_value = "https://banners.nyc3.digitaloceanspaces.com/signed"
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


@pytest.fixture
def sample_submission():
    """A completed form with two uploaded photos."""
    return BannerSubmission(
        sponsor_name="Jane Sponsor",
        sponsor_email="jane@example.org",
        relationship_to_veteran="Daughter",
        veteran_name="John Doe",
        veteran_address="12 Main St",
        veteran_years_in_town="1960-1990",
        veteran_town_connection="Grew up on Plainfield Avenue",
        service_branch="Army",
        is_reserve=True,
        service_period_or_conflict="Vietnam",
        consent_given=True,
        photos=[
            PhotoMetadata(
                public_url="https://photos.example/uploads/one.jpg",
                content_type="image/jpeg",
                filename="one.jpg",
            ),
            PhotoMetadata(
                public_url="https://photos.example/uploads/missing.jpg",
                content_type="image/jpeg",
                filename="missing.jpg",
            ),
        ],
    )
