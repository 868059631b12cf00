"""
Fixtures for review actions tests.
"""

from urllib.parse import parse_qs, urlsplit

import pytest
from fastapi.testclient import TestClient

from hero_banners.core.config import get_settings
from hero_banners.main import app
from hero_banners.modules.review_actions.links import build_action_link
from hero_banners.modules.review_actions.schemas import ActionPayload


@pytest.fixture
def sample_payload():
    """Payload for a link issued to the town clerk."""
    return ActionPayload(
        actor="town",
        veteran_name="John Doe",
        sponsor_name="Jane Sponsor",
        sponsor_email="jane@example.org",
        contract_url="https://banners.nyc3.digitaloceanspaces.com/contracts/John_Doe-1a2b3c4d/c.pdf",
        recipient_email="clerk@example.org",
    )


@pytest.fixture
def link_params(sample_payload, secret):
    """Query parameters of a correctly signed approve link."""

    def factory(action="approve", actor="town", payload=None):
        url = build_action_link(
            "https://banners.example.org", action, actor, payload or sample_payload, secret
        )
        return {name: values[0] for name, values in parse_qs(urlsplit(url).query).items()}

    return factory


@pytest.fixture
def client(settings):
    """Test client with settings injected."""
    app.dependency_overrides[get_settings] = lambda: settings
    yield TestClient(app)
    app.dependency_overrides.clear()
