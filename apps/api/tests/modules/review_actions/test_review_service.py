"""
Unit tests for review actions service layer.

These tests cover:
- Default message composition
- Compose page rendering
- Dispatch fan-out to applicant and groups
- Best-effort handling of send failures
"""

from datetime import date
from unittest.mock import AsyncMock, patch

import pytest

from hero_banners.modules.review_actions.service import (
    MissingSponsorEmailError,
    alert_group,
    compose_default_message,
    dispatch_review_action,
    notified_groups,
    render_review_page,
    reply_to_address,
)

SERVICE = "hero_banners.modules.review_actions.service"


class TestRecipients:
    """Tests for recipient helpers."""

    def test_notified_groups_deduplicates_in_order(self, settings):
        assert notified_groups(settings) == [
            "admin@example.org",
            "shared@example.org",
            "clerk@example.org",
        ]

    def test_alert_group_is_opposite_group(self, settings):
        assert alert_group("admin", settings) == settings.town_emails
        assert alert_group("town", settings) == settings.admin_emails

    def test_reply_to_prefers_primary_admin(self, settings, sample_payload):
        assert reply_to_address(sample_payload, settings) == "admin@example.org"

    def test_reply_to_falls_back_to_recipient(self, settings_factory, sample_payload):
        settings = settings_factory(admin_email_recipients="")
        assert reply_to_address(sample_payload, settings) == "clerk@example.org"

    def test_reply_to_none_when_nothing_known(self, settings_factory, sample_payload):
        settings = settings_factory(admin_email_recipients="")
        payload = sample_payload.model_copy(update={"recipient_email": ""})
        assert reply_to_address(payload, settings) is None


class TestComposeDefaultMessage:
    """Tests for compose_default_message."""

    def test_approve_names_next_printable_event(self, sample_payload):
        draft = compose_default_message("approve", sample_payload, "admin@example.org", date(2025, 4, 1))

        assert draft.subject == "Your Hometown Hero banner for John Doe has been approved"
        assert draft.body.startswith("Hello Jane Sponsor,")
        assert "will be printed ahead of Memorial Day" in draft.body

    def test_approve_inside_cutoff_names_following_event(self, sample_payload):
        draft = compose_default_message("approve", sample_payload, "", date(2025, 5, 20))
        assert "ahead of Veterans Day" in draft.body

    def test_issue_requests_clearer_photo(self, sample_payload):
        draft = compose_default_message("issue", sample_payload, "admin@example.org")

        assert draft.subject == "Update needed for your Hometown Hero banner"
        assert "clearer photo" in draft.body
        assert "or email admin@example.org" in draft.body

    def test_issue_without_admin_email(self, sample_payload):
        draft = compose_default_message("issue", sample_payload, "")
        assert "or email" not in draft.body


class TestRenderReviewPage:
    """Tests for render_review_page."""

    def test_page_carries_link_fields_and_escapes_values(self, settings, sample_payload):
        payload = sample_payload.model_copy(update={"sponsor_name": "<script>alert(1)</script>"})

        html = render_review_page(
            action="issue",
            actor="town",
            data="abc",
            sig="xyz",
            payload=payload,
            settings=settings,
            submit_url="https://banners.example.org/api/send-review-action",
        )

        assert "<script>alert(1)</script>" not in html
        assert "&lt;script&gt;" in html
        assert 'name="data" value="abc"' in html
        assert 'name="sig" value="xyz"' in html
        assert 'action="https://banners.example.org/api/send-review-action"' in html
        # Town reviewer: the copy goes to the admin group
        assert "admin@example.org, shared@example.org" in html


class TestDispatchReviewAction:
    """Tests for dispatch_review_action."""

    @pytest.mark.asyncio
    async def test_sends_one_applicant_email_and_one_fyi(self, settings, sample_payload):
        with (
            patch(f"{SERVICE}.send_applicant_message", new_callable=AsyncMock) as mock_applicant,
            patch(f"{SERVICE}.send_review_fyi", new_callable=AsyncMock) as mock_fyi,
        ):
            mock_applicant.return_value = True
            mock_fyi.return_value = True

            result = await dispatch_review_action(
                action="approve",
                actor="town",
                payload=sample_payload,
                subject="Approved",
                body="Looks good",
                settings=settings,
            )

        mock_applicant.assert_called_once()
        applicant_kwargs = mock_applicant.call_args.kwargs
        assert applicant_kwargs["to_email"] == "jane@example.org"
        assert applicant_kwargs["reply_to"] == "admin@example.org"
        assert applicant_kwargs["include_reply_cta"] is False

        mock_fyi.assert_called_once()
        fyi_kwargs = mock_fyi.call_args.kwargs
        assert fyi_kwargs["to_emails"] == [
            "admin@example.org",
            "shared@example.org",
            "clerk@example.org",
        ]
        assert fyi_kwargs["sent_by"] == "clerk@example.org"

        assert result.applicant == ["jane@example.org"]
        assert result.sender == "clerk@example.org"
        assert result.applicant_sent is True
        assert result.groups_sent is True

    @pytest.mark.asyncio
    async def test_issue_includes_reply_button(self, settings, sample_payload):
        with (
            patch(f"{SERVICE}.send_applicant_message", new_callable=AsyncMock) as mock_applicant,
            patch(f"{SERVICE}.send_review_fyi", new_callable=AsyncMock),
        ):
            await dispatch_review_action(
                action="issue",
                actor="admin",
                payload=sample_payload,
                subject="Update",
                body="Please update",
                settings=settings,
            )

        assert mock_applicant.call_args.kwargs["include_reply_cta"] is True

    @pytest.mark.asyncio
    async def test_applicant_failure_does_not_block_fyi(self, settings, sample_payload):
        with (
            patch(f"{SERVICE}.send_applicant_message", new_callable=AsyncMock) as mock_applicant,
            patch(f"{SERVICE}.send_review_fyi", new_callable=AsyncMock) as mock_fyi,
        ):
            mock_applicant.side_effect = RuntimeError("provider down")
            mock_fyi.return_value = True

            result = await dispatch_review_action(
                action="approve",
                actor="admin",
                payload=sample_payload,
                subject="Approved",
                body="Looks good",
                settings=settings,
            )

        mock_fyi.assert_called_once()
        assert result.applicant_sent is False
        assert result.groups_sent is True

    @pytest.mark.asyncio
    async def test_fyi_failure_is_reported(self, settings, sample_payload):
        with (
            patch(f"{SERVICE}.send_applicant_message", new_callable=AsyncMock) as mock_applicant,
            patch(f"{SERVICE}.send_review_fyi", new_callable=AsyncMock) as mock_fyi,
        ):
            mock_applicant.return_value = True
            mock_fyi.return_value = False

            result = await dispatch_review_action(
                action="approve",
                actor="admin",
                payload=sample_payload,
                subject="Approved",
                body="Looks good",
                settings=settings,
            )

        assert result.applicant_sent is True
        assert result.groups_sent is False

    @pytest.mark.asyncio
    async def test_no_groups_configured_skips_fyi(self, settings_factory, sample_payload):
        settings = settings_factory(admin_email_recipients="", town_email_recipients="")
        with (
            patch(f"{SERVICE}.send_applicant_message", new_callable=AsyncMock) as mock_applicant,
            patch(f"{SERVICE}.send_review_fyi", new_callable=AsyncMock) as mock_fyi,
        ):
            mock_applicant.return_value = True
            result = await dispatch_review_action(
                action="approve",
                actor="admin",
                payload=sample_payload,
                subject="Approved",
                body="Looks good",
                settings=settings,
            )

        mock_fyi.assert_not_called()
        assert result.groups_notified == []
        assert result.groups_sent is None

    @pytest.mark.asyncio
    async def test_missing_sponsor_email(self, settings, sample_payload):
        payload = sample_payload.model_copy(update={"sponsor_email": "  "})
        with (
            patch(f"{SERVICE}.send_applicant_message", new_callable=AsyncMock) as mock_applicant,
            patch(f"{SERVICE}.send_review_fyi", new_callable=AsyncMock) as mock_fyi,
        ):
            with pytest.raises(MissingSponsorEmailError):
                await dispatch_review_action(
                    action="approve",
                    actor="admin",
                    payload=payload,
                    subject="Approved",
                    body="Looks good",
                    settings=settings,
                )

        mock_applicant.assert_not_called()
        mock_fyi.assert_not_called()
