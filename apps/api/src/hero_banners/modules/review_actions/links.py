"""
Review Action Links

Builds and verifies the stateless, signed links embedded in reviewer emails.

A link carries four query parameters:
- action: approve | issue
- actor: admin | town
- data: base64url JSON of the ActionPayload
- sig: base64url HMAC-SHA256 of `data`

`parse_and_verify` is the single trust boundary for the render and dispatch
endpoints. Links never expire and may be replayed; nothing is stored
server-side.
"""

import json
from collections.abc import Mapping
from typing import Any
from urllib.parse import quote

from fastapi import Request
from pydantic import ValidationError

from hero_banners.core.config import Settings
from hero_banners.core.signing import b64url_decode, b64url_encode, sign, verify
from hero_banners.modules.review_actions.schemas import ActionPayload

LINK_FIELDS = ("action", "actor", "data", "sig")


class ReviewActionError(Exception):
    """Base exception for review action errors."""

    def __init__(self, message: str, error_code: str, status_code: int = 400):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        super().__init__(message)


class MissingParameterError(ReviewActionError):
    """Raised when a link or form is missing a required field."""

    def __init__(self, message: str = "Invalid or missing parameters."):
        super().__init__(message=message, error_code="MISSING_PARAMETER", status_code=400)


class InvalidSignatureError(ReviewActionError):
    """Raised when the link signature does not match its data."""

    def __init__(self):
        super().__init__(
            message="Invalid signature.",
            error_code="INVALID_SIGNATURE",
            status_code=400,
        )


class PayloadDecodeError(ReviewActionError):
    """Raised when link data is not base64url-encoded JSON."""

    def __init__(self, message: str = "Link data could not be decoded."):
        super().__init__(message=message, error_code="PAYLOAD_DECODE_ERROR", status_code=500)


class ConfigurationError(ReviewActionError):
    """Raised when the server lacks the secret or email credentials."""

    def __init__(self, message: str = "Server missing configuration"):
        super().__init__(message=message, error_code="CONFIGURATION_ERROR", status_code=500)


def encode_payload(payload: Any) -> str:
    """Serialize a JSON-compatible value as base64url JSON."""
    text = json.dumps(payload, separators=(",", ":"), ensure_ascii=False)
    return b64url_encode(text.encode("utf-8"))


def decode_payload(data: str) -> Any:
    """
    Inverse of `encode_payload`.

    Raises:
        PayloadDecodeError: If `data` is not valid base64url or not valid JSON
    """
    try:
        return json.loads(b64url_decode(data).decode("utf-8"))
    except ValueError as e:
        # binascii.Error, UnicodeDecodeError and JSONDecodeError are all ValueErrors
        raise PayloadDecodeError() from e


def build_action_link(
    base_url: str,
    action: str,
    actor: str,
    payload: ActionPayload | Mapping[str, Any],
    secret: str,
) -> str:
    """
    Build a signed review link.

    Args:
        base_url: Public origin of this service (no trailing path)
        action: "approve" or "issue"
        actor: "admin" or "town"
        payload: Data the review endpoints will need
        secret: ACTION_LINK_SECRET

    Returns:
        `<base_url>/review?action=..&actor=..&data=..&sig=..`
    """
    wire = payload.to_wire() if isinstance(payload, ActionPayload) else dict(payload)
    data = encode_payload(wire)
    sig = sign(data, secret)
    params = {"action": action, "actor": actor, "data": data, "sig": sig}
    query = "&".join(f"{name}={quote(str(value), safe='')}" for name, value in params.items())
    return f"{base_url.rstrip('/')}/review?{query}"


def parse_and_verify(query: Mapping[str, Any], secret: str | None) -> ActionPayload:
    """
    Verify link parameters and return the payload they carry.

    Args:
        query: Mapping holding action, actor, data and sig
        secret: ACTION_LINK_SECRET

    Returns:
        The decoded ActionPayload

    Raises:
        ConfigurationError: If no secret is configured
        MissingParameterError: If any of the four fields is absent or empty
        InvalidSignatureError: If `sig` does not sign `data`
        PayloadDecodeError: If signed data cannot be decoded
    """
    if not secret:
        raise ConfigurationError()

    if any(not query.get(field) for field in LINK_FIELDS):
        raise MissingParameterError()

    data = str(query["data"])
    if not verify(data, str(query["sig"]), secret):
        raise InvalidSignatureError()

    raw = decode_payload(data)
    if not isinstance(raw, dict):
        raise PayloadDecodeError("Link data is not an object.")
    try:
        return ActionPayload.model_validate(raw)
    except ValidationError as e:
        raise PayloadDecodeError("Link data has an unexpected shape.") from e


def resolve_base_url(request: Request, settings: Settings) -> str:
    """APP_BASE_URL when configured, else the scheme and host of the request."""
    if settings.app_base_url:
        return settings.app_base_url.rstrip("/")
    return f"{request.url.scheme}://{request.url.netloc}"
