"""
Signing Primitive

HMAC-SHA256 detached signatures encoded as unpadded URL-safe base64.
Used to make review action links tamper-evident without server-side state.
"""

import base64
import binascii
import hashlib
import hmac
import re

_B64URL_PATTERN = re.compile(r"^[A-Za-z0-9_-]*$")


def b64url_encode(raw: bytes) -> str:
    """Encode bytes as URL-safe base64 without padding."""
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def b64url_decode(data: str) -> bytes:
    """
    Decode unpadded URL-safe base64.

    Raises:
        binascii.Error: If the input contains characters outside the
            URL-safe alphabet or has an impossible length.
    """
    if not _B64URL_PATTERN.match(data):
        raise binascii.Error("Invalid base64url characters")
    padded = data + "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(padded.encode("ascii"))


def _to_bytes(value: str | bytes) -> bytes:
    return value.encode("utf-8") if isinstance(value, str) else value


def sign(message: str | bytes, secret: str | bytes) -> str:
    """
    Compute the signature of a message.

    Args:
        message: The signed content (for action links, the encoded payload)
        secret: Server-held HMAC key

    Returns:
        base64url HMAC-SHA256 digest, no padding
    """
    digest = hmac.new(_to_bytes(secret), _to_bytes(message), hashlib.sha256).digest()
    return b64url_encode(digest)


def verify(message: str | bytes, signature: str | bytes, secret: str | bytes) -> bool:
    """
    Check a signature in constant time.

    Never raises: malformed or non-ASCII signatures simply fail verification.
    """
    try:
        expected = sign(message, secret).encode("ascii")
        given = signature.encode("ascii") if isinstance(signature, str) else bytes(signature)
    except (TypeError, ValueError):
        return False
    return hmac.compare_digest(expected, given)
