"""
Object Storage (DigitalOcean Spaces)

Thin wrapper over a boto3 S3 client for browser uploads (pre-signed PUT URLs)
and server-side writes of contracts and photo copies. All objects are
public-read; URLs are returned in the Spaces virtual-host form.
"""

import asyncio
import logging
import re
from uuid import uuid4

import boto3

from hero_banners.core.config import Settings

logger = logging.getLogger(__name__)

PRESIGNED_URL_EXPIRY_SECONDS = 300

_UNSAFE_FILENAME_CHARS = re.compile(r"[^a-zA-Z0-9._-]")


def safe_filename(name: str) -> str:
    """Replace anything outside [A-Za-z0-9._-] with an underscore."""
    return _UNSAFE_FILENAME_CHARS.sub("_", name)


def upload_object_key(filename: str) -> str:
    """Unique key for a browser upload."""
    return f"uploads/{uuid4()}-{safe_filename(filename)}"


class SpacesStorage:
    """S3-compatible client bound to one Spaces bucket."""

    def __init__(
        self,
        bucket: str,
        endpoint: str,
        region: str,
        access_key: str,
        secret_key: str,
        client=None,
    ):
        self.bucket = bucket
        self.region = region
        self._client = client or boto3.client(
            "s3",
            endpoint_url=f"https://{endpoint}",
            region_name=region,
            aws_access_key_id=access_key,
            aws_secret_access_key=secret_key,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "SpacesStorage | None":
        """Build a client, or return None when Spaces is not fully configured."""
        if not settings.spaces_configured:
            return None
        return cls(
            bucket=settings.do_spaces_bucket_name,
            endpoint=settings.do_spaces_endpoint,
            region=settings.do_spaces_region,
            access_key=settings.do_spaces_access_key,
            secret_key=settings.do_spaces_secret_key,
        )

    def public_url(self, key: str) -> str:
        return f"https://{self.bucket}.{self.region}.digitaloceanspaces.com/{key}"

    def presign_upload(
        self,
        key: str,
        content_type: str,
        expires_in: int = PRESIGNED_URL_EXPIRY_SECONDS,
    ) -> str:
        """Pre-signed PUT URL the browser can upload `key` to directly."""
        return self._client.generate_presigned_url(
            "put_object",
            Params={
                "Bucket": self.bucket,
                "Key": key,
                "ContentType": content_type,
                "ACL": "public-read",
            },
            ExpiresIn=expires_in,
        )

    async def put_object(self, key: str, body: bytes, content_type: str) -> str:
        """Write an object and return its public URL."""
        # boto3 is blocking; keep it off the event loop
        await asyncio.to_thread(
            self._client.put_object,
            Bucket=self.bucket,
            Key=key,
            Body=body,
            ContentType=content_type,
            ACL="public-read",
        )
        logger.info(f"Stored object {key} ({len(body)} bytes)")
        return self.public_url(key)
