"""
Core module - Configuration, signing, email, storage, and rate limiting.
"""

from hero_banners.core.config import Settings, get_settings, settings
from hero_banners.core.redis import close_redis, get_redis_client, init_redis
from hero_banners.core.signing import sign, verify

__all__ = [
    # Config
    "Settings",
    "settings",
    "get_settings",
    # Redis
    "init_redis",
    "close_redis",
    "get_redis_client",
    # Signing
    "sign",
    "verify",
]
