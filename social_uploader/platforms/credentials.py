"""
Credential supply for platform adapters.

Credentials are read from environment variables named
``<PLATFORM>_<KEY>``, e.g. ``YOUTUBE_CLIENT_ID`` or ``INSTAGRAM_ACCESS_TOKEN``.
"""
import os
from typing import Dict, Iterable, List, Mapping, Optional

# platform -> credential keys it needs
PLATFORM_CREDENTIALS: Dict[str, tuple] = {
    "youtube": ("CLIENT_ID", "CLIENT_SECRET", "REDIRECT_URI"),
    "instagram": ("ACCESS_TOKEN", "BUSINESS_ACCOUNT_ID"),
    "tiktok": ("CLIENT_KEY", "CLIENT_SECRET", "REDIRECT_URI"),
    "linkedin": ("CLIENT_ID", "CLIENT_SECRET", "PERSON_ID"),
    "twitter": ("API_KEY", "API_SECRET", "ACCESS_TOKEN", "ACCESS_TOKEN_SECRET"),
}

Credentials = Dict[str, Dict[str, str]]


def is_placeholder(value: Optional[str]) -> bool:
    """True for empty values and unfilled template values like ``your_key_here``."""
    if not value:
        return True
    return "your_" in value or value.endswith("_here")


def load_credentials(environ: Optional[Mapping[str, str]] = None) -> Credentials:
    """Collect ``<PLATFORM>_<KEY>`` variables for every known platform."""
    environ = os.environ if environ is None else environ
    credentials: Credentials = {}
    for platform, keys in PLATFORM_CREDENTIALS.items():
        prefix = platform.upper()
        credentials[platform] = {
            key: environ[f"{prefix}_{key}"]
            for key in keys
            if f"{prefix}_{key}" in environ
        }
    return credentials


def missing_credentials(credentials: Credentials, platforms: Iterable[str]) -> List[str]:
    """
    List missing credentials as ``"PLATFORM KEY"`` strings.

    Platforms without a credential definition are ignored.
    """
    missing = []
    for platform in platforms:
        keys = PLATFORM_CREDENTIALS.get(platform)
        if not keys:
            continue
        values = credentials.get(platform, {})
        for key in keys:
            if is_placeholder(values.get(key)):
                missing.append(f"{platform.upper()} {key}")
    return missing


def has_credentials(credentials: Credentials, platform: str) -> bool:
    return not missing_credentials(credentials, [platform])
