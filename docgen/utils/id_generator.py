"""
ID and fingerprint helpers.

Provides functions for generating record IDs, timestamps and the
content hashes used to detect stale per-screen artifacts.
"""

import hashlib
import re
import uuid
from datetime import datetime, timezone


def generate_uuid() -> str:
    """
    Generate a random UUID.

    Returns:
        UUID string in format: xxxxxxxx-xxxx-xxxx-xxxx-xxxxxxxxxxxx
    """
    return str(uuid.uuid4())


def utc_now() -> str:
    """Current UTC time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()


def content_hash(text: str, length: int = 12) -> str:
    """
    Short, stable fingerprint of a text block.

    Whitespace runs are collapsed first so that re-flowing a section
    does not change its fingerprint.

    Args:
        text: Text to fingerprint
        length: Number of hex characters to keep

    Returns:
        Hex digest prefix
    """
    normalized = re.sub(r'\s+', ' ', text or '').strip()
    return hashlib.sha256(normalized.encode('utf-8')).hexdigest()[:length]


def truncate_string(text: str, max_length: int = 100, suffix: str = "...") -> str:
    """
    Truncate a string to a maximum length.

    Args:
        text: String to truncate
        max_length: Maximum length
        suffix: Suffix to add if truncated

    Returns:
        Truncated string
    """
    if len(text) <= max_length:
        return text
    return text[:max_length - len(suffix)] + suffix
