"""
Input validation for URLs handed to the extractor.
"""

from __future__ import annotations

from typing import Sequence
from urllib.parse import urlparse

from .errors import InvalidInput

ALLOWED_SCHEMES = ("http", "https")
MAX_URL_LENGTH = 2048


def validate_url(url: str | None, allowed_schemes: Sequence[str] = ALLOWED_SCHEMES) -> str:
    """
    Check that ``url`` is an absolute http(s) URL and return it stripped.

    Raises:
        InvalidInput: if the URL is missing, too long, or malformed
    """
    if url is None or not str(url).strip():
        raise InvalidInput("URL is required")

    url = str(url).strip()
    if len(url) > MAX_URL_LENGTH:
        raise InvalidInput(f"URL exceeds maximum length of {MAX_URL_LENGTH}")

    try:
        parsed = urlparse(url)
    except ValueError as e:
        raise InvalidInput(f"Invalid URL format: {e}") from e

    if parsed.scheme.lower() not in allowed_schemes:
        raise InvalidInput(f"URL scheme '{parsed.scheme}' not allowed")
    if not parsed.netloc:
        raise InvalidInput("URL must include a host")

    return url


def is_absolute_http_url(value: str | None) -> bool:
    """True for strings starting with ``http``, the test the page script applies to image sources."""
    return bool(value) and value.startswith("http")  # type: ignore[union-attr]
