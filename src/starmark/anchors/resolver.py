"""
Turn an anchor into the URL to open when the user activates it.
"""

from __future__ import annotations

from urllib.parse import urlsplit

from ..errors import Unresolvable
from .models import Anchor

NO_URL = "No URL"


def _is_absolute(href: str) -> bool:
    return href.startswith("http")


def _path_query_fragment(href: str) -> str:
    parts = urlsplit(href)
    target = parts.path or "/"
    if parts.query:
        target += f"?{parts.query}"
    if parts.fragment:
        target += f"#{parts.fragment}"
    return target


def resolve(anchor: Anchor) -> str:
    """
    Compute the navigable target for ``anchor``.

    With a custom prefix, an absolute href keeps only its path, query and
    fragment; a relative href is appended to the prefix as-is; a missing
    href becomes ``prefix + "/"``. Without a prefix the href is used
    verbatim.

    Raises:
        Unresolvable: if the anchor has neither href nor prefix, or its
            absolute href cannot be parsed
    """
    href = anchor.original.href
    prefix = anchor.custom_prefix

    if prefix:
        if not href:
            return f"{prefix}/"
        if _is_absolute(href):
            try:
                return f"{prefix}{_path_query_fragment(href)}"
            except ValueError as e:
                raise Unresolvable(anchor.id, anchor.name, reason=f"has a malformed URL: {href}") from e
        return f"{prefix}{href}"

    if href:
        return href

    raise Unresolvable(anchor.id, anchor.name)


def display_target(anchor: Anchor) -> str:
    """Resolved target for listings, or ``"No URL"``."""
    try:
        return resolve(anchor)
    except Unresolvable:
        return NO_URL
