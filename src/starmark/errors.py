"""
Exception hierarchy for Starmark.
"""

from __future__ import annotations

from typing import Optional


class StarmarkError(Exception):
    """Base exception for all Starmark errors."""

    pass


class InvalidInput(StarmarkError, ValueError):
    """Raised when a URL is missing or malformed. Nothing has been rendered."""

    pass


class RenderFailed(StarmarkError):
    """Raised by a renderer when navigation times out or the browser fails."""

    def __init__(self, url: str, message: str) -> None:
        super().__init__(f"Failed to render {url}: {message}")
        self.url = url
        self.message = message


class ExtractionFailed(StarmarkError):
    """Raised by the extractor when a page could not be extracted. No partial results."""

    def __init__(self, url: str, message: str) -> None:
        super().__init__(message)
        self.url = url
        self.message = message


class Unresolvable(StarmarkError):
    """Raised when an anchor has no usable target: no href and no prefix, or a malformed href."""

    def __init__(self, anchor_id: str, name: str, reason: Optional[str] = None) -> None:
        super().__init__(f'"{name}" {reason or "needs either a URL or a prefix to navigate"}')
        self.anchor_id = anchor_id
        self.name = name
        self.reason = reason


class AnchorNotFound(StarmarkError, KeyError):
    """Raised when an anchor id is not present in the store."""

    def __init__(self, anchor_id: str) -> None:
        super().__init__(anchor_id)
        self.anchor_id = anchor_id

    def __str__(self) -> str:
        return f"No anchor with id {self.anchor_id!r}"
