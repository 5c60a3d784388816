"""
Image pass: turn raw image nodes into unique ImageElement records.
"""

from __future__ import annotations

from typing import Iterable, List
from urllib.parse import urlsplit

from ..protocols import ImageElement, RawImage
from ..validation import is_absolute_http_url

# Lazy-loading placeholders commonly carry this in their file name
PLACEHOLDER_MARKER = "loading"


def image_format(url: str) -> str:
    """Lowercased extension of the last path segment, or ``"unknown"``.

    Query string and fragment never contribute to the extension.
    """
    path = urlsplit(url).path
    segment = path.rsplit("/", 1)[-1]
    if "." not in segment:
        return "unknown"
    return segment.rsplit(".", 1)[1].lower() or "unknown"


def _candidates(image: RawImage) -> Iterable[str]:
    if image.src:
        yield image.src
    if image.data_src:
        yield image.data_src


def extract_images(images: Iterable[RawImage]) -> List[ImageElement]:
    """Accept absolute, non-placeholder sources once each, in document order."""
    seen: set[str] = set()
    results: List[ImageElement] = []

    for image in images:
        for candidate in _candidates(image):
            if not is_absolute_http_url(candidate):
                continue
            if PLACEHOLDER_MARKER in candidate or candidate in seen:
                continue
            seen.add(candidate)
            results.append(ImageElement(url=candidate, format=image_format(candidate)))

    return results
