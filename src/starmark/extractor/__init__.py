"""
Element extraction: image pass, interactive pass, and the manager that
drives a renderer for one URL.
"""

from .images import extract_images, image_format
from .interactive import extract_interactive, identity_key, is_interactive
from .manager import ExtractorManager, extract_page

__all__ = [
    "ExtractorManager",
    "extract_images",
    "extract_interactive",
    "extract_page",
    "identity_key",
    "image_format",
    "is_interactive",
]
