"""Rendering collaborators that turn a URL into raw page descriptors."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .soup_renderer import SoupRenderer, parse_html

if TYPE_CHECKING:
    from ..config.config import RenderConfig
    from ..protocols import Renderer

__all__ = ["SoupRenderer", "parse_html", "create_renderer"]


def create_renderer(config: RenderConfig) -> Renderer:
    """Build the renderer selected by ``config.backend``."""
    if config.backend == "soup":
        return SoupRenderer(user_agent=config.user_agent)

    # Imported lazily so the static backend works without browser binaries
    from .playwright_renderer import PlaywrightRenderer

    return PlaywrightRenderer(
        headless=config.headless,
        scroll_to_bottom=config.scroll_to_bottom,
        user_agent=config.user_agent,
    )
