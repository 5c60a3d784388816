"""
Static-HTML renderer: fetch with httpx, describe nodes with BeautifulSoup.

No scripts run, so there is no computed style and no settle delay; the
inline ``cursor`` declaration is the only cursor hint available.
"""

from __future__ import annotations

import re
from typing import Dict, List, Optional, Sequence
from urllib.parse import urljoin

import httpx
import structlog
from bs4 import BeautifulSoup, Tag

from ..errors import RenderFailed
from ..protocols import RawImage, RawNode, RenderedPage
from .scripts import MAX_NODE_TEXT

logger = structlog.get_logger(__name__)

_CURSOR_RE = re.compile(r"(?:^|;)\s*cursor\s*:\s*([^;!]+)", re.IGNORECASE)


def _attribute_map(tag: Tag) -> Dict[str, str]:
    # bs4 returns multi-valued attributes such as class as lists
    attributes: Dict[str, str] = {}
    for key, value in tag.attrs.items():
        attributes[key] = " ".join(value) if isinstance(value, list) else str(value)
    return attributes


def _inline_cursor(style: str) -> str:
    match = _CURSOR_RE.search(style or "")
    return match.group(1).strip().lower() if match else ""


def _form_value(tag: Tag, attributes: Dict[str, str]) -> str:
    if tag.name == "textarea":
        return tag.get_text()
    if tag.name == "select":
        option = tag.find("option", selected=True) or tag.find("option")
        if option is None:
            return ""
        return str(option.get("value", option.get_text(strip=True)))
    return attributes.get("value", "")


def parse_html(html: str, url: str) -> RenderedPage:
    """Describe every element of ``html`` in document order."""
    soup = BeautifulSoup(html, "html.parser")

    images: List[RawImage] = []
    for img in soup.find_all("img"):
        src = img.get("src")
        data_src = img.get("data-src")
        images.append(
            RawImage(
                src=urljoin(url, src) if src else None,
                data_src=str(data_src) if data_src else None,
            )
        )

    nodes: List[RawNode] = []
    for tag in soup.find_all(True):
        attributes = _attribute_map(tag)
        nodes.append(
            RawNode(
                tag=tag.name.lower(),
                attributes=attributes,
                text=tag.get_text().strip()[:MAX_NODE_TEXT],
                id=attributes.get("id", ""),
                class_name=attributes.get("class", ""),
                value=_form_value(tag, attributes),
                name=attributes.get("name", ""),
                placeholder=attributes.get("placeholder", ""),
                inline_cursor=_inline_cursor(attributes.get("style", "")),
            )
        )

    return RenderedPage(url=url, images=images, nodes=nodes)


class SoupRenderer:
    """Renderer for pages that do not need a browser."""

    name = "soup"

    def __init__(self, client: Optional[httpx.AsyncClient] = None, user_agent: Optional[str] = None) -> None:
        self._client = client
        self.user_agent = user_agent
        self.logger = logger.bind(component="SoupRenderer")

    async def render(
        self,
        url: str,
        *,
        timeout_ms: int,
        settle_ms: int,
        blocked_resource_types: Sequence[str],
    ) -> RenderedPage:
        headers = {"User-Agent": self.user_agent} if self.user_agent else {}
        timeout = httpx.Timeout(timeout_ms / 1000.0)

        try:
            if self._client is not None:
                response = await self._client.get(url, headers=headers, timeout=timeout, follow_redirects=True)
            else:
                async with httpx.AsyncClient(follow_redirects=True) as client:
                    response = await client.get(url, headers=headers, timeout=timeout)
            response.raise_for_status()
        except httpx.TimeoutException as e:
            self.logger.warning("render_timeout", url=url, timeout_ms=timeout_ms)
            raise RenderFailed(url, f"navigation timeout after {timeout_ms}ms") from e
        except httpx.HTTPStatusError as e:
            raise RenderFailed(url, f"HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            self.logger.warning("render_error", url=url, error=str(e))
            raise RenderFailed(url, str(e) or type(e).__name__) from e

        page = parse_html(response.text, str(response.url))
        self.logger.debug("render_completed", url=url, images=len(page.images), nodes=len(page.nodes))
        return page
