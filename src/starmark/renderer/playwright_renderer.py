"""
Headless Chromium renderer built on Playwright.

Each render call owns its own browser process. The browser is closed on
every exit path: success, navigation timeout, script error and task
cancellation.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

import structlog
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Route
from playwright.async_api import TimeoutError as PlaywrightTimeoutError
from playwright.async_api import async_playwright

from ..errors import RenderFailed
from ..protocols import RenderedPage
from .scripts import COLLECT_PAGE_JS, MAX_NODE_TEXT, SCROLL_TO_BOTTOM_JS

logger = structlog.get_logger(__name__)

LAUNCH_ARGS = ["--no-sandbox", "--disable-setuid-sandbox", "--disable-dev-shm-usage"]


class PlaywrightRenderer:
    """Renders pages in headless Chromium and collects raw node descriptors."""

    name = "playwright"

    def __init__(
        self,
        *,
        headless: bool = True,
        scroll_to_bottom: bool = True,
        user_agent: Optional[str] = None,
    ) -> None:
        self.headless = headless
        self.scroll_to_bottom = scroll_to_bottom
        self.user_agent = user_agent
        self.logger = logger.bind(component="PlaywrightRenderer")

    async def render(
        self,
        url: str,
        *,
        timeout_ms: int,
        settle_ms: int,
        blocked_resource_types: Sequence[str],
    ) -> RenderedPage:
        blocked = frozenset(blocked_resource_types)
        stage = "launch"

        try:
            async with async_playwright() as p:
                browser = await p.chromium.launch(headless=self.headless, args=LAUNCH_ARGS)
                try:
                    stage = "new_page"
                    page_args: Dict[str, Any] = {"user_agent": self.user_agent} if self.user_agent else {}
                    page = await browser.new_page(**page_args)

                    if blocked:

                        async def _filter(route: Route) -> None:
                            if route.request.resource_type in blocked:
                                await route.abort()
                            else:
                                await route.continue_()

                        await page.route("**/*", _filter)

                    stage = "goto"
                    await page.goto(url, wait_until="domcontentloaded", timeout=timeout_ms)

                    if self.scroll_to_bottom:
                        stage = "scroll"
                        await page.evaluate(SCROLL_TO_BOTTOM_JS)

                    stage = "settle"
                    await page.wait_for_timeout(settle_ms)

                    stage = "collect"
                    payload: Dict[str, Any] = await page.evaluate(COLLECT_PAGE_JS, MAX_NODE_TEXT)
                finally:
                    await browser.close()
        except PlaywrightTimeoutError as e:
            self.logger.warning("render_timeout", url=url, stage=stage, timeout_ms=timeout_ms)
            raise RenderFailed(url, f"navigation timeout after {timeout_ms}ms during {stage}") from e
        except PlaywrightError as e:
            self.logger.warning("render_error", url=url, stage=stage, error=str(e))
            raise RenderFailed(url, f"browser error during {stage}: {e}") from e

        rendered = RenderedPage.from_payload(url, payload or {})
        self.logger.debug("render_completed", url=url, images=len(rendered.images), nodes=len(rendered.nodes))
        return rendered
