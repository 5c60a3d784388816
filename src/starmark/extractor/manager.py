"""
ExtractorManager: render a URL and extract deduplicated elements from it.
"""

from __future__ import annotations

import asyncio
import time
from typing import List, Union

import structlog

from .. import observability
from ..config.config import RenderConfig
from ..errors import ExtractionFailed, RenderFailed
from ..protocols import ExtractionResult, ImageElement, InteractiveElement, RenderedPage, Renderer
from ..validation import validate_url
from .images import extract_images
from .interactive import extract_interactive

logger = structlog.get_logger(__name__)


def extract_page(page: RenderedPage) -> ExtractionResult:
    """Run the image pass then the interactive pass over one rendered page.

    Pure: the same page always yields the same result.
    """
    elements: List[Union[ImageElement, InteractiveElement]] = []
    elements.extend(extract_images(page.images))
    elements.extend(extract_interactive(page.nodes))
    return ExtractionResult(url=page.url, elements=elements)


class ExtractorManager:
    """
    Drives one renderer per extraction request.

    Every failure after validation surfaces as ExtractionFailed; a failed
    render never produces a partial element list.
    """

    def __init__(self, renderer: Renderer, settings: RenderConfig) -> None:
        self.renderer = renderer
        self.settings = settings
        self.logger = logger.bind(component="ExtractorManager", renderer=renderer.name)

    @property
    def deadline_seconds(self) -> float:
        s = self.settings
        return (s.timeout_ms + s.settle_ms + s.grace_ms) / 1000.0

    async def extract(self, url: str) -> ExtractionResult:
        """
        Render ``url`` and extract its images and interactive elements.

        Raises:
            InvalidInput: before any rendering if the URL is missing or malformed
            ExtractionFailed: if rendering fails or exceeds its deadline
        """
        url = validate_url(url)
        start_time = time.monotonic()

        self.logger.info(
            "extraction_started",
            url=url,
            timeout_ms=self.settings.timeout_ms,
            settle_ms=self.settings.settle_ms,
        )

        try:
            page = await asyncio.wait_for(
                self.renderer.render(
                    url,
                    timeout_ms=self.settings.timeout_ms,
                    settle_ms=self.settings.settle_ms,
                    blocked_resource_types=tuple(self.settings.blocked_resource_types),
                ),
                timeout=self.deadline_seconds,
            )
        except RenderFailed as e:
            self._record_failure(url, e.message, type(e).__name__)
            raise ExtractionFailed(url, f"Failed to extract content: {e.message}") from e
        except asyncio.TimeoutError as e:
            message = f"rendering exceeded {self.deadline_seconds:.1f}s"
            self._record_failure(url, message, "TimeoutError")
            raise ExtractionFailed(url, f"Failed to extract content: {message}") from e
        except Exception as e:
            self._record_failure(url, str(e), type(e).__name__)
            raise ExtractionFailed(url, f"Failed to extract content: {e}") from e

        result = extract_page(page)
        counts = result.counts
        duration = time.monotonic() - start_time

        observability.increment("extractions", labels={"status": "success"})
        observability.increment("elements_extracted", counts.images, labels={"kind": "image"})
        observability.increment("elements_extracted", counts.interactive, labels={"kind": "interactive"})
        observability.histogram("extraction_duration_seconds", duration)

        self.logger.info(
            "extraction_completed",
            url=url,
            images=counts.images,
            interactive=counts.interactive,
            total=counts.total,
            duration=round(duration, 3),
        )
        return result

    def _record_failure(self, url: str, message: str, error_type: str) -> None:
        observability.increment("extractions", labels={"status": "failed"})
        self.logger.error("extraction_failed", url=url, error=message, error_type=error_type)
