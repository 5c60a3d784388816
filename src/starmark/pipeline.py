"""
Pipeline orchestration for Starmark.

One run renders a page, extracts and classifies its elements, remembers the
result so elements can be starred by index afterwards, then re-anchors every
stored anchor against the fresh elements.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Set, Union
from uuid import uuid4

import structlog
from structlog.contextvars import bound_contextvars

from .anchors import Anchor, AnchorStore, JsonFileStorage, Matcher, MatchOutcome, resolve
from .classifier import categorize
from .config.config import Config
from .errors import InvalidInput, StarmarkError
from .extractor.manager import ExtractorManager
from .protocols import Category, ExtractionResult, ImageElement, InteractiveElement, Renderer
from .renderer import create_renderer
from .utils.atomic import atomic_write_json, read_json

logger = structlog.get_logger(__name__)


@dataclass
class PipelineResult:
    """Outcome of one pipeline run."""

    extraction: ExtractionResult
    categories: Dict[Category, List[Union[ImageElement, InteractiveElement]]]
    outcomes: List[MatchOutcome]

    @property
    def updated(self) -> List[MatchOutcome]:
        return [o for o in self.outcomes if o.changed]


class Pipeline:
    """Extract -> classify -> re-anchor, plus anchor activation."""

    def __init__(
        self,
        extractor: ExtractorManager,
        store: AnchorStore,
        matcher: Matcher,
        last_extraction_path: Optional[Path] = None,
    ) -> None:
        self.extractor = extractor
        self.store = store
        self.matcher = matcher
        self.last_extraction_path = last_extraction_path
        self.logger = logger.bind(component="Pipeline")

    @classmethod
    def from_config(cls, config: Config, renderer: Optional[Renderer] = None) -> Pipeline:
        return cls(
            extractor=ExtractorManager(renderer or create_renderer(config.render), config.render),
            store=AnchorStore(JsonFileStorage(config.storage.anchors_path)),
            matcher=Matcher(config.matcher),
            last_extraction_path=config.storage.last_extraction_path,
        )

    async def run(self, url: str) -> PipelineResult:
        """
        Extract ``url``, classify the elements and re-anchor stored anchors.

        Raises:
            InvalidInput: for a missing or malformed URL
            ExtractionFailed: if the page could not be rendered; anchors are untouched
            StarmarkError: if the stored anchors cannot be read; the extraction
                is still remembered
        """
        with bound_contextvars(correlation_id=uuid4().hex[:12]):
            extraction = await self.extractor.extract(url)
            categories = categorize(extraction.elements)
            await self.remember(extraction)
            outcomes = await self.matcher.reanchor(self.store, extraction.elements)

            result = PipelineResult(extraction=extraction, categories=categories, outcomes=outcomes)
            self.logger.info(
                "pipeline_completed",
                url=extraction.url,
                total=extraction.counts.total,
                anchors=len(outcomes),
                anchors_updated=len(result.updated),
            )
            return result

    async def activate(self, anchor_id: str) -> tuple[Anchor, str, PipelineResult]:
        """Resolve an anchor and run the pipeline on its target.

        Raises:
            AnchorNotFound: for an unknown id
            Unresolvable: if the anchor has neither href nor prefix
        """
        anchor = await self.store.get(anchor_id)
        target = resolve(anchor)
        self.logger.info("anchor_activated", anchor_id=anchor.id, name=anchor.name, target=target)
        return anchor, target, await self.run(target)

    async def remember(self, extraction: ExtractionResult) -> None:
        if self.last_extraction_path is None:
            return
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, atomic_write_json, self.last_extraction_path, extraction.to_dict())

    async def last_extraction(self) -> Optional[ExtractionResult]:
        if self.last_extraction_path is None:
            return None
        loop = asyncio.get_running_loop()
        data = await loop.run_in_executor(None, read_json, self.last_extraction_path, None)
        return ExtractionResult.from_dict(data) if data else None

    async def star(
        self,
        index: int,
        name: Optional[str] = None,
        custom_prefix: str = "",
    ) -> Anchor:
        """Star element ``index`` (0-based) of the last extraction."""
        extraction = await self.last_extraction()
        if extraction is None:
            raise StarmarkError("Nothing extracted yet; run an extraction first")
        if not 0 <= index < len(extraction.elements):
            raise InvalidInput(f"Element index {index} out of range; last extraction has {len(extraction.elements)}")

        element = extraction.elements[index]
        if not isinstance(element, InteractiveElement):
            raise InvalidInput(f"Element {index} is an image; only interactive elements can be starred")
        return await self.store.add(element, name=name, custom_prefix=custom_prefix)

    async def starred_indexes(self, extraction: ExtractionResult) -> Set[int]:
        """Indexes of the extraction's elements that already have an anchor."""
        anchors = await self.store.list()
        return {
            index
            for index, element in enumerate(extraction.elements)
            if isinstance(element, InteractiveElement) and await self.store.is_starred(element, anchors)
        }
