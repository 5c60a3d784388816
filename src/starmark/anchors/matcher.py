"""
Re-anchoring: find a starred element again on a freshly extracted page.

The stored element's href often changes between visits (a "Next" link on
chapter 2 points somewhere else on chapter 3), so candidates are scored on
several weak signals instead of compared for identity:

    title     exact +10, else E.title contains A.title +5 (case-insensitive)
    class     +8 for every whitespace token the two class strings share
    text      exact +7, else E.text contains A.text +3 (case-insensitive)
    id        exact +6 (case-sensitive)
    tag       equal +2
    data-*    +4 for every data attribute present in both with equal value

Only interactive candidates with an href are considered. The strictly
highest score wins, ties go to the earliest candidate, and the winner is
accepted only at or above the threshold. A rejected match is the normal
steady state for an anchor that is not on the current page: it is logged,
never raised.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Union

import structlog

from .. import observability
from ..config.config import MatcherConfig
from ..protocols import ImageElement, InteractiveElement
from .models import Anchor
from .store import AnchorStore

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class MatchOutcome:
    """What happened to one anchor during a re-anchoring pass."""

    anchor_id: str
    name: str
    previous_href: str
    new_href: str
    score: int
    accepted: bool

    @property
    def changed(self) -> bool:
        return self.accepted and self.previous_href != self.new_href


def _class_tokens(class_name: str) -> set[str]:
    return set(class_name.lower().split())


class Matcher:
    """Weighted multi-field matcher. Weights and threshold come from MatcherConfig."""

    def __init__(self, config: Optional[MatcherConfig] = None) -> None:
        self.config = config or MatcherConfig()
        self.logger = logger.bind(component="Matcher")

    def score(self, original: InteractiveElement, candidate: InteractiveElement) -> int:
        w = self.config
        score = 0

        if original.title and candidate.title:
            a_title, e_title = original.title.lower(), candidate.title.lower()
            if a_title == e_title:
                score += w.title_exact
            elif a_title in e_title:
                score += w.title_substring

        if original.class_name and candidate.class_name:
            shared = _class_tokens(original.class_name) & _class_tokens(candidate.class_name)
            score += w.class_token * len(shared)

        if original.text and candidate.text:
            a_text, e_text = original.text.lower(), candidate.text.lower()
            if a_text == e_text:
                score += w.text_exact
            elif a_text in e_text:
                score += w.text_substring

        if original.id and candidate.id and original.id == candidate.id:
            score += w.id_exact

        if original.tag and candidate.tag and original.tag == candidate.tag:
            score += w.tag_match

        for key, value in original.data_attributes().items():
            if key in candidate.attributes and candidate.attributes[key] == value:
                score += w.data_attribute

        return score

    def best_candidate(
        self,
        original: InteractiveElement,
        candidates: Sequence[InteractiveElement],
    ) -> tuple[Optional[InteractiveElement], int]:
        """Highest-scoring candidate and its score, before thresholding."""
        best: Optional[InteractiveElement] = None
        best_score = 0
        for candidate in candidates:
            if not candidate.href:
                continue
            score = self.score(original, candidate)
            if score > best_score:
                best, best_score = candidate, score
        return best, best_score

    def match(self, anchor: Anchor, candidates: Sequence[InteractiveElement]) -> MatchOutcome:
        best, best_score = self.best_candidate(anchor.original, candidates)
        accepted = best is not None and best_score >= self.config.threshold
        return MatchOutcome(
            anchor_id=anchor.id,
            name=anchor.name,
            previous_href=anchor.original.href,
            new_href=best.href if accepted and best is not None else anchor.original.href,
            score=best_score,
            accepted=accepted,
        )

    async def reanchor(
        self,
        store: AnchorStore,
        elements: Iterable[Union[ImageElement, InteractiveElement]],
    ) -> List[MatchOutcome]:
        """Update every anchor in ``store`` against one fresh extraction.

        The store is saved only when at least one href actually changed.
        """
        candidates = _interactive_with_href(elements)
        outcomes: List[MatchOutcome] = []

        async with store.transaction() as tx:
            for anchor in tx.anchors:
                outcome = self.match(anchor, candidates)
                outcomes.append(outcome)

                if not outcome.accepted:
                    observability.increment("reanchor", labels={"outcome": "low_confidence"})
                    self.logger.info(
                        "reanchor_low_confidence",
                        anchor_id=anchor.id,
                        name=anchor.name,
                        score=outcome.score,
                        threshold=self.config.threshold,
                    )
                    continue

                if outcome.changed:
                    anchor.original.href = outcome.new_href
                    tx.mark_dirty()
                    observability.increment("reanchor", labels={"outcome": "updated"})
                    self.logger.info(
                        "reanchor_updated",
                        anchor_id=anchor.id,
                        name=anchor.name,
                        previous_href=outcome.previous_href,
                        new_href=outcome.new_href,
                        score=outcome.score,
                    )
                else:
                    observability.increment("reanchor", labels={"outcome": "unchanged"})

        return outcomes


def _interactive_with_href(
    elements: Iterable[Union[ImageElement, InteractiveElement]],
) -> List[InteractiveElement]:
    return [e for e in elements if isinstance(e, InteractiveElement) and e.href]
