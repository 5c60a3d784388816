"""
Ordered collection of anchors over an injected storage backend.

Every read-modify-write cycle runs inside ``transaction()``, which holds the
store's lock, so concurrent extractions never interleave their updates.
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Optional

import structlog
from pydantic import ValidationError

from ..errors import AnchorNotFound, InvalidInput, StarmarkError
from ..protocols import AnchorStorage, InteractiveElement
from .models import Anchor

logger = structlog.get_logger(__name__)

DEFAULT_ANCHOR_NAME = "Starred Item"


def default_name(element: InteractiveElement) -> str:
    return element.text or element.title or element.href or DEFAULT_ANCHOR_NAME


class StoreTransaction:
    """Anchors loaded under the store lock. Saved on exit only if marked dirty."""

    def __init__(self, anchors: List[Anchor]) -> None:
        self.anchors = anchors
        self.dirty = False

    def mark_dirty(self) -> None:
        self.dirty = True

    def find(self, anchor_id: str) -> Anchor:
        for anchor in self.anchors:
            if anchor.id == anchor_id:
                return anchor
        raise AnchorNotFound(anchor_id)


class AnchorStore:
    """User-created anchors, in creation order."""

    def __init__(self, storage: AnchorStorage) -> None:
        self.storage = storage
        self._lock = asyncio.Lock()
        self.logger = logger.bind(component="AnchorStore")

    async def load(self) -> List[Anchor]:
        records = await self.storage.load()
        anchors: List[Anchor] = []
        for index, record in enumerate(records):
            try:
                anchors.append(Anchor.from_record(record))
            except ValidationError as e:
                raise StarmarkError(f"Stored anchor #{index} is malformed: {e}") from e
        return anchors

    async def save(self, anchors: List[Anchor]) -> None:
        await self.storage.save([anchor.to_record() for anchor in anchors])

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[StoreTransaction]:
        async with self._lock:
            tx = StoreTransaction(await self.load())
            yield tx
            if tx.dirty:
                await self.save(tx.anchors)

    async def list(self) -> List[Anchor]:
        async with self._lock:
            return await self.load()

    async def get(self, anchor_id: str) -> Anchor:
        async with self.transaction() as tx:
            return tx.find(anchor_id)

    async def add(
        self,
        element: InteractiveElement,
        name: Optional[str] = None,
        custom_prefix: str = "",
    ) -> Anchor:
        if not isinstance(element, InteractiveElement):
            raise InvalidInput("Only interactive elements can be starred")

        anchor = Anchor(
            name=name if name is not None else default_name(element),
            original=element.model_copy(deep=True),
            custom_prefix=custom_prefix,
        )
        async with self.transaction() as tx:
            tx.anchors.append(anchor)
            tx.mark_dirty()

        self.logger.info("anchor_added", anchor_id=anchor.id, name=anchor.name, href=anchor.original.href)
        return anchor

    async def rename(self, anchor_id: str, name: str) -> Anchor:
        async with self.transaction() as tx:
            anchor = tx.find(anchor_id)
            if anchor.name != name:
                anchor.name = name
                tx.mark_dirty()

        self.logger.info("anchor_renamed", anchor_id=anchor_id, name=name)
        return anchor

    async def set_prefix(self, anchor_id: str, prefix: str) -> Anchor:
        async with self.transaction() as tx:
            anchor = tx.find(anchor_id)
            if anchor.custom_prefix != prefix:
                anchor.custom_prefix = prefix
                tx.mark_dirty()

        self.logger.info("anchor_prefix_set", anchor_id=anchor_id, prefix=anchor.custom_prefix)
        return anchor

    async def delete(self, anchor_id: str) -> Anchor:
        async with self.transaction() as tx:
            anchor = tx.find(anchor_id)
            tx.anchors.remove(anchor)
            tx.mark_dirty()

        self.logger.info("anchor_deleted", anchor_id=anchor_id, name=anchor.name)
        return anchor

    async def is_starred(self, element: InteractiveElement, anchors: Optional[List[Anchor]] = None) -> bool:
        """True when an anchor was starred from an element with the same href and text.

        Pass ``anchors`` to check many elements against one load.
        """
        if anchors is None:
            anchors = await self.list()
        return any(a.original.href == element.href and a.original.text == element.text for a in anchors)
