"""
Persistence backends for serialized anchor records.
"""

from __future__ import annotations

import asyncio
import copy
import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import structlog

from ..errors import StarmarkError
from ..utils.atomic import atomic_write_json, read_json

logger = structlog.get_logger(__name__)


class MemoryStorage:
    """Keeps records in process memory. Useful for tests and one-shot runs."""

    def __init__(self, records: Optional[List[Dict[str, Any]]] = None) -> None:
        self._records: List[Dict[str, Any]] = copy.deepcopy(records or [])
        self.save_count = 0

    async def load(self) -> List[Dict[str, Any]]:
        return copy.deepcopy(self._records)

    async def save(self, records: List[Dict[str, Any]]) -> None:
        self._records = copy.deepcopy(records)
        self.save_count += 1


class JsonFileStorage:
    """Stores records as a JSON array in a single file, written atomically."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    async def load(self) -> List[Dict[str, Any]]:
        loop = asyncio.get_running_loop()
        try:
            data = await loop.run_in_executor(None, read_json, self.path, [])
        except json.JSONDecodeError as e:
            raise StarmarkError(f"Anchor file {self.path} is not valid JSON: {e}") from e

        if not isinstance(data, list):
            raise StarmarkError(f"Anchor file {self.path} must contain a JSON array")
        return data

    async def save(self, records: List[Dict[str, Any]]) -> None:
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, atomic_write_json, self.path, records)
        logger.debug("anchors_saved", path=str(self.path), count=len(records))
