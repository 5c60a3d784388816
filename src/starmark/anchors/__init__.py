"""
Anchors: user-starred elements that follow their target across pages.
"""

from .matcher import Matcher, MatchOutcome
from .models import Anchor
from .resolver import display_target, resolve
from .storage import JsonFileStorage, MemoryStorage
from .store import AnchorStore, StoreTransaction

__all__ = [
    "Anchor",
    "AnchorStore",
    "JsonFileStorage",
    "Matcher",
    "MatchOutcome",
    "MemoryStorage",
    "StoreTransaction",
    "display_target",
    "resolve",
]
