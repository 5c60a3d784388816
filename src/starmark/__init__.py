"""
Starmark - extract, classify and pin interactive page elements.
"""

from __future__ import annotations

__version__ = "0.1.0"

from .config import Config
from .pipeline import Pipeline, PipelineResult

__all__ = ["__version__", "Config", "Pipeline", "PipelineResult"]
