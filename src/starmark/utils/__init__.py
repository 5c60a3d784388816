"""Utility modules for Starmark."""

from .atomic import atomic_write_json, read_json

__all__ = ["atomic_write_json", "read_json"]
