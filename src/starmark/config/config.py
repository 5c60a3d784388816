"""
Configuration management for Starmark using Pydantic.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Literal, Optional

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# --- Setup Logging ---
log = logging.getLogger(__name__)

# --- Nested Configuration Models ---


class RenderConfig(BaseModel):
    """How pages are rendered before extraction."""

    backend: Literal["playwright", "soup"] = Field(
        default="playwright",
        description="Rendering collaborator: headless Chromium or static HTML via httpx.",
    )
    timeout_ms: int = Field(default=15000, description="Navigation timeout in milliseconds.")
    settle_ms: int = Field(
        default=3000,
        description="Wait after the initial load so client-side content can finish rendering.",
    )
    blocked_resource_types: List[str] = Field(
        default_factory=lambda: ["stylesheet", "font"],
        description="Resource types aborted during rendering.",
    )
    grace_ms: int = Field(
        default=10000,
        description="Extra time allowed on top of timeout_ms + settle_ms for browser start-up and script evaluation.",
    )
    headless: bool = Field(default=True, description="Run the browser without a window.")
    scroll_to_bottom: bool = Field(default=True, description="Scroll to the end of the page to trigger lazy loading.")
    user_agent: Optional[str] = Field(default=None, description="User-Agent override. None keeps the browser default.")

    @field_validator("timeout_ms")
    @classmethod
    def validate_timeout(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("timeout_ms must be positive")
        return v

    @field_validator("settle_ms")
    @classmethod
    def validate_settle(cls, v: int) -> int:
        if v < 0:
            raise ValueError("settle_ms cannot be negative")
        return v


class MatcherConfig(BaseModel):
    """Weights for re-anchoring a starred element on a fresh page.

    The defaults are empirical. Many elements sharing a common class token
    such as ``btn`` can inflate scores; tune here rather than in code.
    """

    title_exact: int = 10
    title_substring: int = 5
    class_token: int = 8
    text_exact: int = 7
    text_substring: int = 3
    id_exact: int = 6
    tag_match: int = 2
    data_attribute: int = 4
    threshold: int = Field(default=5, description="Minimum score for a candidate to replace the stored href.")

    @field_validator(
        "title_exact",
        "title_substring",
        "class_token",
        "text_exact",
        "text_substring",
        "id_exact",
        "tag_match",
        "data_attribute",
    )
    @classmethod
    def validate_weight(cls, v: int) -> int:
        if v < 0:
            raise ValueError("matcher weights cannot be negative")
        return v


class StorageConfig(BaseModel):
    """Where anchors and the last extraction are kept."""

    state_dir: Path = Field(default_factory=lambda: Path.home() / ".starmark")
    anchors_file: str = Field(default="anchors.json")
    last_extraction_file: str = Field(default="last_extraction.json")

    @property
    def anchors_path(self) -> Path:
        return self.state_dir / self.anchors_file

    @property
    def last_extraction_path(self) -> Path:
        return self.state_dir / self.last_extraction_file


class MonitoringConfig(BaseModel):
    """Configuration for logging and metrics."""

    log_level: str = Field(default="INFO", description="Logging level (e.g., DEBUG, INFO, WARNING).")
    log_file: str | None = Field(default=None, description="Path to log file. If None, logs to console.")
    metrics_enabled: bool = Field(default=True, description="Record Prometheus counters.")
    metrics_file: str | None = Field(
        default=None, description="Write metrics in Prometheus text format here when a command exits."
    )

    @field_validator("log_file", "metrics_file", mode="before")
    @classmethod
    def create_parent_dir(cls, v: str | Path | None) -> str | None:
        if v is None:
            return None
        path = Path(v)
        path.parent.mkdir(parents=True, exist_ok=True)
        return str(path)


# --- Main Configuration Class ---


class Config(BaseSettings):
    project_name: str = "Starmark"
    render: RenderConfig = Field(default_factory=RenderConfig)
    matcher: MatcherConfig = Field(default_factory=MatcherConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    monitoring: MonitoringConfig = Field(default_factory=MonitoringConfig)

    model_config = SettingsConfigDict(env_prefix="STARMARK_", env_nested_delimiter="__", case_sensitive=False)

    @classmethod
    def from_yaml(cls, path: Path) -> Config:
        log.debug("Loading configuration from YAML file: %s", path)
        if not path.is_file():
            raise FileNotFoundError(f"Configuration file not found or is not a file: {path}")
        with open(path, "r", encoding="utf-8") as f:
            yaml_data = yaml.safe_load(f)
        if not yaml_data:
            log.warning("Configuration file is empty: %s. Using default settings.", path)
            return cls.model_validate({})
        return cls.model_validate(yaml_data)


def find_config_file() -> Path | None:
    current_dir = Path.cwd()
    for path in (current_dir / "starmark.yaml", current_dir / "starmark.yml"):
        if path.exists():
            return path
    return None


def load_config(path: Path | None = None) -> Config:
    """Load from an explicit file, a discovered file, or defaults."""
    path = path or find_config_file()
    if path:
        return Config.from_yaml(path)
    return Config()

