"""
Shared fixtures for the Starmark test suite.
"""

from pathlib import Path

import pytest
from starmark.anchors import AnchorStore, JsonFileStorage, Matcher, MemoryStorage
from starmark.config import Config, MatcherConfig, MonitoringConfig, RenderConfig, StorageConfig
from starmark.extractor import ExtractorManager
from starmark.observability import configure_logging, set_metrics_enabled
from starmark.pipeline import Pipeline

from tests.helpers import FakeRenderer


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests for individual components")
    config.addinivalue_line("markers", "integration: Integration tests across modules")


@pytest.fixture(scope="session", autouse=True)
def _structured_logging(tmp_path_factory):
    """Route structlog through stdlib logging into a file so CLI output stays clean."""
    log_file = tmp_path_factory.mktemp("logs") / "starmark.log"
    configure_logging(MonitoringConfig(log_level="DEBUG", log_file=str(log_file)))
    yield log_file


@pytest.fixture(autouse=True)
def _metrics_enabled():
    set_metrics_enabled(True)
    yield
    set_metrics_enabled(True)


@pytest.fixture
def test_config(tmp_path: Path) -> Config:
    """Config with fast render settings and state kept under tmp_path."""
    return Config(
        render=RenderConfig(backend="soup", timeout_ms=1000, settle_ms=0, grace_ms=1000),
        matcher=MatcherConfig(),
        storage=StorageConfig(state_dir=tmp_path / "state"),
        monitoring=MonitoringConfig(log_level="WARNING"),
    )


@pytest.fixture
def memory_store() -> AnchorStore:
    return AnchorStore(MemoryStorage())


@pytest.fixture
def file_store(tmp_path: Path) -> AnchorStore:
    return AnchorStore(JsonFileStorage(tmp_path / "anchors.json"))


@pytest.fixture
def fake_renderer() -> FakeRenderer:
    return FakeRenderer()


@pytest.fixture
def pipeline(test_config: Config, fake_renderer: FakeRenderer) -> Pipeline:
    return Pipeline(
        extractor=ExtractorManager(fake_renderer, test_config.render),
        store=AnchorStore(JsonFileStorage(test_config.storage.anchors_path)),
        matcher=Matcher(test_config.matcher),
        last_extraction_path=test_config.storage.last_extraction_path,
    )
