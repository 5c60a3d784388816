"""
Unit tests for configuration loading.
"""

from pathlib import Path

import pytest
from pydantic import ValidationError
from starmark.config import Config, MatcherConfig, RenderConfig, load_config


class TestDefaults:
    def test_render_defaults(self):
        render = RenderConfig()
        assert render.backend == "playwright"
        assert render.timeout_ms == 15000
        assert render.settle_ms == 3000
        assert render.blocked_resource_types == ["stylesheet", "font"]

    def test_matcher_defaults(self):
        matcher = MatcherConfig()
        assert (matcher.title_exact, matcher.title_substring) == (10, 5)
        assert (matcher.text_exact, matcher.text_substring) == (7, 3)
        assert (matcher.class_token, matcher.id_exact, matcher.tag_match, matcher.data_attribute) == (8, 6, 2, 4)
        assert matcher.threshold == 5

    def test_storage_paths(self, tmp_path: Path):
        config = Config(storage={"state_dir": tmp_path})
        assert config.storage.anchors_path == tmp_path / "anchors.json"
        assert config.storage.last_extraction_path == tmp_path / "last_extraction.json"


class TestValidation:
    @pytest.mark.parametrize("fields", [{"timeout_ms": 0}, {"settle_ms": -1}])
    def test_render_bounds(self, fields):
        with pytest.raises(ValidationError):
            RenderConfig(**fields)

    def test_negative_weight_rejected(self):
        with pytest.raises(ValidationError):
            MatcherConfig(class_token=-1)

    def test_unknown_backend_rejected(self):
        with pytest.raises(ValidationError):
            RenderConfig(backend="selenium")


class TestSources:
    def test_from_yaml(self, tmp_path: Path):
        path = tmp_path / "starmark.yaml"
        path.write_text(
            "render:\n  backend: soup\n  settle_ms: 0\nmatcher:\n  threshold: 9\n",
            encoding="utf-8",
        )

        config = Config.from_yaml(path)

        assert config.render.backend == "soup"
        assert config.render.settle_ms == 0
        assert config.render.timeout_ms == 15000
        assert config.matcher.threshold == 9

    def test_empty_yaml_uses_defaults(self, tmp_path: Path):
        path = tmp_path / "starmark.yaml"
        path.write_text("", encoding="utf-8")
        assert Config.from_yaml(path).matcher.threshold == 5

    def test_missing_yaml(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            Config.from_yaml(tmp_path / "nope.yaml")

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("STARMARK_RENDER__TIMEOUT_MS", "2500")
        monkeypatch.setenv("STARMARK_MATCHER__THRESHOLD", "7")

        config = Config()

        assert config.render.timeout_ms == 2500
        assert config.matcher.threshold == 7

    def test_load_config_discovers_file(self, tmp_path: Path, monkeypatch):
        (tmp_path / "starmark.yml").write_text("monitoring:\n  log_level: DEBUG\n", encoding="utf-8")
        monkeypatch.chdir(tmp_path)

        assert load_config().monitoring.log_level == "DEBUG"

    def test_load_config_without_file(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert load_config().render.backend == "playwright"

