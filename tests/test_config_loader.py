"""
Unit tests for configuration loader.

Tests multi-layer config merging, environment variable overrides,
and XDG directory handling.
"""

import pytest
import yaml

from ptsd.core.config import get_user_config_path, load_config
from ptsd.core.config.loader import apply_env_overrides, deep_merge, get_xdg_config_home
from ptsd.core.config.models import DEFAULT_FORBIDDEN_PATTERNS, PtsdConfig
from ptsd.core.errors import ConfigError

# ==============================================================================
# Helper Functions Tests
# ==============================================================================


class TestDeepMerge:
    """Test the deep_merge helper function."""

    def test_nested_merge(self):
        base = {"a": 1, "b": {"x": 10, "y": 20}}
        override = {"b": {"y": 30, "z": 40}, "c": 3}
        assert deep_merge(base, override) == {"a": 1, "b": {"x": 10, "y": 30, "z": 40}, "c": 3}

    def test_override_replaces_lists(self):
        assert deep_merge({"a": [1, 2, 3]}, {"a": [4]}) == {"a": [4]}

    def test_base_not_mutated(self):
        base = {"review": {"min_score": 7}}
        deep_merge(base, {"review": {"min_score": 9}})
        assert base == {"review": {"min_score": 7}}


class TestApplyEnvOverrides:
    """Test environment variable override logic."""

    def test_min_score(self, monkeypatch):
        monkeypatch.setenv("PTSD_MIN_SCORE", "9")
        result = apply_env_overrides({"review": {"auto_redo": True}})
        assert result["review"] == {"auto_redo": True, "min_score": 9}

    def test_invalid_min_score_is_ignored(self, monkeypatch, caplog):
        monkeypatch.setenv("PTSD_MIN_SCORE", "high")
        result = apply_env_overrides({})
        assert "review" not in result
        assert "PTSD_MIN_SCORE" in caplog.text

    @pytest.mark.parametrize("value,expected", [("true", True), ("1", True), ("false", False)])
    def test_auto_redo(self, monkeypatch, value, expected):
        monkeypatch.setenv("PTSD_AUTO_REDO", value)
        assert apply_env_overrides({})["review"]["auto_redo"] is expected


class TestXdgPaths:
    """Test XDG directory resolution."""

    def test_xdg_config_home_from_env(self, monkeypatch, tmp_path):
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        assert get_xdg_config_home() == tmp_path
        assert get_user_config_path() == tmp_path / "ptsd" / "config.yaml"


# ==============================================================================
# load_config Tests
# ==============================================================================


class TestLoadConfig:
    """Test layered configuration loading."""

    def test_defaults(self, project_dir):
        config = load_config(project_dir)
        assert isinstance(config, PtsdConfig)
        assert config.review.min_score == 7
        assert config.review.auto_redo is False
        assert config.validation.forbidden_patterns == DEFAULT_FORBIDDEN_PATTERNS

    def test_project_overrides_user(self, project_dir, user_config_dir):
        (user_config_dir / "config.yaml").write_text(
            yaml.safe_dump({"review": {"min_score": 5, "auto_redo": True}})
        )
        (project_dir / ".ptsd" / "ptsd.yaml").write_text(
            yaml.safe_dump({"review": {"min_score": 8}})
        )

        config = load_config(project_dir)
        assert config.review.min_score == 8
        assert config.review.auto_redo is True

    def test_env_overrides_project(self, project_dir, monkeypatch):
        (project_dir / ".ptsd" / "ptsd.yaml").write_text(
            yaml.safe_dump({"review": {"min_score": 8}})
        )
        monkeypatch.setenv("PTSD_MIN_SCORE", "4")
        assert load_config(project_dir).review.min_score == 4

    def test_config_is_reread_each_call(self, project_dir):
        config_path = project_dir / ".ptsd" / "ptsd.yaml"
        config_path.write_text(yaml.safe_dump({"review": {"min_score": 6}}))
        assert load_config(project_dir).review.min_score == 6
        config_path.write_text(yaml.safe_dump({"review": {"min_score": 9}}))
        assert load_config(project_dir).review.min_score == 9

    def test_unknown_keys_are_ignored(self, project_dir):
        (project_dir / ".ptsd" / "ptsd.yaml").write_text(
            yaml.safe_dump({"project": {"name": "demo"}, "hooks": {"enabled": True}})
        )
        assert load_config(project_dir).project.name == "demo"

    def test_out_of_range_min_score_is_config_error(self, project_dir):
        (project_dir / ".ptsd" / "ptsd.yaml").write_text(
            yaml.safe_dump({"review": {"min_score": 11}})
        )
        with pytest.raises(ConfigError) as exc_info:
            load_config(project_dir)
        assert exc_info.value.category == "config"

    def test_malformed_yaml_is_config_error(self, project_dir):
        (project_dir / ".ptsd" / "ptsd.yaml").write_text("review: [oops\n")
        with pytest.raises(ConfigError):
            load_config(project_dir)
