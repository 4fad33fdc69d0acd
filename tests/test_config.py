"""
Config Tests - Verify defaults and environment overrides.
"""

from pathlib import Path

import pytest

from spyglass import config as config_module
from spyglass.config import SpyglassConfig, get_config, set_config


class TestSpyglassConfig:
    """Tests for the SpyglassConfig dataclass."""

    def test_defaults(self, monkeypatch, tmp_path):
        """Defaults walk the home directory and skip well-known heavy folders."""
        monkeypatch.setenv("HOME", str(tmp_path))
        config = SpyglassConfig()

        assert config.root == tmp_path.resolve()
        assert config.skip_hidden
        assert config.search_limit == 100
        assert config.min_query_length == 2
        assert {"node_modules", ".git", "vendor", "Library"} <= config.skip_dirs
        assert config.index_path.name == "index.json"

    def test_config_dir_per_platform(self, monkeypatch, tmp_path):
        """macOS keeps the snapshot under ~/.config, other platforms under ~/.spyglass."""
        monkeypatch.setenv("HOME", str(tmp_path))

        monkeypatch.setattr(config_module.sys, "platform", "darwin")
        assert config_module.default_config_dir() == tmp_path / ".config" / "spyglass"

        monkeypatch.setattr(config_module.sys, "platform", "linux")
        assert config_module.default_config_dir() == tmp_path / ".spyglass"

    def test_paths_resolved(self, tmp_path):
        """Relative paths become absolute."""
        config = SpyglassConfig(root=Path("."), config_dir=tmp_path / "a" / ".." / "b")

        assert config.root.is_absolute()
        assert config.config_dir == (tmp_path / "b").resolve()

    def test_from_env(self, monkeypatch, tmp_path):
        """Environment variables override defaults."""
        monkeypatch.setenv("SPYGLASS_ROOT", str(tmp_path / "root"))
        monkeypatch.setenv("SPYGLASS_CONFIG_DIR", str(tmp_path / "cfg"))
        monkeypatch.setenv("SPYGLASS_SKIP_DIRS", "build, out ,")
        monkeypatch.setenv("SPYGLASS_SHOW_HIDDEN", "yes")
        monkeypatch.setenv("SPYGLASS_SEARCH_LIMIT", "25")

        config = SpyglassConfig.from_env()

        assert config.root == (tmp_path / "root").resolve()
        assert config.index_path == (tmp_path / "cfg").resolve() / "index.json"
        assert config.skip_dirs == {"build", "out"}
        assert not config.skip_hidden
        assert config.search_limit == 25

    def test_show_hidden_false_value(self, monkeypatch):
        """SPYGLASS_SHOW_HIDDEN=0 keeps hidden files skipped."""
        monkeypatch.setenv("SPYGLASS_SHOW_HIDDEN", "0")
        assert SpyglassConfig.from_env().skip_hidden


class TestConfigSingleton:
    """Tests for get_config() / set_config()."""

    def test_set_and_get(self, tmp_path):
        config = SpyglassConfig(root=tmp_path, config_dir=tmp_path / "cfg")
        set_config(config)
        try:
            assert get_config() is config
        finally:
            set_config(None)

    def test_get_builds_from_env(self, monkeypatch, tmp_path):
        """With no override, get_config() reads the environment once."""
        monkeypatch.setenv("SPYGLASS_ROOT", str(tmp_path))
        set_config(None)
        try:
            first = get_config()
            assert first.root == tmp_path.resolve()
            assert get_config() is first
        finally:
            set_config(None)
