"""
Configuration - Centralized settings for the Spyglass index.

Uses environment variables with sensible defaults. All paths are resolved
to absolute paths for reliability.
"""

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Set


def default_config_dir() -> Path:
    """Per-user location for the persisted snapshot."""
    if sys.platform == "darwin":
        return Path.home() / ".config" / "spyglass"
    return Path.home() / ".spyglass"


@dataclass
class SpyglassConfig:
    """
    Configuration for the index build and search.

    The walk starts at the user's home directory. The snapshot lives in
    the per-user config directory.
    """

    # --- Paths ---
    root: Path = field(default_factory=Path.home)
    config_dir: Path = field(default_factory=default_config_dir)
    index_filename: str = "index.json"

    # --- Walk Rules ---
    skip_hidden: bool = True
    progress_every: int = 100       # Refresh total_files every N entries

    # Directories recorded as entries but never descended into
    skip_dirs: Set[str] = field(default_factory=lambda: {
        # Version control
        ".git",
        # Dependencies
        "node_modules", "vendor", "__pycache__", ".venv", "venv", ".cargo",
        # Build outputs
        "target", "dist", "build", ".next",
        # macOS
        "Library", "Applications", ".Trash", "Caches",
        # Cache
        ".cache", ".npm", ".yarn",
    })

    # --- Search ---
    search_limit: int = 100
    min_query_length: int = 2

    def __post_init__(self):
        """Ensure all paths are absolute."""
        self.root = Path(self.root).expanduser().resolve()
        self.config_dir = Path(self.config_dir).expanduser().resolve()
        self.skip_dirs = set(self.skip_dirs)

    @property
    def index_path(self) -> Path:
        return self.config_dir / self.index_filename

    @classmethod
    def from_env(cls) -> "SpyglassConfig":
        """
        Create config from environment variables.

        Supported env vars:
            SPYGLASS_ROOT: Directory to index (default: home)
            SPYGLASS_CONFIG_DIR: Where the snapshot is stored
            SPYGLASS_SKIP_DIRS: Comma-separated directory names to not descend into
            SPYGLASS_SHOW_HIDDEN: "1", "true" or "yes" to index dotfiles
            SPYGLASS_SEARCH_LIMIT: Maximum results per query
        """
        config = cls()

        if root := os.environ.get("SPYGLASS_ROOT"):
            config.root = Path(root)

        if config_dir := os.environ.get("SPYGLASS_CONFIG_DIR"):
            config.config_dir = Path(config_dir)

        if skip_dirs := os.environ.get("SPYGLASS_SKIP_DIRS"):
            config.skip_dirs = {d.strip() for d in skip_dirs.split(",") if d.strip()}

        if show_hidden := os.environ.get("SPYGLASS_SHOW_HIDDEN"):
            config.skip_hidden = show_hidden.strip().lower() not in {"1", "true", "yes"}

        if limit := os.environ.get("SPYGLASS_SEARCH_LIMIT"):
            config.search_limit = int(limit)

        config.__post_init__()
        return config


# Singleton default config
_default_config: SpyglassConfig | None = None


def get_config() -> SpyglassConfig:
    """Get the default configuration (singleton)."""
    global _default_config
    if _default_config is None:
        _default_config = SpyglassConfig.from_env()
    return _default_config


def set_config(config: SpyglassConfig | None) -> None:
    """Override the default configuration (for testing)."""
    global _default_config
    _default_config = config
