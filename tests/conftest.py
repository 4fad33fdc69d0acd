"""
Test Configuration - Shared fixtures for index tests.

Uses pytest fixtures to create isolated test environments.
"""

import shutil
import tempfile
from pathlib import Path
from typing import Generator

import pytest

from spyglass.config import SpyglassConfig, set_config
from spyglass.errors import ListingResult
from spyglass.walker import scandir_listing


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    tmp = tempfile.mkdtemp(prefix="spyglass_test_")
    # Resolve to handle macOS /var -> /private/var symlink
    resolved = Path(tmp).resolve()
    yield resolved
    shutil.rmtree(str(resolved), ignore_errors=True)


@pytest.fixture
def home_dir(temp_dir: Path) -> Path:
    """Directory standing in for the user's home."""
    home = temp_dir / "home"
    home.mkdir()
    return home


@pytest.fixture
def test_config(temp_dir: Path, home_dir: Path) -> Generator[SpyglassConfig, None, None]:
    """Create an isolated test configuration."""
    config = SpyglassConfig(
        root=home_dir,
        config_dir=temp_dir / "config",
        progress_every=2,
    )
    set_config(config)
    yield config
    set_config(None)


@pytest.fixture
def sample_tree(home_dir: Path) -> dict[str, Path]:
    """
    Create a small home directory tree.

        home/
            notes.txt
            .bashrc
            .config/settings.json
            Documents/report.pdf
            Documents/drafts/report-v2.docx
            projects/spyglass/README.md
            projects/spyglass/node_modules/left-pad/index.js
    """
    paths = {}

    notes = home_dir / "notes.txt"
    notes.write_text("notes")
    paths["notes"] = notes

    bashrc = home_dir / ".bashrc"
    bashrc.write_text("export PATH")
    paths["bashrc"] = bashrc

    dot_config = home_dir / ".config"
    dot_config.mkdir()
    (dot_config / "settings.json").write_text("{}")
    paths["dot_config"] = dot_config
    paths["settings"] = dot_config / "settings.json"

    drafts = home_dir / "Documents" / "drafts"
    drafts.mkdir(parents=True)
    paths["documents"] = home_dir / "Documents"
    paths["drafts"] = drafts

    report = paths["documents"] / "report.pdf"
    report.write_bytes(b"%PDF")
    paths["report"] = report

    report_v2 = drafts / "report-v2.docx"
    report_v2.write_bytes(b"PK")
    paths["report_v2"] = report_v2

    project = home_dir / "projects" / "spyglass"
    project.mkdir(parents=True)
    paths["projects"] = home_dir / "projects"
    paths["project"] = project

    readme = project / "README.md"
    readme.write_text("# spyglass")
    paths["readme"] = readme

    node_modules = project / "node_modules"
    (node_modules / "left-pad").mkdir(parents=True)
    (node_modules / "left-pad" / "index.js").write_text("module.exports = 1")
    paths["node_modules"] = node_modules
    paths["left_pad"] = node_modules / "left-pad"

    return paths


class FailingLister:
    """
    Directory lister that reports a failure for chosen directories.

    Tests run as root in some environments, so chmod cannot be relied on
    to make a directory unreadable.
    """

    def __init__(self, failing: set, error: Exception | None = None):
        self.failing = {str(p) for p in failing}
        self.error = error or PermissionError(13, "Permission denied")
        self.calls: list[str] = []

    def __call__(self, path: str) -> ListingResult:
        self.calls.append(path)
        if path in self.failing:
            return ListingResult.failed(path, self.error)
        return scandir_listing(path)


class RaisingLister:
    """Directory lister that raises an unexpected exception for one directory."""

    def __init__(self, target: Path):
        self.target = str(target)

    def __call__(self, path: str) -> ListingResult:
        if path == self.target:
            raise RuntimeError("lister exploded")
        return scandir_listing(path)


@pytest.fixture
def failing_lister():
    """Factory for FailingLister."""
    return FailingLister


@pytest.fixture
def raising_lister():
    """Factory for RaisingLister."""
    return RaisingLister
