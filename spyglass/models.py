"""
Data Models - Type definitions for the index.

These dataclasses represent the data flowing from the walker into the
store and out of the search engine.
"""

from dataclasses import dataclass
from typing import Any, Dict, NamedTuple, Tuple


ROOT_MARKER = "~"


class DirChild(NamedTuple):
    """One raw row from a directory listing."""
    name: str
    is_directory: bool


@dataclass(frozen=True)
class Entry:
    """
    A single cataloged filesystem object.

    Created by the walker and never mutated afterwards.
    """
    name: str
    path: str
    is_directory: bool
    parent_folder: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "path": self.path,
            "is_directory": self.is_directory,
            "parent_folder": self.parent_folder,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Entry":
        """
        Rebuild an Entry from its serialized form.

        Raises:
            ValueError: If a field is missing or has the wrong type
        """
        if not isinstance(data, dict):
            raise ValueError(f"Entry record must be an object, got {type(data).__name__}")

        for key in ("name", "path", "parent_folder"):
            if not isinstance(data.get(key), str):
                raise ValueError(f"Entry record has invalid '{key}': {data.get(key)!r}")

        if not isinstance(data.get("is_directory"), bool):
            raise ValueError(f"Entry record has invalid 'is_directory': {data.get('is_directory')!r}")

        return cls(
            name=data["name"],
            path=data["path"],
            is_directory=data["is_directory"],
            parent_folder=data["parent_folder"],
        )


@dataclass
class Progress:
    """
    State of an in-flight or most recently finished build.

    total_folders is an estimate: it grows as subdirectories are
    discovered, not all of which may be opened successfully.
    """
    total_folders: int = 1
    indexed_folders: int = 0
    total_files: int = 0
    current_folder: str = ""
    is_complete: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_folders": self.total_folders,
            "indexed_folders": self.indexed_folders,
            "total_files": self.total_files,
            "current_folder": self.current_folder,
            "is_complete": self.is_complete,
        }


@dataclass(frozen=True)
class Generation:
    """
    One complete (entries, lowercased names) pair visible to search.

    lower_names[i] is always entries[i].name.lower().
    """
    entries: Tuple[Entry, ...] = ()
    lower_names: Tuple[str, ...] = ()

    def __post_init__(self):
        if len(self.entries) != len(self.lower_names):
            raise ValueError(
                f"Generation misaligned: {len(self.entries)} entries, "
                f"{len(self.lower_names)} names"
            )

    @classmethod
    def from_entries(cls, entries) -> "Generation":
        entries = tuple(entries)
        return cls(entries=entries, lower_names=tuple(e.name.lower() for e in entries))

    def __len__(self) -> int:
        return len(self.entries)


@dataclass
class BuildStats:
    """Statistics from a build run."""
    entries: int = 0
    folders_indexed: int = 0
    folders_failed: int = 0
    duration_seconds: float = 0.0
    cancelled: bool = False
    failed: bool = False

    def __str__(self) -> str:
        status = "failed" if self.failed else "cancelled" if self.cancelled else "complete"
        return (
            f"Build {status}: {self.entries} entries "
            f"({self.folders_indexed} folders indexed, "
            f"{self.folders_failed} unreadable) "
            f"in {self.duration_seconds:.1f}s"
        )
