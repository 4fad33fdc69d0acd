"""
Progress Tracker - Shared build progress, safe to poll mid-build.

The active walker is the only writer. Any number of threads may read,
and each read returns an independent copy.
"""

import threading
from dataclasses import replace

from .models import Progress


class ProgressTracker:
    """
    Lock-guarded Progress record.

    Writers go through the mutator methods; readers call snapshot().
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._progress = Progress()

    def snapshot(self) -> Progress:
        """Return a copy of the current progress."""
        with self._lock:
            return replace(self._progress)

    def reset(self) -> None:
        """Start a new build: one folder (the root) known, nothing indexed."""
        with self._lock:
            self._progress = Progress(
                total_folders=1,
                indexed_folders=0,
                total_files=0,
                current_folder="",
                is_complete=False,
            )

    def folder_discovered(self) -> None:
        with self._lock:
            self._progress.total_folders += 1

    def folder_indexed(self, path: str, total_files: int) -> None:
        """Record a directory whose listing was fully processed."""
        with self._lock:
            self._progress.indexed_folders += 1
            self._progress.current_folder = path
            self._progress.total_files = total_files

    def set_total_files(self, total_files: int) -> None:
        with self._lock:
            self._progress.total_files = total_files

    def mark_complete(self, total_files: int) -> None:
        with self._lock:
            self._progress.total_files = total_files
            self._progress.is_complete = True

    def mark_loaded(self, total_files: int) -> None:
        """Progress after a snapshot load: complete, no folders walked."""
        with self._lock:
            self._progress = Progress(
                total_folders=0,
                indexed_folders=0,
                total_files=total_files,
                current_folder="",
                is_complete=True,
            )
