"""
Walker - Failure-tolerant recursive directory listing.

Walks depth-first from a root, recording every visible child as an Entry
and updating shared progress as each directory finishes. A directory that
cannot be listed is abandoned on its own; the walk carries on with the
rest of the tree.
"""

import logging
import os
import threading
import time
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from .config import get_config, SpyglassConfig
from .errors import handle_error, ListingResult
from .models import BuildStats, DirChild, Entry, ROOT_MARKER
from .progress import ProgressTracker


logger = logging.getLogger(__name__)


Lister = Callable[[str], ListingResult]


def scandir_listing(path: str) -> ListingResult:
    """
    List the immediate children of a directory.

    Symlinks are not followed, so a link to a directory is recorded as a
    file and never descended into.
    """
    try:
        with os.scandir(path) as it:
            children = [
                DirChild(entry.name, entry.is_dir(follow_symlinks=False))
                for entry in it
            ]
    except OSError as e:
        return ListingResult.failed(path, e)
    return ListingResult.ok(path, children)


def parent_label(directory: str) -> str:
    """Basename of a directory, or the root marker for the filesystem root."""
    return os.path.basename(os.path.normpath(directory)) or ROOT_MARKER


class DirectoryWalker:
    """
    Depth-first directory walker.

    Hidden children (dotfiles) are excluded entirely when skip_hidden is
    set. Directories named in skip_dirs are recorded but never entered.
    """

    def __init__(
        self,
        config: SpyglassConfig | None = None,
        progress: ProgressTracker | None = None,
        lister: Lister | None = None,
    ):
        self.config = config or get_config()
        self.progress = progress or ProgressTracker()
        self.lister = lister or scandir_listing

    def walk(
        self,
        root: Path | str | None = None,
        skip_hidden: bool | None = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> Tuple[List[Entry], List[str]]:
        """
        Walk a tree and return its entries.

        Args:
            root: Directory to walk (default: config.root)
            skip_hidden: Exclude dotfiles (default: config.skip_hidden)
            cancel_event: Stops the walk before the next directory when set

        Returns:
            (entries, lowercased names), positionally aligned
        """
        entries: List[Entry] = []
        lower_names: List[str] = []
        self.walk_into(root, entries, lower_names, skip_hidden, cancel_event)
        return entries, lower_names

    def walk_into(
        self,
        root: Path | str | None,
        entries: List[Entry],
        lower_names: List[str],
        skip_hidden: bool | None = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> BuildStats:
        """
        Walk a tree, appending to caller-owned sequences.

        The caller keeps whatever was appended even if this raises, which
        is how a failed build still yields a partial generation.
        """
        root = str(root if root is not None else self.config.root)
        if skip_hidden is None:
            skip_hidden = self.config.skip_hidden

        stats = BuildStats()
        start_time = time.monotonic()

        # LIFO stack; children are pushed in reverse so they are visited
        # in listing order, the same order plain recursion would give.
        pending: List[str] = [root]

        while pending:
            if cancel_event is not None and cancel_event.is_set():
                logger.info(f"Walk cancelled with {len(pending)} directories left")
                stats.cancelled = True
                break

            directory = pending.pop()
            subdirs = self._visit(directory, entries, lower_names, skip_hidden, stats)
            pending.extend(reversed(subdirs))

        self.progress.set_total_files(len(entries))

        stats.entries = len(entries)
        stats.duration_seconds = time.monotonic() - start_time
        return stats

    def _visit(
        self,
        directory: str,
        entries: List[Entry],
        lower_names: List[str],
        skip_hidden: bool,
        stats: BuildStats,
    ) -> List[str]:
        """
        Record the children of one directory.

        Returns:
            Subdirectories to descend into, in listing order
        """
        result = self.lister(directory)
        if not result.success:
            handle_error(result.error, directory, "list_directory")
            stats.folders_failed += 1
            return []

        parent_folder = parent_label(directory)
        every = max(1, self.config.progress_every)
        subdirs: List[str] = []

        for child in result.children:
            if skip_hidden and child.name.startswith("."):
                continue

            path = os.path.join(directory, child.name)
            entries.append(Entry(
                name=child.name,
                path=path,
                is_directory=child.is_directory,
                parent_folder=parent_folder,
            ))
            lower_names.append(child.name.lower())

            if len(entries) % every == 0:
                self.progress.set_total_files(len(entries))

            if child.is_directory and not self._should_skip_dir(child.name):
                self.progress.folder_discovered()
                subdirs.append(path)

        self.progress.folder_indexed(directory, len(entries))
        stats.folders_indexed += 1
        return subdirs

    def _should_skip_dir(self, name: str) -> bool:
        """Check if a directory should be recorded but not entered."""
        return name in self.config.skip_dirs
