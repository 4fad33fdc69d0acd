"""
Indexing Session - Runs at most one build at a time in the background.

start() admits a build only when none is running and returns at once.
The walk runs on a worker thread. When it ends, successfully or not, the
session:
    1. swaps the new generation into the store (partial if the walk failed)
    2. marks progress complete with the exact entry count and reopens
       the start gate
    3. persists the snapshot
    4. notifies completion observers with the entry count

A build admitted after step 2 waits on the single worker thread until
steps 3 and 4 of the previous build are done.
"""

import asyncio
import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Callable, List, Optional

from .config import get_config, SpyglassConfig
from .errors import SnapshotError
from .models import BuildStats, Entry
from .progress import ProgressTracker
from .store import IndexStore
from .walker import DirectoryWalker, Lister


logger = logging.getLogger(__name__)


CompletionObserver = Callable[[int], None]


class IndexingSession:
    """
    Start-once gate around DirectoryWalker.

    A start() while a build is running is dropped, not queued.
    """

    def __init__(
        self,
        store: IndexStore,
        progress: ProgressTracker,
        config: SpyglassConfig | None = None,
        lister: Lister | None = None,
    ):
        self.config = config or get_config()
        self.store = store
        self.progress = progress
        self._walker = DirectoryWalker(self.config, progress, lister)

        self._lock = threading.Lock()
        self._running = False
        self._future: Optional[Future] = None
        self._cancel_event = threading.Event()
        self._observers: List[CompletionObserver] = []
        self._executor: ThreadPoolExecutor | None = None
        self.last_stats: Optional[BuildStats] = None

    def _get_executor(self) -> ThreadPoolExecutor:
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=1,
                thread_name_prefix="spyglass-indexer"
            )
        return self._executor

    @property
    def is_running(self) -> bool:
        with self._lock:
            return self._running

    @property
    def future(self) -> Optional[Future]:
        """Handle of the current or most recent build."""
        return self._future

    def add_observer(self, observer: CompletionObserver) -> None:
        with self._lock:
            if observer not in self._observers:
                self._observers.append(observer)

    def remove_observer(self, observer: CompletionObserver) -> None:
        with self._lock:
            if observer in self._observers:
                self._observers.remove(observer)

    def start(self, root: Path | str | None = None) -> bool:
        """
        Begin a fresh build unless one is already running.

        Args:
            root: Directory to walk (default: config.root, the home directory)

        Returns:
            True if a new build was started, False if the request was dropped
        """
        with self._lock:
            if self._running:
                logger.debug("Build already running; start request dropped")
                return False
            self._running = True
            self._cancel_event = threading.Event()
            self.progress.reset()

        root = Path(root) if root is not None else self.config.root
        logger.info(f"Starting index build of {root}")

        self._future = self._get_executor().submit(
            self._run_build, root, self._cancel_event
        )
        return True

    def cancel(self) -> bool:
        """
        Ask the running build to stop before its next directory.

        The entries gathered so far still become the live generation.

        Returns:
            True if a running build was signalled
        """
        with self._lock:
            if not self._running:
                return False
            self._cancel_event.set()
        logger.info("Cancellation requested for running build")
        return True

    def wait(self, timeout: float | None = None) -> Optional[BuildStats]:
        """Block until the current build finishes. No-op if none was started."""
        if self._future is None:
            return None
        return self._future.result(timeout=timeout)

    async def wait_async(self) -> Optional[BuildStats]:
        """Await the current build from an event loop."""
        if self._future is None:
            return None
        return await asyncio.wrap_future(self._future)

    def _run_build(self, root: Path, cancel_event: threading.Event) -> BuildStats:
        entries: List[Entry] = []
        lower_names: List[str] = []

        released = False
        try:
            try:
                stats = self._walker.walk_into(
                    root, entries, lower_names, cancel_event=cancel_event
                )
            except Exception:
                logger.exception(
                    f"Build failed after {len(entries)} entries; keeping partial index"
                )
                stats = BuildStats(entries=len(entries), failed=True)

            # Completion and the end of the gate are one step for start()
            with self._lock:
                self.store.replace(entries, lower_names)
                self.progress.mark_complete(len(entries))
                self._running = False
                released = True
        finally:
            if not released:
                with self._lock:
                    self._running = False

        self.last_stats = stats
        logger.info(str(stats))

        # A build started from here on is queued behind this save on the
        # single worker thread.
        try:
            self.store.save(entries)
        except SnapshotError as e:
            logger.error(f"Failed to persist index: {e}")

        self._notify(len(entries))
        return stats

    def load_snapshot(self) -> bool:
        """
        Load the persisted snapshot unless a build is running.

        Holds the start gate for the whole load so a concurrent start()
        cannot have its fresh progress overwritten by the loaded state.

        Returns:
            True if a snapshot was loaded
        """
        with self._lock:
            if self._running:
                # A build in flight will publish a newer generation shortly
                logger.debug("Build running; not loading snapshot")
                return False

            if not self.store.load():
                return False

            self.progress.mark_loaded(self.store.count())
            return True

    def _notify(self, total_files: int) -> None:
        with self._lock:
            observers = list(self._observers)

        for observer in observers:
            try:
                observer(total_files)
            except Exception as e:
                logger.error(f"Completion observer error: {e}")

    def close(self) -> None:
        """Shutdown the worker thread, waiting for a running build to end."""
        if self._executor:
            self._executor.shutdown(wait=True)
            self._executor = None
