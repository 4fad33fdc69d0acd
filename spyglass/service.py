"""
Index Service - The object callers hold to build, poll and search.

Construct one per process and pass it by reference; it owns the store,
the progress tracker and the build session.
"""

from typing import List, Optional

from .config import get_config, SpyglassConfig
from .models import BuildStats, Entry, Progress
from .progress import ProgressTracker
from .search import SearchEngine
from .session import CompletionObserver, IndexingSession
from .store import IndexStore
from .walker import Lister


class IndexService:
    """
    Facade over IndexStore, ProgressTracker, IndexingSession and SearchEngine.

    Usage:
        service = IndexService()
        if not service.load_persisted_index():
            service.start_index_build()
        results = service.search("report")
    """

    def __init__(
        self,
        config: Optional[SpyglassConfig] = None,
        lister: Lister | None = None,
    ):
        self.config = config or get_config()
        self.store = IndexStore(self.config)
        self.progress = ProgressTracker()
        self.session = IndexingSession(self.store, self.progress, self.config, lister)
        self.engine = SearchEngine(self.store, self.config)

    def start_index_build(self) -> bool:
        """
        Request a full rebuild from the configured root.

        Always succeeds; returns False when a build was already running
        and this request was dropped.
        """
        return self.session.start()

    def get_progress(self) -> Progress:
        return self.progress.snapshot()

    def search(self, query: str, limit: Optional[int] = None) -> List[Entry]:
        return self.engine.search(query, limit)

    def load_persisted_index(self) -> bool:
        """
        Load the snapshot from the last build.

        Returns:
            True if a snapshot was loaded; the caller may then skip a build
        """
        return self.session.load_snapshot()

    def load_or_build(self) -> bool:
        """
        Startup flow: use the snapshot if there is one, else build.

        Returns:
            True if a snapshot was loaded, False if a build was started
        """
        if self.load_persisted_index():
            return True
        self.start_index_build()
        return False

    def get_indexed_count(self) -> int:
        return self.store.count()

    def add_completion_observer(self, observer: CompletionObserver) -> None:
        """Register a callback invoked with the final entry count after each build."""
        self.session.add_observer(observer)

    def remove_completion_observer(self, observer: CompletionObserver) -> None:
        self.session.remove_observer(observer)

    def cancel_index_build(self) -> bool:
        return self.session.cancel()

    def wait(self, timeout: float | None = None) -> Optional[BuildStats]:
        return self.session.wait(timeout)

    async def wait_async(self) -> Optional[BuildStats]:
        return await self.session.wait_async()

    def close(self) -> None:
        self.session.close()
