"""
Search Engine - Ranked substring search over the live generation.

No disk access per query: candidates are found by scanning the cached
lowercased names, then scored on name match quality, entry type, name
length and location.
"""

import heapq
import logging
import os
from typing import List, Optional

from .config import get_config, SpyglassConfig
from .models import Entry
from .store import IndexStore


logger = logging.getLogger(__name__)


# --- Score weights ---
EXACT_BONUS = 1000          # name == query
PREFIX_BONUS = 500          # name starts with query
BOUNDARY_BONUS = 300        # query follows "-" or "_"
DIRECTORY_BONUS = 200
PROJECTS_BONUS = 100        # path under a "projects" folder
NAME_LENGTH_CEILING = 50    # shorter names score up to this much more

BOUNDARY_SEPARATORS = ("-", "_")
PROJECTS_MARKER = "/projects/"


def score_entry(entry: Entry, name_lower: str, query_lower: str) -> int:
    """
    Score a candidate whose lowercased name contains the query.

    Exactly one naming tier applies (exact, prefix, boundary or plain);
    the remaining bonuses add on top.
    """
    score = 0

    if name_lower == query_lower:
        score += EXACT_BONUS
    elif name_lower.startswith(query_lower):
        score += PREFIX_BONUS
    elif any(sep + query_lower in name_lower for sep in BOUNDARY_SEPARATORS):
        score += BOUNDARY_BONUS

    if entry.is_directory:
        score += DIRECTORY_BONUS

    score += NAME_LENGTH_CEILING - min(len(entry.name), NAME_LENGTH_CEILING)

    path = entry.path if os.sep == "/" else entry.path.replace(os.sep, "/")
    if PROJECTS_MARKER in path:
        score += PROJECTS_BONUS

    return score


class SearchEngine:
    """
    Ranks a query against whichever generation the store holds.

    Ties keep generation order.
    """

    def __init__(self, store: IndexStore, config: SpyglassConfig | None = None):
        self.store = store
        self.config = config or get_config()

    def search(self, query: str, limit: Optional[int] = None) -> List[Entry]:
        """
        Find the best matching entries for a query.

        Args:
            query: Case-insensitive substring to look for in names
            limit: Maximum results (default: config.search_limit)

        Returns:
            Entries ordered best first; empty for queries shorter than
            config.min_query_length
        """
        if not query or len(query) < self.config.min_query_length:
            return []

        if limit is None:
            limit = self.config.search_limit
        if limit <= 0:
            return []

        # One read of the reference; a concurrent swap cannot tear this query
        generation = self.store.generation
        query_lower = query.lower()

        scored = [
            (score_entry(entry, name_lower, query_lower), index)
            for index, (entry, name_lower) in enumerate(
                zip(generation.entries, generation.lower_names)
            )
            if query_lower in name_lower
        ]

        # Same order as a stable descending sort, truncated
        top = heapq.nsmallest(limit, scored, key=lambda item: (-item[0], item[1]))

        logger.debug(f"Query {query!r}: {len(scored)} candidates, returning {len(top)}")
        return [generation.entries[index] for _, index in top]
