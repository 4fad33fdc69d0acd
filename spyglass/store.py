"""
Index Store - The live generation plus its on-disk snapshot.

Search always reads whichever Generation is current. A build replaces it
with a single reference assignment, so readers see either the old
generation or the new one, never a mix.

Snapshot format (JSON):
    {"format_version": 1, "entry_count": N, "checksum": "<xxh64>",
     "entries": [{"name", "path", "is_directory", "parent_folder"}, ...]}
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, List, Sequence, Tuple

import xxhash

from .config import get_config, SpyglassConfig
from .errors import SnapshotError
from .models import Entry, Generation


logger = logging.getLogger(__name__)


FORMAT_VERSION = 1


def _encode_records(records: List[dict]) -> str:
    return json.dumps(records, separators=(",", ":"))


def checksum(records: List[dict]) -> str:
    """xxHash64 of the compact JSON encoding of the entry records."""
    return xxhash.xxh64(_encode_records(records).encode("utf-8")).hexdigest()


class IndexStore:
    """
    Owner of the current generation.

    The generation is swapped wholesale and never mutated in place.
    """

    def __init__(self, config: SpyglassConfig | None = None):
        self.config = config or get_config()
        self._generation = Generation()

    @property
    def generation(self) -> Generation:
        return self._generation

    @property
    def entries(self) -> Tuple[Entry, ...]:
        return self._generation.entries

    @property
    def lower_names(self) -> Tuple[str, ...]:
        return self._generation.lower_names

    @property
    def snapshot_path(self) -> Path:
        return self.config.index_path

    def count(self) -> int:
        """Number of entries in the current generation."""
        return len(self._generation)

    def replace(self, entries: Sequence[Entry], lower_names: Sequence[str]) -> Generation:
        """Publish a new generation."""
        generation = Generation(entries=tuple(entries), lower_names=tuple(lower_names))
        self._generation = generation
        return generation

    def save(self, entries: Sequence[Entry] | None = None) -> Path:
        """
        Write a snapshot, replacing any previous one.

        The document is written to a temporary file next to the target
        and moved into place with os.replace.

        Args:
            entries: Entries to persist (default: the current generation)

        Returns:
            Path of the written snapshot

        Raises:
            SnapshotError: If the directory or file cannot be written
        """
        if entries is None:
            entries = self._generation.entries

        records = [e.to_dict() for e in entries]
        document = {
            "format_version": FORMAT_VERSION,
            "entry_count": len(records),
            "checksum": checksum(records),
            "entries": records,
        }

        target = self.snapshot_path
        temp_name = None
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                mode="w",
                encoding="utf-8",
                suffix=".tmp",
                prefix=target.name + "-",
                dir=str(target.parent),
                delete=False,
            ) as tf:
                temp_name = tf.name
                json.dump(document, tf)
                tf.flush()
                os.fsync(tf.fileno())
            os.replace(temp_name, target)
        except OSError as e:
            if temp_name and os.path.exists(temp_name):
                try:
                    os.unlink(temp_name)
                except OSError:
                    logger.exception(f"Failed to remove temporary snapshot {temp_name}")
            raise SnapshotError(target, f"write failed: {e}") from e

        logger.info(f"Saved snapshot with {len(records)} entries to {target}")
        return target

    def load(self) -> bool:
        """
        Replace the current generation with the persisted snapshot.

        All-or-nothing: on any failure the current generation is left
        untouched.

        Returns:
            True if a snapshot was loaded
        """
        path = self.snapshot_path
        if not path.exists():
            logger.debug(f"No snapshot at {path}")
            return False

        try:
            entries = self._read_snapshot(path)
        except SnapshotError as e:
            logger.warning(f"Ignoring snapshot: {e}")
            return False

        self._generation = Generation.from_entries(entries)
        logger.info(f"Loaded {len(entries)} entries from {path}")
        return True

    def _read_snapshot(self, path: Path) -> List[Entry]:
        try:
            with open(path, "r", encoding="utf-8") as f:
                document: Any = json.load(f)
        except (OSError, UnicodeDecodeError) as e:
            raise SnapshotError(path, f"unreadable: {e}") from e
        except json.JSONDecodeError as e:
            raise SnapshotError(path, f"corrupt JSON: {e}") from e

        # Legacy snapshots are a bare array with no version tag
        if isinstance(document, list):
            records = document
        elif isinstance(document, dict):
            version = document.get("format_version")
            if version != FORMAT_VERSION:
                raise SnapshotError(path, f"unsupported format_version {version!r}")

            records = document.get("entries")
            if not isinstance(records, list):
                raise SnapshotError(path, "missing entries array")
            if document.get("entry_count") != len(records):
                raise SnapshotError(
                    path,
                    f"entry_count {document.get('entry_count')!r} != {len(records)} records",
                )
            if document.get("checksum") != checksum(records):
                raise SnapshotError(path, "checksum mismatch")
        else:
            raise SnapshotError(path, f"unexpected top-level {type(document).__name__}")

        try:
            return [Entry.from_dict(record) for record in records]
        except ValueError as e:
            raise SnapshotError(path, str(e)) from e
