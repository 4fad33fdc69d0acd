"""
Command line entry point.

    spyglass build              rebuild the index from the home directory
    spyglass search QUERY       search the saved index (builds one if missing)
    spyglass status             show where the snapshot is and its size
"""

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from .config import SpyglassConfig
from .models import BuildStats, Entry
from .service import IndexService


logger = logging.getLogger(__name__)


POLL_INTERVAL = 0.5   # seconds between progress lines during a build


async def _build_with_progress(service: IndexService) -> Optional[BuildStats]:
    """Run a build, logging progress until it completes."""
    service.start_index_build()
    task = asyncio.ensure_future(service.wait_async())

    while not task.done():
        await asyncio.wait({task}, timeout=POLL_INTERVAL)
        progress = service.get_progress()
        logger.info(
            f"{progress.indexed_folders}/{progress.total_folders} folders, "
            f"{progress.total_files} entries - {progress.current_folder}"
        )

    return task.result()


def format_entry(entry: Entry) -> str:
    return entry.path + ("/" if entry.is_directory else "")


def echo(line: str) -> None:
    """
    Print a path, writing undecodable filename bytes back out unchanged.

    Names that are not valid in the filesystem encoding come back from
    os.scandir with surrogate escapes, which a text stream cannot encode.
    """
    stream = getattr(sys.stdout, "buffer", None)
    if stream is None:
        print(line.encode("utf-8", "backslashreplace").decode("utf-8"))
        return
    sys.stdout.flush()
    stream.write(os.fsencode(line) + b"\n")
    stream.flush()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="spyglass",
        description="Instant filename search over your home directory",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")
    parser.add_argument("--root", help="Directory to index (default: home)")
    parser.add_argument("--config-dir", help="Where the index snapshot is stored")
    parser.add_argument("--show-hidden", action="store_true", help="Index dotfiles too")

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("build", help="Rebuild the index")

    search = sub.add_parser("search", help="Search the index")
    search.add_argument("query")
    search.add_argument("--limit", type=int, default=None, help="Maximum results")

    sub.add_parser("status", help="Show snapshot location and entry count")
    return parser


def config_from_args(args: argparse.Namespace) -> SpyglassConfig:
    config = SpyglassConfig.from_env()
    if args.root:
        config.root = Path(args.root)
    if args.config_dir:
        config.config_dir = Path(args.config_dir)
    if args.show_hidden:
        config.skip_hidden = False
    config.__post_init__()
    return config


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="[%(levelname)s] %(name)s: %(message)s"
    )

    config = config_from_args(args)
    service = IndexService(config)

    try:
        if args.command == "build":
            stats = asyncio.run(_build_with_progress(service))
            print(f"Indexed {service.get_indexed_count()} entries")
            return 1 if stats is not None and stats.failed else 0

        if args.command == "search":
            if not service.load_persisted_index():
                logger.info("No saved index; building one first")
                asyncio.run(_build_with_progress(service))
            for entry in service.search(args.query, args.limit):
                echo(format_entry(entry))
            return 0

        if service.load_persisted_index():
            print(f"{config.index_path}: {service.get_indexed_count()} entries")
        else:
            print(f"{config.index_path}: no index")
        return 0

    except KeyboardInterrupt:
        service.cancel_index_build()
        print("\nStopped.")
        return 130
    finally:
        service.close()


if __name__ == "__main__":
    sys.exit(main())
