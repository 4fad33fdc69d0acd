"""
Spyglass - Instant filename search over a user's home directory.

Modules:
    - config: Centralized configuration
    - walker: Failure-tolerant recursive directory listing
    - progress: Build progress, safe to poll from other threads
    - store: Live generation and its on-disk snapshot
    - search: Ranked substring search
    - session: One-at-a-time background builds
    - service: Facade that callers hold

Build Flow:
    start → Walk (home) → Swap generation → Persist → Notify

Usage:
    from spyglass import IndexService

    service = IndexService()
    service.load_or_build()
    service.search("invoice")
"""

from .service import IndexService

__all__ = ["IndexService"]
