"""
Error Handling - Centralized error policies and custom exceptions.

This module defines how different error types are logged while walking
and persisting the index, so one unreadable directory or a failed write
degrades the index instead of crashing the host.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from .models import DirChild


logger = logging.getLogger(__name__)


@dataclass
class ErrorPolicy:
    """How a specific error type is logged."""
    log_level: int
    message_template: str = "{path}: {error}"


# Error type to policy mapping (first isinstance match wins)
ERROR_POLICIES: dict[type, ErrorPolicy] = {
    PermissionError: ErrorPolicy(
        log_level=logging.WARNING,
        message_template="Permission denied: {path}"
    ),
    FileNotFoundError: ErrorPolicy(
        log_level=logging.DEBUG,
        message_template="Directory vanished during walk: {path}"
    ),
    NotADirectoryError: ErrorPolicy(
        log_level=logging.DEBUG,
        message_template="Expected directory, got file: {path}"
    ),
    OSError: ErrorPolicy(
        log_level=logging.WARNING,
        message_template="OS error listing directory: {path} - {error}"
    ),
}


class SpyglassError(Exception):
    """Base exception for index errors."""
    pass


class SnapshotError(SpyglassError):
    """The persisted snapshot could not be read, validated or written."""
    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")


UNEXPECTED_POLICY = ErrorPolicy(
    log_level=logging.ERROR,
    message_template="Unexpected error: {path} - {error}"
)


def policy_for(error: Exception) -> ErrorPolicy:
    """First policy whose error type matches, else the unexpected-error policy."""
    for error_type, policy in ERROR_POLICIES.items():
        if isinstance(error, error_type):
            return policy
    return UNEXPECTED_POLICY


def handle_error(
    error: Exception,
    path: Optional[Path | str] = None,
    context: str = ""
) -> None:
    """
    Log an error that the caller recovers from locally.

    Args:
        error: The exception that occurred
        path: Directory being processed (if applicable)
        context: Additional context for logging
    """
    policy = policy_for(error)

    path_str = str(path) if path else "<unknown>"
    message = policy.message_template.format(path=path_str, error=str(error))
    if context:
        message = f"[{context}] {message}"

    logger.log(policy.log_level, message)


@dataclass
class ListingResult:
    """Result of listing a single directory."""
    success: bool
    path: str
    children: List[DirChild] = field(default_factory=list)
    error: Optional[Exception] = None

    @classmethod
    def ok(cls, path: str, children: List[DirChild]) -> "ListingResult":
        return cls(success=True, path=path, children=children)

    @classmethod
    def failed(cls, path: str, error: Exception) -> "ListingResult":
        return cls(success=False, path=path, error=error)
