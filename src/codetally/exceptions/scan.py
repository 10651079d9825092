"""Scan-time exceptions: per-file access failures and cancellation."""

from pathlib import Path
from typing import TYPE_CHECKING, Optional

from .base import CodetallyError

if TYPE_CHECKING:
    from ..scanning.models import ProjectSummary


class ScanError(CodetallyError):
    """Base class for errors raised while a scan is running."""

    pass


class FileAccessError(ScanError):
    """Raised when a file cannot be read.

    Workers catch this and record the file as skipped; it never aborts a scan.
    """

    def __init__(self, filepath: Path, reason: str):
        super().__init__(
            f"Cannot access file: {filepath}",
            details={"filepath": str(filepath), "reason": reason},
        )
        self.filepath = filepath
        self.reason = reason


class ScanCancelledError(ScanError):
    """Raised when a scan is cancelled or its deadline passes.

    ``partial`` holds the summary of every file merged before the
    cancellation was observed.
    """

    def __init__(self, reason: str, partial: Optional["ProjectSummary"] = None):
        details = {"reason": reason}
        if partial is not None:
            details["files_merged"] = str(partial.total.file_count)
        super().__init__(f"Scan cancelled: {reason}", details=details)
        self.reason = reason
        self.partial = partial
