"""Exception hierarchy for codetally."""

from .base import CodetallyError
from .config import ConfigurationError, InvalidConfigError, InvalidPathError
from .scan import FileAccessError, ScanCancelledError, ScanError

__all__ = [
    "CodetallyError",
    "ConfigurationError",
    "InvalidPathError",
    "InvalidConfigError",
    "ScanError",
    "FileAccessError",
    "ScanCancelledError",
]
