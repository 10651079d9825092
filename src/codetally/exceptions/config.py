"""Configuration exceptions: root paths, option values, glob syntax."""

from pathlib import Path
from typing import Any

from .base import CodetallyError


class ConfigurationError(CodetallyError):
    """Base class for configuration-related errors.

    These are fatal: they are raised before any file is scanned.
    """

    pass


class InvalidPathError(ConfigurationError):
    """Raised when the scan root is missing, not a directory, or unreadable."""

    def __init__(self, path: Path, reason: str):
        super().__init__(f"Invalid path: {path}", details={"path": str(path), "reason": reason})
        self.path = path
        self.reason = reason


class InvalidConfigError(ConfigurationError):
    """Raised when configuration values are invalid."""

    def __init__(self, key: str, value: Any, reason: str):
        super().__init__(
            f"Invalid configuration for {key}: {value}",
            details={"key": key, "value": str(value), "reason": reason},
        )
        self.key = key
        self.value = value
        self.reason = reason
