"""
codetally - Project line statistics

Walks a source tree, classifies every file by language and counts code,
comment and blank lines, with optional function and struct counts.
"""

__version__ = "0.3.0"

from .config import ScanOptions, load_options
from .exceptions import CodetallyError, ScanCancelledError
from .scanning import CancelToken, ProjectSummary, scan_project

__all__ = [
    "scan_project",  # Main entry point
    "ScanOptions",
    "load_options",
    "CancelToken",
    "ProjectSummary",
    "CodetallyError",
    "ScanCancelledError",
]
