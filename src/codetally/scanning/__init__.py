"""Project scanning: language registry, classification, walking and aggregation."""

from .aggregator import Aggregator
from .cancel import CancelToken
from .classifier import ClassifiedLine, LineClassifier, LineKind, classify
from .filters import EntryInfo, PathFilter, glob_match
from .gitignore import GitIgnoreFile, GitIgnoreRules, load_gitignore
from .languages import (
    LANGUAGES,
    UNKNOWN,
    LanguageSpec,
    StringDelimiter,
    detect_language,
    get_all_known_extensions,
    get_language_spec,
)
from .models import (
    FileRecord,
    LanguageDetails,
    LanguageSummary,
    LineStats,
    ProjectSummary,
    SkippedFile,
    StructureCounts,
)
from .scanner import ProjectScanner, scan_file, scan_project
from .structure import STRUCTURE_COUNTERS, StructureCounter, count_structures
from .walker import WalkEntry, validate_root, walk

__all__ = [
    # Registry
    "LANGUAGES",
    "UNKNOWN",
    "LanguageSpec",
    "StringDelimiter",
    "detect_language",
    "get_language_spec",
    "get_all_known_extensions",
    # Classification
    "LineClassifier",
    "LineKind",
    "ClassifiedLine",
    "classify",
    # Structural counts
    "StructureCounter",
    "STRUCTURE_COUNTERS",
    "count_structures",
    # Filtering and walking
    "GitIgnoreFile",
    "GitIgnoreRules",
    "load_gitignore",
    "PathFilter",
    "EntryInfo",
    "glob_match",
    "WalkEntry",
    "validate_root",
    "walk",
    # Pipeline
    "Aggregator",
    "CancelToken",
    "ProjectScanner",
    "scan_file",
    "scan_project",
    # Models
    "LineStats",
    "StructureCounts",
    "LanguageDetails",
    "FileRecord",
    "SkippedFile",
    "LanguageSummary",
    "ProjectSummary",
]
