"""Data models for scan results.

Every structure here is built fresh per scan. ``as_dict()`` methods
produce the serialization contract consumed by the JSON renderer:
optional values that were never computed are omitted, never zeroed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(frozen=True)
class LineStats:
    """Code/comment/blank line counts. Merging is plain addition."""

    code: int = 0
    comment: int = 0
    blank: int = 0

    @property
    def total(self) -> int:
        return self.code + self.comment + self.blank

    def __add__(self, other: LineStats) -> LineStats:
        return LineStats(
            code=self.code + other.code,
            comment=self.comment + other.comment,
            blank=self.blank + other.blank,
        )

    def as_dict(self) -> dict[str, int]:
        return {"code": self.code, "comment": self.comment, "blank": self.blank}


@dataclass(frozen=True)
class StructureCounts:
    """Heuristic declaration counts for one file."""

    functions: int = 0
    structs: int = 0


@dataclass
class LanguageDetails:
    """Language-specific payload attached to a FileRecord.

    Attributes:
        functions: Function/method count (None = not computed)
        structs: Struct/type declaration count (None = not computed)
        package: Package or module name, where the language declares one
        imports: Imported paths, in source order
    """

    functions: Optional[int] = None
    structs: Optional[int] = None
    package: Optional[str] = None
    imports: list[str] = field(default_factory=list)

    def as_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.package is not None:
            data["package"] = self.package
        if self.imports:
            data["imports"] = list(self.imports)
        if self.functions is not None:
            data["functions"] = self.functions
        if self.structs is not None:
            data["structs"] = self.structs
        return data


@dataclass
class FileRecord:
    """Observations for a single scanned file."""

    path: str
    language: str
    stats: LineStats
    details: Optional[LanguageDetails] = None

    def as_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "path": self.path,
            "language": self.language,
            "stats": self.stats.as_dict(),
        }
        if self.details is not None:
            data["language_specific"] = self.details.as_dict()
        return data


@dataclass(frozen=True)
class SkippedFile:
    """A file that was discovered but could not be scanned."""

    path: str
    reason: str

    def as_dict(self) -> dict[str, str]:
        return {"path": self.path, "reason": self.reason}


@dataclass
class LanguageSummary:
    """Aggregated statistics for one language (or the project total)."""

    file_count: int = 0
    stats: LineStats = field(default_factory=LineStats)
    functions: Optional[int] = None
    structs: Optional[int] = None
    files: list[FileRecord] = field(default_factory=list)

    def as_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "file_count": self.file_count,
            "stats": self.stats.as_dict(),
        }
        if self.functions is not None:
            data["functions"] = self.functions
        if self.structs is not None:
            data["structs"] = self.structs
        if self.files:
            data["files"] = [f.as_dict() for f in self.files]
        return data


def _add_optional(current: Optional[int], value: Optional[int]) -> Optional[int]:
    if value is None:
        return current
    return (current or 0) + value


@dataclass
class ProjectSummary:
    """Final result of a project scan.

    Attributes:
        languages: Language identifier -> LanguageSummary, keys sorted
        files: Every FileRecord sorted by (language, path); empty unless
            file details were requested
        skipped: Files that failed to read, sorted by path
    """

    languages: dict[str, LanguageSummary] = field(default_factory=dict)
    files: list[FileRecord] = field(default_factory=list)
    skipped: list[SkippedFile] = field(default_factory=list)

    @property
    def total(self) -> LanguageSummary:
        """Project-wide totals derived from the language buckets."""
        total = LanguageSummary()
        for summary in self.languages.values():
            total.file_count += summary.file_count
            total.stats = total.stats + summary.stats
            total.functions = _add_optional(total.functions, summary.functions)
            total.structs = _add_optional(total.structs, summary.structs)
        return total

    def as_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "total": self.total.as_dict(),
            "languages": {name: s.as_dict() for name, s in self.languages.items()},
        }
        if self.files:
            data["files"] = [f.as_dict() for f in self.files]
        if self.skipped:
            data["skipped"] = [s.as_dict() for s in self.skipped]
        return data
