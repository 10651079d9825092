"""Single-consumer merge of FileRecords into a ProjectSummary.

The aggregator is owned by exactly one thread, so its maps need no
locking. Merging is addition, so the totals do not depend on arrival
order; every list is sorted in finalize() for the same reason.
"""

from ..config import ScanOptions
from .models import FileRecord, LanguageSummary, ProjectSummary, SkippedFile


class Aggregator:
    """Accumulates per-language totals from a stream of FileRecords.

    Example:
        >>> agg = Aggregator(ScanOptions())
        >>> agg.add(FileRecord("main.go", "Go", LineStats(code=3)))
        >>> agg.finalize().languages["Go"].stats.code
        3
    """

    def __init__(self, options: ScanOptions):
        self.options = options
        self._languages: dict[str, LanguageSummary] = {}
        self._files: list[FileRecord] = []
        self._skipped: list[SkippedFile] = []

    def add(self, record: FileRecord) -> None:
        summary = self._languages.get(record.language)
        if summary is None:
            summary = LanguageSummary()
            self._languages[record.language] = summary

        summary.file_count += 1
        summary.stats = summary.stats + record.stats

        details = record.details
        if details is not None:
            if self.options.with_functions and details.functions is not None:
                summary.functions = (summary.functions or 0) + details.functions
            if self.options.with_structs and details.structs is not None:
                summary.structs = (summary.structs or 0) + details.structs

        if self.options.with_language_files:
            summary.files.append(record)
        if self.options.with_file_details:
            self._files.append(record)

    def add_skipped(self, skipped: SkippedFile) -> None:
        self._skipped.append(skipped)

    def finalize(self) -> ProjectSummary:
        """Build the summary with languages, file lists and warnings sorted."""
        languages = {}
        for name in sorted(self._languages):
            current = self._languages[name]
            languages[name] = LanguageSummary(
                file_count=current.file_count,
                stats=current.stats,
                functions=current.functions,
                structs=current.structs,
                files=sorted(current.files, key=lambda r: r.path),
            )
        return ProjectSummary(
            languages=languages,
            files=sorted(self._files, key=lambda r: (r.language, r.path)),
            skipped=sorted(self._skipped, key=lambda s: (s.path, s.reason)),
        )
