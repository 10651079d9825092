"""Tests for merging FileRecords into a ProjectSummary."""

from codetally.config import ScanOptions
from codetally.scanning import Aggregator
from codetally.scanning.models import FileRecord, LanguageDetails, LineStats, SkippedFile


def record(path, language, code=0, comment=0, blank=0, details=None):
    return FileRecord(path, language, LineStats(code, comment, blank), details)


class TestAggregator:
    """Test per-language accumulation."""

    def test_sums_per_language(self):
        """Line counts and file counts add up per language."""
        agg = Aggregator(ScanOptions())
        agg.add(record("a.go", "Go", 10, 2, 1))
        agg.add(record("b.go", "Go", 5, 0, 3))
        agg.add(record("c.py", "Python", 7, 1, 0))
        summary = agg.finalize()

        go = summary.languages["Go"]
        assert go.file_count == 2
        assert go.stats == LineStats(code=15, comment=2, blank=4)
        assert summary.languages["Python"].stats.code == 7
        assert summary.total.file_count == 3

    def test_total_matches_sum_of_languages(self):
        """The derived total equals the sum over languages."""
        agg = Aggregator(ScanOptions())
        agg.add(record("a.go", "Go", 10, 2, 1))
        agg.add(record("c.py", "Python", 7, 1, 0))
        total = agg.finalize().total
        assert total.file_count == 2
        assert total.stats == LineStats(code=17, comment=3, blank=1)

    def test_languages_sorted_by_name(self):
        """Language keys come out sorted regardless of arrival order."""
        agg = Aggregator(ScanOptions())
        for lang in ("Rust", "Go", "Python", "C"):
            agg.add(record(f"x.{lang}", lang, 1))
        assert list(agg.finalize().languages) == ["C", "Go", "Python", "Rust"]

    def test_order_independent(self):
        """Merging in a different order yields an equal summary."""
        records = [record(f"f{i}.go", "Go", i, 1, 0) for i in range(5)]
        options = ScanOptions(with_file_details=True, with_language_files=True)
        forward, backward = Aggregator(options), Aggregator(options)
        for r in records:
            forward.add(r)
        for r in reversed(records):
            backward.add(r)
        assert forward.finalize() == backward.finalize()


class TestAggregatorOptionalCounts:
    """Test functions/structs accumulation."""

    def test_functions_absent_unless_requested(self):
        """Without with_functions, summaries carry no function count."""
        agg = Aggregator(ScanOptions())
        agg.add(record("a.go", "Go", 1, details=LanguageDetails(functions=3)))
        go = agg.finalize().languages["Go"]
        assert go.functions is None
        assert "functions" not in go.as_dict()

    def test_functions_summed_when_requested(self):
        """Function and struct counts add up."""
        agg = Aggregator(ScanOptions(with_functions=True, with_structs=True))
        agg.add(record("a.go", "Go", 1, details=LanguageDetails(functions=3, structs=1)))
        agg.add(record("b.go", "Go", 1, details=LanguageDetails(functions=2, structs=0)))
        go = agg.finalize().languages["Go"]
        assert go.functions == 5
        assert go.structs == 1

    def test_unsupported_language_keeps_none(self):
        """Languages without a counter report None even when counting is on."""
        agg = Aggregator(ScanOptions(with_functions=True))
        agg.add(record("a.js", "JavaScript", 4))
        js = agg.finalize().languages["JavaScript"]
        assert js.functions is None


class TestAggregatorFileLists:
    """Test optional per-file detail."""

    def test_files_omitted_by_default(self):
        """No file lists unless requested."""
        agg = Aggregator(ScanOptions())
        agg.add(record("a.go", "Go", 1))
        summary = agg.finalize()
        assert summary.files == []
        assert summary.languages["Go"].files == []
        assert "files" not in summary.as_dict()

    def test_flat_files_sorted_by_language_then_path(self):
        """The flat list is ordered by (language, path)."""
        agg = Aggregator(ScanOptions(with_file_details=True))
        agg.add(record("z.py", "Python", 1))
        agg.add(record("b.go", "Go", 1))
        agg.add(record("a.py", "Python", 1))
        agg.add(record("a.go", "Go", 1))
        paths = [r.path for r in agg.finalize().files]
        assert paths == ["a.go", "b.go", "a.py", "z.py"]

    def test_language_files_sorted_by_path(self):
        """Per-language lists are sorted by path."""
        agg = Aggregator(ScanOptions(with_language_files=True))
        agg.add(record("pkg/z.go", "Go", 1))
        agg.add(record("main.go", "Go", 1))
        files = agg.finalize().languages["Go"].files
        assert [r.path for r in files] == ["main.go", "pkg/z.go"]

    def test_skipped_sorted(self):
        """Skipped files are sorted by path."""
        agg = Aggregator(ScanOptions())
        agg.add_skipped(SkippedFile("b.go", "Permission denied"))
        agg.add_skipped(SkippedFile("a.go", "Permission denied"))
        summary = agg.finalize()
        assert [s.path for s in summary.skipped] == ["a.go", "b.go"]
        assert summary.as_dict()["skipped"][0] == {"path": "a.go", "reason": "Permission denied"}
