"""Tests for ScanOptions validation and configuration loading."""

import os

import pytest

from codetally.config import ScanOptions, glob_syntax_error, load_options
from codetally.exceptions import InvalidConfigError


class TestScanOptions:
    """Test option normalization and validation."""

    def test_defaults(self):
        """Defaults respect gitignore and count nothing optional."""
        options = ScanOptions()
        assert options.respect_gitignore is True
        assert options.follow_symlinks is False
        assert options.max_file_size_bytes == 0
        assert options.wants_structures is False

    def test_patterns_normalized_to_tuples(self):
        """Lists and single strings become stripped tuples."""
        assert ScanOptions(include=["*.go", " *.py "]).include == ("*.go", "*.py")
        assert ScanOptions(exclude="vendor").exclude == ("vendor",)
        assert ScanOptions(exclude=["", "  "]).exclude == ()

    def test_negative_values_rejected(self):
        """Sizes and worker counts must be non-negative."""
        with pytest.raises(InvalidConfigError):
            ScanOptions(max_file_size_bytes=-1)
        with pytest.raises(InvalidConfigError):
            ScanOptions(concurrency=-2)

    def test_workers_resolution(self):
        """concurrency=0 means one worker per CPU."""
        assert ScanOptions(concurrency=3).workers == 3
        assert ScanOptions().workers == max(os.cpu_count() or 1, 1)

    def test_frozen(self):
        """Options cannot be mutated after construction."""
        options = ScanOptions()
        with pytest.raises(AttributeError):
            options.concurrency = 4


class TestGlobSyntax:
    """Test glob validation."""

    @pytest.mark.parametrize("pattern", ["*.go", "[abc]*", "[!a]x", "[]]", "a\\*b", "**/x"])
    def test_valid(self, pattern):
        """Well-formed globs pass."""
        assert glob_syntax_error(pattern) is None

    @pytest.mark.parametrize("pattern", ["[abc", "*.[go", "trailing\\"])
    def test_invalid(self, pattern):
        """Unterminated classes and dangling escapes are errors."""
        assert glob_syntax_error(pattern) is not None

    def test_invalid_glob_error_details(self):
        """The error names the offending option and pattern."""
        with pytest.raises(InvalidConfigError) as exc_info:
            ScanOptions(exclude=("ok", "[bad"))
        assert exc_info.value.details["key"] == "exclude"
        assert exc_info.value.details["value"] == "[bad"


class TestLoadOptions:
    """Test configuration source merging."""

    def test_defaults_without_sources(self, tmp_path, monkeypatch):
        """No files or env vars yields defaults."""
        monkeypatch.chdir(tmp_path)
        assert load_options() == ScanOptions()

    def test_project_toml(self, tmp_path, monkeypatch):
        """./codetally.toml is discovered, with or without a [scan] table."""
        monkeypatch.chdir(tmp_path)
        (tmp_path / "codetally.toml").write_text(
            '[scan]\nexclude = ["vendor", "dist"]\nwith_functions = true\n'
        )
        options = load_options()
        assert options.exclude == ("vendor", "dist")
        assert options.with_functions is True

    def test_explicit_file_overrides_project(self, tmp_path, monkeypatch):
        """An explicit file is applied after the project file."""
        monkeypatch.chdir(tmp_path)
        (tmp_path / "codetally.toml").write_text("concurrency = 2\n")
        explicit = tmp_path / "ci.toml"
        explicit.write_text("concurrency = 8\n")
        assert load_options(config_file=explicit).concurrency == 8

    def test_missing_explicit_file(self, tmp_path, monkeypatch):
        """A missing explicit file is an error."""
        monkeypatch.chdir(tmp_path)
        with pytest.raises(InvalidConfigError, match="config_file"):
            load_options(config_file=tmp_path / "nope.toml")

    def test_malformed_toml(self, tmp_path, monkeypatch):
        """Unparseable TOML is an error."""
        monkeypatch.chdir(tmp_path)
        bad = tmp_path / "bad.toml"
        bad.write_text("concurrency = [\n")
        with pytest.raises(InvalidConfigError):
            load_options(config_file=bad)

    def test_env_vars(self, tmp_path, monkeypatch):
        """CODETALLY_* variables are parsed by field type."""
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("CODETALLY_RESPECT_GITIGNORE", "no")
        monkeypatch.setenv("CODETALLY_MAX_FILE_SIZE_BYTES", "4096")
        monkeypatch.setenv("CODETALLY_EXCLUDE", "vendor, dist")
        options = load_options()
        assert options.respect_gitignore is False
        assert options.max_file_size_bytes == 4096
        assert options.exclude == ("vendor", "dist")

    def test_bad_env_value(self, tmp_path, monkeypatch):
        """An unparseable env var names the variable."""
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("CODETALLY_FOLLOW_SYMLINKS", "maybe")
        with pytest.raises(InvalidConfigError, match="CODETALLY_FOLLOW_SYMLINKS"):
            load_options()

    def test_overrides_win_and_none_is_ignored(self, tmp_path, monkeypatch):
        """Explicit overrides beat env vars; None leaves lower layers alone."""
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("CODETALLY_CONCURRENCY", "2")
        monkeypatch.setenv("CODETALLY_WITH_STRUCTS", "true")
        options = load_options(concurrency=6, with_structs=None)
        assert options.concurrency == 6
        assert options.with_structs is True

    def test_unknown_key(self, tmp_path, monkeypatch):
        """Unknown options are rejected."""
        monkeypatch.chdir(tmp_path)
        (tmp_path / "codetally.toml").write_text("colour = true\n")
        with pytest.raises(InvalidConfigError, match="colour"):
            load_options()

    def test_global_config(self, tmp_path, monkeypatch):
        """~/.codetally.toml is read first and overridden by the project file."""
        home = tmp_path / "home"
        home.mkdir()
        monkeypatch.setenv("HOME", str(home))
        (home / ".codetally.toml").write_text("concurrency = 3\nwith_functions = true\n")
        project = tmp_path / "proj"
        project.mkdir()
        (project / "codetally.toml").write_text("concurrency = 5\n")
        monkeypatch.chdir(project)
        options = load_options()
        assert options.concurrency == 5
        assert options.with_functions is True
