"""Tests for the info and languages commands."""

import json

import pytest
from typer.testing import CliRunner

from codetally import __version__
from codetally.cli import app

runner = CliRunner()


@pytest.fixture
def project(make_tree, go_source):
    return make_tree(
        {
            "main.go": go_source,
            "lib/util.py": "# util\ndef f():\n    return 1\n",
            "LICENSE": "MIT\n",
        }
    )


class TestInfoJson:
    """Test machine-readable output."""

    def test_json_summary(self, project):
        """JSON output carries totals and per-language stats."""
        result = runner.invoke(app, ["info", str(project), "--format", "json", "-q"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["languages"]["Go"]["stats"] == {"code": 13, "comment": 4, "blank": 4}
        assert data["total"]["file_count"] == 3
        assert "functions" not in data["languages"]["Go"]

    def test_json_with_functions_and_files(self, project):
        """Optional counts and file lists appear only when requested."""
        result = runner.invoke(
            app,
            ["info", str(project), "-f", "json", "-q", "--functions", "--structs", "--files"],
        )
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["languages"]["Go"]["functions"] == 2
        assert data["languages"]["Go"]["structs"] == 1
        assert [f["path"] for f in data["files"]] == ["main.go", "lib/util.py", "LICENSE"]

    def test_json_language_specific(self, project):
        """Package metadata is attached to per-language file records."""
        result = runner.invoke(
            app,
            ["info", str(project), "-f", "json", "-q", "--language-files", "--language-specific"],
        )
        assert result.exit_code == 0, result.output
        go_file = json.loads(result.stdout)["languages"]["Go"]["files"][0]
        assert go_file["language_specific"] == {"package": "main", "imports": ["fmt", "os"]}

    def test_exclude_flag(self, project):
        """--exclude removes matching paths."""
        result = runner.invoke(app, ["info", str(project), "-f", "json", "-q", "-e", "lib"])
        assert result.exit_code == 0, result.output
        assert "Python" not in json.loads(result.stdout)["languages"]

    def test_config_file_merged_with_flags(self, project, tmp_path):
        """--config values apply, and flags add to them."""
        config = tmp_path / "ci.toml"
        config.write_text('with_functions = true\nexclude = ["lib"]\n')
        result = runner.invoke(
            app, ["info", str(project), "-f", "json", "-q", "-c", str(config), "--structs"]
        )
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["languages"]["Go"]["functions"] == 2
        assert data["languages"]["Go"]["structs"] == 1
        assert "Python" not in data["languages"]

    def test_missing_config_file(self, project, tmp_path):
        """A missing --config file is rejected as a usage error."""
        result = runner.invoke(
            app, ["info", str(project), "-f", "json", "-q", "-c", str(tmp_path / "nope.toml")]
        )
        assert result.exit_code == 2


class TestInfoRich:
    """Test the table output."""

    def test_table(self, project):
        """The table lists languages and a TOTAL row, hiding Unknown."""
        result = runner.invoke(app, ["info", str(project), "-w", "2"])
        assert result.exit_code == 0, result.output
        assert "Go" in result.stdout
        assert "Python" in result.stdout
        assert "TOTAL" in result.stdout
        assert "Unknown" not in result.stdout

    def test_file_table(self, project):
        """--files adds a per-file table."""
        result = runner.invoke(app, ["info", str(project), "--files", "--functions"])
        assert result.exit_code == 0, result.output
        assert "Files:" in result.stdout
        assert "main.go" in result.stdout
        assert "funcs" in result.stdout


class TestInfoErrors:
    """Test exit codes."""

    def test_missing_path(self, tmp_path):
        """A bad root exits with status 1."""
        result = runner.invoke(app, ["info", str(tmp_path / "missing")])
        assert result.exit_code == 1
        assert "Invalid path" in result.output

    def test_invalid_glob(self, project):
        """A malformed glob is a configuration error."""
        result = runner.invoke(app, ["info", str(project), "-i", "[abc"])
        assert result.exit_code == 1
        assert "include" in result.output

    def test_unknown_format(self, project):
        """Unknown output formats are usage errors."""
        result = runner.invoke(app, ["info", str(project), "-f", "xml"])
        assert result.exit_code == 2

    def test_timeout(self, project):
        """An expired deadline exits with status 130."""
        result = runner.invoke(app, ["info", str(project), "--timeout", "0", "-q"])
        assert result.exit_code == 130
        assert "cancelled" in result.output


class TestOtherCommands:
    """Test languages and --version."""

    def test_languages_names(self):
        """--names prints one language per line."""
        result = runner.invoke(app, ["languages", "--names"])
        assert result.exit_code == 0
        names = result.stdout.splitlines()
        assert "Go" in names
        assert names == sorted(names)

    def test_languages_table(self):
        """The table shows comment syntax."""
        result = runner.invoke(app, ["languages"])
        assert result.exit_code == 0
        assert "Rust" in result.stdout

    def test_version(self):
        """--version prints the package version."""
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.stdout
