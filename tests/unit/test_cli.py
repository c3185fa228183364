"""
Integration tests for CLI commands.

Tests the basic functionality of CLI commands and error handling.
"""

import json

import pytest
import yaml
from typer.testing import CliRunner

from envscan.cli import app

runner = CliRunner()


@pytest.fixture
def project(make_tree):
    return make_tree(
        {
            "src/app.js": "const key = process.env.API_KEY;\n",
            "lib/config.py": "key = os.getenv('API_KEY')\nurl = os.getenv('DB_URL')\n",
        }
    )


class TestCLIHelp:
    """Test CLI help and usage information."""

    def test_main_help(self):
        """Main help should display available commands."""
        result = runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        assert "scan" in result.stdout
        assert "languages" in result.stdout

    def test_scan_help(self):
        """Scan command help should display options."""
        result = runner.invoke(app, ["scan", "--help"])

        assert result.exit_code == 0
        assert "Directory to scan" in result.stdout
        assert "--format" in result.stdout
        assert "--sequential" in result.stdout


class TestScanCommand:
    def test_json_output(self, project):
        result = runner.invoke(app, ["scan", str(project), "--format", "json"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["files_scanned"] == 2
        assert data["variables"]["API_KEY"]["total_count"] == 2
        assert data["variables"]["API_KEY"]["files"] == ["lib/config.py", "src/app.js"]
        assert list(data["variables"]) == ["API_KEY", "DB_URL"]

    def test_yaml_output(self, project):
        result = runner.invoke(app, ["scan", str(project), "-f", "yaml", "--sequential"])

        assert result.exit_code == 0
        data = yaml.safe_load(result.stdout)
        assert data["variables"]["DB_URL"]["files"] == ["lib/config.py"]

    def test_text_output(self, project):
        result = runner.invoke(app, ["scan", str(project)])

        assert result.exit_code == 0
        assert "Scan Complete" in result.stdout
        assert "API_KEY" in result.stdout
        assert "DB_URL" in result.stdout

    def test_text_output_no_variables(self, make_tree):
        root = make_tree({"plain.py": "print('hi')\n"})

        result = runner.invoke(app, ["scan", str(root)])

        assert result.exit_code == 0
        assert "No environment variables found" in result.stdout

    def test_exclude_option(self, project):
        result = runner.invoke(app, ["scan", str(project), "-f", "json", "--exclude", "src"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["variables"]["API_KEY"]["files"] == ["lib/config.py"]

    def test_include_option_replaces_defaults(self, project):
        result = runner.invoke(app, ["scan", str(project), "-f", "json", "--include", "*.js"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert list(data["variables"]) == ["API_KEY"]
        assert data["files_scanned"] == 1

    def test_max_depth_option(self, project):
        result = runner.invoke(app, ["scan", str(project), "-f", "json", "--max-depth", "1"])

        assert result.exit_code == 0
        assert json.loads(result.stdout)["files_scanned"] == 0

    def test_config_file(self, project, tmp_path_factory):
        config = tmp_path_factory.mktemp("config") / "envscan.yaml"
        config.write_text("scan:\n  include_patterns: ['*.py']\n  parallel: false\n", encoding="utf-8")

        result = runner.invoke(app, ["scan", str(project), "-f", "json", "--config", str(config)])

        assert result.exit_code == 0
        assert json.loads(result.stdout)["files_scanned"] == 1

    def test_dotenv_settings_applied(self, project, monkeypatch):
        # Registered first so the value load_dotenv sets is removed afterwards
        monkeypatch.setenv("ENVSCAN_SCAN_MAX_DEPTH", "")
        monkeypatch.delenv("ENVSCAN_SCAN_MAX_DEPTH")
        (project / ".env").write_text("ENVSCAN_SCAN_MAX_DEPTH=1\n", encoding="utf-8")
        monkeypatch.chdir(project)

        result = runner.invoke(app, ["scan", ".", "-f", "json"])

        assert result.exit_code == 0
        assert json.loads(result.stdout)["files_scanned"] == 0


class TestCLIErrorHandling:
    """Test CLI error handling for invalid inputs."""

    def test_missing_root(self, tmp_path):
        result = runner.invoke(app, ["scan", str(tmp_path / "missing")])

        assert result.exit_code == 1

    def test_missing_config_file(self, project):
        result = runner.invoke(
            app, ["scan", str(project), "--config", str(project / "nope.yaml")]
        )

        assert result.exit_code == 1

    def test_mistyped_config_value(self, project, tmp_path_factory):
        config = tmp_path_factory.mktemp("config") / "envscan.yaml"
        config.write_text("scan:\n  max_depth: deep\n", encoding="utf-8")

        result = runner.invoke(app, ["scan", str(project), "-f", "json", "-c", str(config)])

        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)

    def test_quoted_config_values_are_accepted(self, project, tmp_path_factory):
        config = tmp_path_factory.mktemp("config") / "envscan.yaml"
        config.write_text("scan:\n  max_depth: '5'\n  parallel: 'false'\n", encoding="utf-8")

        result = runner.invoke(app, ["scan", str(project), "-f", "json", "-c", str(config)])

        assert result.exit_code == 0
        assert json.loads(result.stdout)["files_scanned"] == 2

    def test_invalid_format(self, project):
        result = runner.invoke(app, ["scan", str(project), "--format", "xml"])

        assert result.exit_code != 0


class TestLanguagesCommand:
    def test_lists_languages(self):
        result = runner.invoke(app, ["languages"])

        assert result.exit_code == 0
        assert "Supported Languages" in result.stdout
        assert "python" in result.stdout
        assert "rust" in result.stdout
