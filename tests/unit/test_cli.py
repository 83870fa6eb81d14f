"""Unit tests for the design-qa CLI."""

import json
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from design_qa import __version__
from design_qa.cli import EXIT_ERROR, EXIT_NOT_READY, EXIT_OK, cli
from design_qa.config import CONFIG_FILENAME, PIPELINE_TIMEOUT_SECONDS
from design_qa.pipeline import run_pipeline


@pytest.fixture
def runner():
    """Click test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch, tmp_path):
    """Run each command from an empty directory without env overrides."""
    for name in ("DESIGN_QA_CONFIG", "DESIGN_QA_LOG_LEVEL", "DESIGN_QA_LOG_FORMAT"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def design_file(tmp_path, figma_nodes_response):
    """Saved Figma nodes response."""
    path = tmp_path / "design.json"
    path.write_text(json.dumps(figma_nodes_response))
    return path


@pytest.fixture
def snapshot_file(tmp_path, dom_records):
    """Saved DOM snapshot matching the design."""
    path = tmp_path / "snapshot.json"
    path.write_text(json.dumps(dom_records))
    return path


@pytest.fixture
def broken_snapshot_file(tmp_path, dom_records):
    """Snapshot whose heading copy differs from the design."""
    dom_records[0]["text"] = "Night workshop"
    dom_records[0]["textContent"] = "Night workshop"
    path = tmp_path / "broken.json"
    path.write_text(json.dumps(dom_records))
    return path


class TestCLIBasics:
    """Tests for the command group."""

    def test_help(self, runner):
        """Test help lists the commands."""
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "compare" in result.output
        assert "init-config" in result.output

    def test_version(self, runner):
        """Test the version option."""
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output


class TestCompareCommand:
    """Tests for the compare command."""

    def test_matching_snapshot(self, runner, design_file, snapshot_file):
        """Test a clean comparison prints the summary."""
        result = runner.invoke(
            cli, ["compare", str(design_file), "--rendered", str(snapshot_file), "-q"]
        )

        assert result.exit_code == EXIT_OK
        assert "No differences found" in result.output
        assert "Overall 100.0 - production-ready" in result.output

    def test_json_output(self, runner, design_file, snapshot_file):
        """Test --json emits the serialized result."""
        result = runner.invoke(
            cli,
            ["compare", str(design_file), "--rendered", str(snapshot_file), "--json", "-q"],
        )

        assert result.exit_code == EXIT_OK
        data = json.loads(result.output)
        assert data["overall_score"] == 100.0
        assert data["readiness"] == "production-ready"
        assert len(data["pairs"]) == 3

    def test_differences_reported(self, runner, design_file, broken_snapshot_file):
        """Test differences are listed without failing the run."""
        result = runner.invoke(
            cli, ["compare", str(design_file), "--rendered", str(broken_snapshot_file), "-q"]
        )

        assert result.exit_code == EXIT_OK
        assert "[critical] text" in result.output
        assert 'Update text content to: "Day workshop"' in result.output

    def test_strict_exit_code(self, runner, design_file, broken_snapshot_file):
        """Test --strict fails when the page is not production-ready."""
        result = runner.invoke(
            cli,
            [
                "compare",
                str(design_file),
                "--rendered",
                str(broken_snapshot_file),
                "--strict",
                "-q",
            ],
        )
        assert result.exit_code == EXIT_NOT_READY

    def test_strict_passes_when_ready(self, runner, design_file, snapshot_file):
        """Test --strict succeeds on a clean page."""
        result = runner.invoke(
            cli,
            ["compare", str(design_file), "--rendered", str(snapshot_file), "--strict", "-q"],
        )
        assert result.exit_code == EXIT_OK

    def test_live_url(self, runner, design_file, dom_records):
        """Test --url uses the live page source."""
        from design_qa.collectors.dom import DomSnapshotParser

        rendered = DomSnapshotParser().parse(dom_records)

        async def fake_source():
            return rendered

        with patch("design_qa.cli.live_page_source", return_value=fake_source) as source:
            result = runner.invoke(
                cli, ["compare", str(design_file), "--url", "https://example.com", "-q"]
            )

        assert result.exit_code == EXIT_OK
        assert source.call_args.args[0] == "https://example.com"

    def test_requires_exactly_one_target(self, runner, design_file, snapshot_file):
        """Test --rendered and --url are mutually exclusive and required."""
        neither = runner.invoke(cli, ["compare", str(design_file)])
        both = runner.invoke(
            cli,
            [
                "compare",
                str(design_file),
                "--rendered",
                str(snapshot_file),
                "--url",
                "https://example.com",
            ],
        )
        assert neither.exit_code == EXIT_ERROR
        assert both.exit_code == EXIT_ERROR
        assert "exactly one of --rendered or --url" in neither.output

    @pytest.mark.parametrize("value", ["0", "-5"])
    def test_non_positive_timeout_rejected(self, runner, design_file, snapshot_file, value):
        """Test a zero or negative --timeout is a usage error."""
        result = runner.invoke(
            cli,
            [
                "compare",
                str(design_file),
                "--rendered",
                str(snapshot_file),
                "--timeout",
                value,
            ],
        )

        assert result.exit_code == EXIT_ERROR
        assert "--timeout" in result.output

    def test_explicit_timeout_is_used(self, runner, design_file, snapshot_file):
        """Test --timeout overrides the configured pipeline timeout."""
        with patch("design_qa.cli.run_pipeline", wraps=run_pipeline) as pipeline:
            result = runner.invoke(
                cli,
                [
                    "compare",
                    str(design_file),
                    "--rendered",
                    str(snapshot_file),
                    "--timeout",
                    "12.5",
                    "-q",
                ],
            )

        assert result.exit_code == EXIT_OK
        assert pipeline.call_args.kwargs["timeout_seconds"] == 12.5

    def test_configured_timeout_is_default(self, runner, design_file, snapshot_file):
        """Test the pipeline timeout comes from config without --timeout."""
        with patch("design_qa.cli.run_pipeline", wraps=run_pipeline) as pipeline:
            runner.invoke(
                cli, ["compare", str(design_file), "--rendered", str(snapshot_file), "-q"]
            )

        assert pipeline.call_args.kwargs["timeout_seconds"] == PIPELINE_TIMEOUT_SECONDS

    def test_quiet_and_verbose_conflict(self, runner, design_file, snapshot_file):
        """Test -q and -v cannot be combined."""
        result = runner.invoke(
            cli, ["compare", str(design_file), "--rendered", str(snapshot_file), "-q", "-v"]
        )
        assert result.exit_code == EXIT_ERROR

    def test_missing_config_file(self, runner, design_file, snapshot_file, tmp_path):
        """Test a missing --config path is a configuration error."""
        result = runner.invoke(
            cli,
            [
                "compare",
                str(design_file),
                "--rendered",
                str(snapshot_file),
                "--config",
                str(tmp_path / "nope.json"),
                "-q",
            ],
        )
        assert result.exit_code == EXIT_ERROR
        assert "Config file not found" in result.output

    def test_frame_not_found(self, runner, design_file, snapshot_file):
        """Test an unknown frame id is reported with a suggestion."""
        result = runner.invoke(
            cli,
            [
                "compare",
                str(design_file),
                "--rendered",
                str(snapshot_file),
                "--frame-id",
                "99:99",
                "-q",
            ],
        )
        assert result.exit_code == EXIT_ERROR
        assert "Frame not found" in result.output
        assert "Suggestion:" in result.output

    def test_invalid_design_json(self, runner, snapshot_file, tmp_path):
        """Test malformed design files fail cleanly."""
        bad = tmp_path / "bad.json"
        bad.write_text("{")
        result = runner.invoke(cli, ["compare", str(bad), "--rendered", str(snapshot_file), "-q"])
        assert result.exit_code == EXIT_ERROR
        assert "Invalid JSON in design file" in result.output

    def test_invalid_environment(self, runner, design_file, snapshot_file, monkeypatch):
        """Test bad environment settings are a configuration error."""
        monkeypatch.setenv("DESIGN_QA_LOG_LEVEL", "chatty")
        result = runner.invoke(
            cli, ["compare", str(design_file), "--rendered", str(snapshot_file)]
        )
        assert result.exit_code == EXIT_ERROR
        assert "Invalid environment settings" in result.output

    def test_project_config_is_used(self, runner, design_file, broken_snapshot_file, tmp_path):
        """Test design-qa.config.json in the working directory is loaded."""
        (tmp_path / CONFIG_FILENAME).write_text(
            json.dumps({"readiness": {"productionReadyMinScore": 0, "productionReadyMaxCritical": 5}})
        )
        result = runner.invoke(
            cli,
            [
                "compare",
                str(design_file),
                "--rendered",
                str(broken_snapshot_file),
                "--strict",
                "-q",
            ],
        )
        assert result.exit_code == EXIT_OK


class TestInitConfigCommand:
    """Tests for the init-config command."""

    def test_writes_default_config(self, runner, tmp_path):
        """Test a default config file is created."""
        result = runner.invoke(cli, ["init-config", "--path", str(tmp_path)])

        assert result.exit_code == EXIT_OK
        data = json.loads((tmp_path / CONFIG_FILENAME).read_text())
        assert data["matching"]["minMatchScore"] == 0.2

    def test_refuses_to_overwrite(self, runner, tmp_path):
        """Test an existing file needs --force."""
        (tmp_path / CONFIG_FILENAME).write_text("{}")

        refused = runner.invoke(cli, ["init-config", "--path", str(tmp_path)])
        forced = runner.invoke(cli, ["init-config", "--path", str(tmp_path), "--force"])

        assert refused.exit_code == EXIT_ERROR
        assert forced.exit_code == EXIT_OK
        assert json.loads((tmp_path / CONFIG_FILENAME).read_text()) != {}
