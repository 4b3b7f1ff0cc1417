"""Tests for CLI exit codes, option handling and the single-step commands."""

import logging
from pathlib import Path

import pytest
import yaml
from typer.testing import CliRunner

from helm_updater import cli
from helm_updater.errors import CommandError, ConfigError, DigestNotFoundError
from helm_updater.models import Chart
from helm_updater.updater import RunOutcome, RunResult, Updater

from .conftest import FakeRunner, command_failure, manifest_list, search_result

runner = CliRunner()

TEMPLATE = (
    "      containers:\n"
    "        - image: quay.io/argoproj/argoexec:v3.0.0\n"
    "          args: [\"--sidecar\", \"nginx:1.25.3\"]\n"
)


class StubUpdater:
    """Stands in for Updater; returns or raises whatever the test sets."""

    result = None
    seen_config = None

    def __init__(self, config):
        StubUpdater.seen_config = config

    def run(self):
        if isinstance(StubUpdater.result, Exception):
            raise StubUpdater.result
        return StubUpdater.result


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch, tmp_path):
    monkeypatch.setattr("helm_updater.config.load_dotenv", lambda: False)
    for name in (
        "DIGESTS_ONLY", "NO_WRITE", "NO_PR",
        "CHART_FILE", "IMAGE_FILE", "VALUES_DIRECTORY", "REG_PATH",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("WORKING_DIRECTORY", str(tmp_path))


@pytest.fixture
def stub_updater(monkeypatch):
    monkeypatch.setattr(cli, "Updater", StubUpdater)


@pytest.fixture
def fake_commands(monkeypatch, workspace: Path) -> FakeRunner:
    """Back the CLI's Updater with canned helm, reg and docker answers."""
    fake = FakeRunner({
        ("helm", "search"): search_result("foo-repo", "foo", "1.3.0"),
        ("helm", "template"): TEMPLATE,
        ("reg", "manifest"): manifest_list("amd64", "arm64"),
    })
    monkeypatch.setenv("QUAY_USERNAME", "quay-user")
    monkeypatch.setenv("QUAY_PASSWORD", "quay-secret")
    monkeypatch.setattr(cli, "Updater", lambda config: Updater(config, fake))
    return fake


@pytest.mark.usefixtures("stub_updater")
class TestRunCommand:
    """Tests for the full pipeline command's reporting and exit codes."""

    def test_no_updates_exits_zero(self):
        StubUpdater.result = RunResult(RunOutcome.NO_UPDATES)

        result = runner.invoke(cli.app, ["run"])

        assert result.exit_code == 0
        assert "up to date" in result.output

    def test_pull_request_reported(self):
        chart = Chart("foo", "foo-repo", "https://x", "1.3.0", old_version="1.2.0")
        StubUpdater.result = RunResult(
            RunOutcome.PULL_REQUEST_CREATED, [chart], pr_url="https://github.com/org/charts/pull/9"
        )

        result = runner.invoke(cli.app, ["run"])

        assert result.exit_code == 0
        assert "foo: 1.2.0 → 1.3.0" in result.output
        assert "pull/9" in result.output

    def test_config_error_exits_one(self):
        StubUpdater.result = ConfigError("No GitHub token (env GITHUB_TOKEN) provided")

        result = runner.invoke(cli.app, ["run"])

        assert result.exit_code == 1

    def test_fatal_error_exits_non_zero(self):
        StubUpdater.result = DigestNotFoundError("quay.io/argoproj/argoexec:v3.0.0")

        result = runner.invoke(cli.app, ["run"])

        assert result.exit_code == 1

    def test_failed_command_output_not_logged_again(self, caplog):
        StubUpdater.result = CommandError("reg manifest nginx:1", 1, "", "unauthorized: token expired")

        with caplog.at_level(logging.ERROR, logger="helm_updater.cli"):
            result = runner.invoke(cli.app, ["run"])

        assert result.exit_code == 1
        cli_messages = [r.getMessage() for r in caplog.records if r.name == "helm_updater.cli"]
        assert cli_messages == ["`reg manifest nginx:1` exited with status 1"]

    def test_flags_override_environment(self, monkeypatch):
        monkeypatch.setenv("NO_PR", "1")
        StubUpdater.result = RunResult(RunOutcome.NO_UPDATES)

        runner.invoke(cli.app, ["run", "--no-write"])

        assert StubUpdater.seen_config.no_write is True
        assert StubUpdater.seen_config.no_pr is True
        assert StubUpdater.seen_config.digests_only is False


class TestCheckChartsCommand:
    """Tests for checking chart versions from the command line."""

    def test_dry_run_leaves_chart_file_alone(self, fake_commands, workspace: Path):
        before = (workspace / "charts.yaml").read_bytes()

        result = runner.invoke(cli.app, ["check-charts", "--dry-run"])

        assert result.exit_code == 0
        assert "foo: 1.2.0 → 1.3.0" in result.output
        assert "Dry run" in result.output
        assert (workspace / "charts.yaml").read_bytes() == before
        assert not fake_commands.commands("helm", "template")

    def test_rewrites_chart_file(self, fake_commands, workspace: Path):
        result = runner.invoke(cli.app, ["check-charts"])

        assert result.exit_code == 0
        charts = yaml.safe_load((workspace / "charts.yaml").read_text())
        assert charts[0]["version"] == "1.3.0"
        assert not fake_commands.commands("git")

    def test_up_to_date(self, fake_commands, workspace: Path):
        fake_commands.responses[("helm", "search")] = search_result("foo-repo", "foo", "1.2.0")
        before = (workspace / "charts.yaml").read_bytes()

        result = runner.invoke(cli.app, ["check-charts"])

        assert result.exit_code == 0
        assert "up to date" in result.output
        assert (workspace / "charts.yaml").read_bytes() == before


class TestScanImagesCommand:
    """Tests for listing images without touching registries."""

    def test_lists_registry_and_reference(self, fake_commands, workspace: Path):
        result = runner.invoke(cli.app, ["scan-images"])

        assert result.exit_code == 0
        assert "Found 2 unique image references" in result.output
        lines = [line.split() for line in result.output.splitlines()]
        assert ["quay.io", "argoproj/argoexec:v3.0.0"] in lines
        assert ["docker.io", "library/nginx:1.25.3"] in lines
        assert not fake_commands.commands("reg")
        assert not fake_commands.commands("docker")
        assert not (workspace / "images.yaml").exists()


class TestDigestsCommand:
    """Tests for writing the image digest file from the command line."""

    def test_writes_image_file(self, fake_commands, workspace: Path):
        fake_commands.responses[("helm", "template")] = "image: quay.io/argoproj/argoexec:v3.0.0\n"

        result = runner.invoke(cli.app, ["digests"])

        assert result.exit_code == 0
        assert "Wrote 1 images" in result.output
        images = yaml.safe_load((workspace / "images.yaml").read_text())
        assert images == [{
            "registry": "quay.io",
            "name": "argoproj/argoexec",
            "digests": {"amd64": "sha256:amd64", "arm64": "sha256:arm64"},
        }]
        assert not fake_commands.commands("git")

    def test_failed_login_exits_one(self, fake_commands, workspace: Path):
        fake_commands.responses[("helm", "template")] = "image: quay.io/argoproj/argoexec:v3.0.0\n"
        fake_commands.responses[("docker", "login")] = command_failure("docker", "login")

        result = runner.invoke(cli.app, ["digests"])

        assert result.exit_code == 1
        assert not fake_commands.commands("reg")
        assert not (workspace / "images.yaml").exists()
