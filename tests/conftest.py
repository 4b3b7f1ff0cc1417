"""Shared fixtures: a command runner that never executes anything."""

import json
from pathlib import Path

import pytest

from helm_updater.config import Config
from helm_updater.errors import CommandError
from helm_updater.runner import CommandRunner


class FakeRunner(CommandRunner):
    """Records commands and answers them from canned responses.

    Responses are keyed by a tuple prefix of the command; the longest matching
    prefix wins. A response may be a string, an exception to raise, or a
    callable taking the full argument tuple.
    """

    def __init__(self, responses: dict | None = None):
        super().__init__()
        self.responses: dict[tuple, object] = dict(responses or {})
        self.calls: list[tuple[str, ...]] = []
        self.stdin: dict[tuple[str, ...], str] = {}
        self.envs: dict[tuple[str, ...], dict] = {}
        self.cwds: dict[tuple[str, ...], Path | None] = {}

    def run(self, *args, cwd=None, stdin=None, env=None, log_output=True):
        self.calls.append(args)
        self.cwds[args] = cwd
        if stdin is not None:
            self.stdin[args] = stdin
        if env:
            self.envs[args] = env

        matches = [k for k in self.responses if args[: len(k)] == k]
        if not matches:
            return ""
        response = self.responses[max(matches, key=len)]
        if isinstance(response, Exception):
            raise response
        if callable(response):
            return response(args)
        return response

    def commands(self, *prefix: str) -> list[tuple[str, ...]]:
        return [c for c in self.calls if c[: len(prefix)] == prefix]


def search_result(repo: str, name: str, version: str) -> str:
    return json.dumps([{"name": f"{repo}/{name}", "version": version, "app_version": "", "description": ""}])


def manifest_list(*architectures: str) -> str:
    return json.dumps({
        "schemaVersion": 2,
        "mediaType": "application/vnd.docker.distribution.manifest.list.v2+json",
        "manifests": [
            {
                "mediaType": "application/vnd.docker.distribution.manifest.v2+json",
                "digest": f"sha256:{arch}",
                "platform": {"architecture": arch, "os": "linux"},
            }
            for arch in architectures
        ],
    })


def command_failure(*args: str) -> CommandError:
    return CommandError(" ".join(args), 1, "", "boom")


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """A checkout with a one-chart charts.yaml."""
    (tmp_path / "charts.yaml").write_text(
        "- name: foo\n"
        "  repo: foo-repo\n"
        "  url: https://x\n"
        '  version: "1.2.0"\n'
    )
    return tmp_path


@pytest.fixture
def config(workspace: Path) -> Config:
    return Config(
        working_dir=workspace,
        github_token="token",
        github_repository="org/charts",
        github_actor="bot",
        quay_username="quay-user",
        quay_password="quay-secret",
        gcr_json_key='{"type": "service_account"}',
    )
