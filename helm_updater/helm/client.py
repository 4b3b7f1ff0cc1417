"""Thin wrapper around the helm CLI."""

import json
import logging
from pathlib import Path

from ..errors import ChartLookupError
from ..models import Chart
from ..runner import CommandRunner

logger = logging.getLogger(__name__)


class HelmClient:
    """Adds repositories, looks up chart versions and renders templates."""

    def __init__(self, runner: CommandRunner):
        self.runner = runner
        self._ready_repos: set[str] = set()

    def prepare_repo(self, chart: Chart) -> None:
        """Add and update the chart's repository once per run."""
        if chart.repo in self._ready_repos:
            return

        logger.info(f"Getting {chart.name} Helm repository from {chart.url}")
        self.runner.run("helm", "repo", "add", chart.repo, chart.url)
        self.runner.run("helm", "repo", "update", chart.repo)
        self._ready_repos.add(chart.repo)

    def latest_version(self, chart: Chart) -> str:
        """Return the newest published version of a chart, as Helm prints it."""
        self.prepare_repo(chart)

        logger.info(f"Pulling {chart.name} versions")
        output = self.runner.run(
            "helm", "search", "repo", chart.reference, "--output", "json"
        )
        command = f"helm search repo {chart.reference}"
        try:
            results = json.loads(output or "[]")
        except json.JSONDecodeError as e:
            raise ChartLookupError(f"Unparseable output from `{command}`: {e}") from e

        if not isinstance(results, list) or not all(isinstance(r, dict) for r in results):
            raise ChartLookupError(f"Expected a list of charts from `{command}`, got: {output}")
        if not results:
            raise ChartLookupError(f"No chart named {chart.reference} in {chart.url}")

        # Search is a substring match; prefer the exact chart over e.g. foo-crds
        chosen = next((r for r in results if r.get("name") == chart.reference), results[0])
        version = chosen.get("version")
        if not isinstance(version, str) or not version:
            raise ChartLookupError(f"No version reported for {chosen.get('name')} by `{command}`")
        return version

    def template(self, chart: Chart, values_file: Path | None = None, cwd: Path | None = None) -> str:
        """Render all of a chart's templates, CRDs included."""
        self.prepare_repo(chart)

        args = [
            "helm", "template", chart.name, chart.reference,
            "--version", chart.version,
            "--include-crds",
        ]
        if values_file is not None:
            args.extend(["--values", str(values_file)])

        rendered = self.runner.run(*args, cwd=cwd, log_output=False)
        logger.debug(rendered)
        return rendered
