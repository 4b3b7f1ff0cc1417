"""Top-level run: check charts, resolve image digests, publish."""

import logging
from dataclasses import dataclass, field
from enum import Enum

from .config import Config
from .git_client import GitClient, publish_chart_updates
from .helm import HelmClient, check_charts, scrape_images
from .images import DigestResolver, RegistryAuthenticator, parse_image_references
from .manifest import load_charts, save_charts, save_images
from .models import Chart, Image
from .runner import CommandRunner

logger = logging.getLogger(__name__)

DIGEST_COMMIT_MESSAGE = "Updated image digests [ci skip]"


class RunOutcome(str, Enum):
    """How a run finished. Every outcome is a successful exit."""

    NO_UPDATES = "no_updates"
    NO_WRITE = "no_write"
    NO_PULL_REQUEST = "no_pull_request"
    NO_CHANGES = "no_changes"
    PULL_REQUEST_CREATED = "pull_request_created"
    DIGESTS_WRITTEN = "digests_written"
    DIGESTS_COMMITTED = "digests_committed"


@dataclass
class RunResult:
    """What a run did, for the CLI to report."""

    outcome: RunOutcome
    updated_charts: list[Chart] = field(default_factory=list)
    images: list[Image] = field(default_factory=list)
    pr_url: str | None = None


class Updater:
    """Wires the components together for one invocation."""

    def __init__(self, config: Config, runner: CommandRunner | None = None):
        self.config = config
        self.runner = runner or CommandRunner()
        self.helm = HelmClient(self.runner)
        self.authenticator = RegistryAuthenticator(config, self.runner)
        self.resolver = DigestResolver(self.runner, config.reg_path)
        self.git = GitClient(config, self.runner)

    def update_charts(self) -> tuple[list[Chart], bool]:
        """
        Bump outdated charts and persist charts.yaml.

        Returns:
            The updated charts and whether charts.yaml was written. Nothing is
            written when no chart changed or the no-write switch is set.
        """
        charts = load_charts(self.config.chart_path)
        updated = check_charts(self.helm, charts)

        if not updated:
            logger.info("No newer versions found, nothing to do.")
            return [], False

        if self.config.no_write:
            logger.info("NO_WRITE set, preventing file writing and pull request")
            return updated, False

        logger.info(f"Newer versions found, updating {self.config.chart_file}")
        save_charts(self.config.chart_path, charts)
        return updated, True

    def scan_images(self) -> list[Image]:
        """Render every chart and parse the discovered image references."""
        charts = load_charts(self.config.chart_path)
        raws = scrape_images(
            self.helm,
            charts,
            self.config.values_path,
            cwd=self.config.working_dir,
        )
        return parse_image_references(raws)

    def generate_digests(self) -> list[Image]:
        """Resolve digests for every discovered image and write images.yaml."""
        images = self.scan_images()
        self.authenticator.login_all(images)
        self.resolver.resolve_all(images)
        save_images(self.config.image_path, images)
        return images

    def run(self) -> RunResult:
        """Run the full pipeline according to the configured mode."""
        if self.config.digests_only:
            return self.run_digests_only()

        updated, written = self.update_charts()
        if not updated:
            return RunResult(RunOutcome.NO_UPDATES)
        if not written:
            return RunResult(RunOutcome.NO_WRITE, updated_charts=updated)

        images = self.generate_digests()

        if self.config.no_pr:
            logger.info("NO_PR set, preventing pull request")
            return RunResult(RunOutcome.NO_PULL_REQUEST, updated, images)

        pr_url = publish_chart_updates(self.git, updated, changed_images=bool(images))
        if pr_url is None:
            return RunResult(RunOutcome.NO_CHANGES, updated, images)
        return RunResult(RunOutcome.PULL_REQUEST_CREATED, updated, images, pr_url)

    def run_digests_only(self) -> RunResult:
        """Refresh images.yaml and commit it straight to the current branch."""
        images = self.generate_digests()
        if not images:
            return RunResult(RunOutcome.DIGESTS_WRITTEN, images=images)

        if not self.git.commit_and_push(DIGEST_COMMIT_MESSAGE):
            return RunResult(RunOutcome.NO_CHANGES, images=images)
        return RunResult(RunOutcome.DIGESTS_COMMITTED, images=images)
