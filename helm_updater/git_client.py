"""Git integration for committing updates and opening pull requests."""

import logging
import uuid
from dataclasses import dataclass

from .config import Config
from .models import Chart
from .runner import CommandRunner, log_multiline

logger = logging.getLogger(__name__)

PR_LABELS = ("dependencies", "github_actions")


@dataclass
class PullRequest:
    """Title and body summarising a batch of chart bumps."""

    title: str
    body: str


def build_pull_request(charts: list[Chart], changed_images: bool) -> PullRequest:
    """Compose the PR title and body for the updated charts."""
    title = "Bump " + ", ".join(
        f"{c.name} from {c.old_version} to {c.version}" for c in charts
    )

    body = "## Helm Chart Updater\n"
    for chart in charts:
        body += f"Bumps {chart.name} Helm Chart version from {chart.old_version} to {chart.version}.\n"

    if changed_images:
        body += "\n---\nAlso updated list of image digests."

    return PullRequest(title=title, body=body)


def new_branch_name(prefix: str = "helm-update") -> str:
    return f"{prefix}-{uuid.uuid4().hex[:6]}"


class GitClient:
    """Client for Git operations and PR creation."""

    def __init__(self, config: Config, runner: CommandRunner):
        self.config = config
        self.runner = runner
        self.repo_path = config.working_dir
        self.remote = config.git_remote
        self.main_branch = config.git_main_branch

    def _run_git(self, *args: str) -> str:
        """Run a git command in the repo directory."""
        return self.runner.run("git", *args, cwd=self.repo_path)

    def configure_identity(self) -> None:
        """Commit as the workflow actor."""
        self.config.require_github()
        self._run_git("config", "user.name", self.config.github_actor)
        self._run_git("config", "user.email", "<>")

    def create_branch(self, branch_name: str) -> None:
        logger.info(f"Creating new branch {branch_name}...")
        self._run_git("checkout", "-b", branch_name)
        logger.info("Branch successfully created!")

    def has_changes(self) -> bool:
        return bool(self._run_git("status", "--porcelain").strip())

    def commit_and_push(self, message: str, branch_name: str | None = None) -> bool:
        """
        Stage everything, commit and push.

        Args:
            message: Commit message.
            branch_name: Create and push this new branch; push the current
                branch when None.

        Returns:
            False when the working tree had nothing to commit.
        """
        self.configure_identity()

        if branch_name:
            self.create_branch(branch_name)

        logger.info("Committing changes to remote branch...")
        if not self.has_changes():
            logger.info("No changes, nothing to commit")
            return False

        self._run_git("add", "-A")
        self._run_git("commit", "-m", message)

        if branch_name:
            self._run_git("push", "-u", self.remote, branch_name)
        else:
            self._run_git("push")

        logger.info("Successfully pushed changes to remote branch!")
        return True

    def create_pull_request(self, branch_name: str, pr: PullRequest) -> str:
        """Open a pull request with the gh CLI and return its URL."""
        args = [
            "gh", "pr", "create",
            "--title", pr.title,
            "--body", pr.body,
            "--base", self.main_branch,
            "--head", branch_name,
        ]
        for label in PR_LABELS:
            args.extend(["--label", label])

        logger.info("Creating pull request...")
        output = self.runner.run(
            *args,
            cwd=self.repo_path,
            env={"GH_TOKEN": self.config.github_token},
        )

        pr_url = output.strip().split("\n")[-1]
        logger.info(f"Created PR: {pr_url}")
        return pr_url


def publish_chart_updates(
    git_client: GitClient,
    charts: list[Chart],
    changed_images: bool,
) -> str | None:
    """
    Commit updated chart versions to a fresh branch and open a pull request.

    Returns:
        The PR URL, or None when there was nothing to commit.
    """
    pr = build_pull_request(charts, changed_images)
    logger.info("Pull Request Title:")
    logger.info(pr.title)
    logger.info("Pull Request Body:")
    log_multiline(pr.body)

    branch_name = new_branch_name()
    if not git_client.commit_and_push("Updated chart versions", branch_name):
        logger.info("No changes for a pull request")
        return None

    return git_client.create_pull_request(branch_name, pr)
