"""Configuration management via environment variables."""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from .errors import ConfigError


def _flag(name: str) -> bool:
    """Switch variables are on when set to any non-empty value."""
    return bool(os.getenv(name, ""))


@dataclass
class Config:
    """Application configuration loaded from environment variables."""

    # File locations
    working_dir: Path = Path("/github/workspace")
    chart_file: str = "charts.yaml"
    image_file: str = "images.yaml"
    values_dir: str = "generation/values"

    # Run mode switches
    digests_only: bool = False
    no_write: bool = False
    no_pr: bool = False

    # GitHub settings
    github_token: str = ""
    github_repository: str = ""
    github_actor: str = ""
    git_remote: str = "origin"
    git_main_branch: str = "main"

    # Registry settings
    reg_path: str = "reg"
    quay_username: str = ""
    quay_password: str = ""
    gcr_json_key: str = ""

    @property
    def chart_path(self) -> Path:
        return self.working_dir / self.chart_file

    @property
    def image_path(self) -> Path:
        return self.working_dir / self.image_file

    @property
    def values_path(self) -> Path:
        return self.working_dir / self.values_dir

    def require_github(self) -> None:
        """Fail unless everything needed to commit and open a PR is set."""
        if not self.github_token:
            raise ConfigError("No GitHub token (env GITHUB_TOKEN) provided")
        if not self.github_repository:
            raise ConfigError("No GitHub repository (env GITHUB_REPOSITORY) provided")
        if not self.github_actor:
            raise ConfigError("No GitHub actor (env GITHUB_ACTOR) provided")

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        load_dotenv()

        return cls(
            working_dir=Path(os.getenv("WORKING_DIRECTORY") or "/github/workspace"),
            chart_file=os.getenv("CHART_FILE") or "charts.yaml",
            image_file=os.getenv("IMAGE_FILE") or "images.yaml",
            values_dir=os.getenv("VALUES_DIRECTORY") or "generation/values",
            digests_only=_flag("DIGESTS_ONLY"),
            no_write=_flag("NO_WRITE"),
            no_pr=_flag("NO_PR"),
            github_token=os.getenv("GITHUB_TOKEN", ""),
            github_repository=os.getenv("GITHUB_REPOSITORY", ""),
            github_actor=os.getenv("GITHUB_ACTOR", ""),
            git_remote=os.getenv("GIT_REMOTE") or "origin",
            git_main_branch=os.getenv("MAIN_BRANCH") or "main",
            reg_path=os.getenv("REG_PATH") or "reg",
            quay_username=os.getenv("QUAY_USERNAME", ""),
            quay_password=os.getenv("QUAY_PASSWORD", ""),
            gcr_json_key=os.getenv("GCR_JSON_KEY", ""),
        )
