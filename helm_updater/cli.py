"""CLI entrypoint for helm-updater."""

import dataclasses
import logging
from pathlib import Path

import typer

from . import __version__
from .config import Config
from .errors import ConfigError, UpdaterError
from .helm import check_charts
from .manifest import load_charts, save_charts
from .updater import RunOutcome, Updater

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="helm-updater",
    help="Bump Helm chart versions and pin multi-arch image digests",
)


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _load_config(**overrides) -> Config:
    """Config from the environment, with CLI options layered on top."""
    config = Config.from_env()
    changes = {k: v for k, v in overrides.items() if v is not None}
    return dataclasses.replace(config, **changes)


def _fail(error: UpdaterError) -> typer.Exit:
    """Report a fatal error and return the exit to raise.

    A failed command's output has already been logged by the runner.
    """
    logger.error(str(error))
    if isinstance(error, ConfigError):
        typer.echo(f"Configuration error: {error}", err=True)
    else:
        typer.echo(f"❌ {error}", err=True)
    return typer.Exit(1)


WorkingDir = typer.Option(
    None,
    "--working-dir",
    "-w",
    help="Checkout root (default: WORKING_DIRECTORY or /github/workspace)",
)
Verbose = typer.Option(False, "--verbose", "-v", help="Enable debug logging")


@app.command()
def run(
    working_dir: Path = WorkingDir,
    digests_only: bool = typer.Option(
        False,
        "--digests-only",
        help="Only refresh image digests and commit them to the current branch",
    ),
    no_write: bool = typer.Option(
        False,
        "--no-write",
        help="Stop after detecting updates, before writing anything",
    ),
    no_pr: bool = typer.Option(
        False,
        "--no-pr",
        help="Write files but do not commit or open a pull request",
    ),
    verbose: bool = Verbose,
) -> None:
    """Check charts, refresh image digests and open a pull request.

    Switches left off on the command line fall back to DIGESTS_ONLY, NO_WRITE
    and NO_PR.
    """
    _setup_logging(verbose)
    try:
        config = _load_config(
            working_dir=working_dir,
            digests_only=digests_only or None,
            no_write=no_write or None,
            no_pr=no_pr or None,
        )
        result = Updater(config).run()
    except UpdaterError as e:
        raise _fail(e)

    if result.outcome is RunOutcome.NO_UPDATES:
        typer.echo("✅ All charts are up to date")
        return

    for chart in result.updated_charts:
        typer.echo(f"  • {chart.name}: {chart.old_version} → {chart.version}")

    if result.images:
        typer.echo(f"📦 Pinned digests for {len(result.images)} images")

    messages = {
        RunOutcome.NO_WRITE: "🏃 No-write mode - no changes made",
        RunOutcome.NO_PULL_REQUEST: "Files updated, pull request skipped",
        RunOutcome.NO_CHANGES: "No changes to commit",
        RunOutcome.PULL_REQUEST_CREATED: f"✅ PR created: {result.pr_url}",
        RunOutcome.DIGESTS_WRITTEN: "No images found",
        RunOutcome.DIGESTS_COMMITTED: "✅ Image digests committed",
    }
    typer.echo(messages[result.outcome])


@app.command("check-charts")
def check_charts_cmd(
    working_dir: Path = WorkingDir,
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        "-n",
        help="Show available updates without writing the chart file",
    ),
    verbose: bool = Verbose,
) -> None:
    """Check every chart for a newer version and update the chart file."""
    _setup_logging(verbose)
    try:
        config = _load_config(working_dir=working_dir)
        updater = Updater(config)
        charts = load_charts(config.chart_path)
        updated = check_charts(updater.helm, charts)
        if updated and not dry_run:
            save_charts(config.chart_path, charts)
    except UpdaterError as e:
        raise _fail(e)

    if not updated:
        typer.echo("✅ All charts are up to date")
        return

    typer.echo(f"Found {len(updated)} chart update(s):")
    for chart in updated:
        typer.echo(f"  • {chart.name}: {chart.old_version} → {chart.version}")
    if dry_run:
        typer.echo("\n🏃 Dry run mode - no changes made")


@app.command()
def digests(
    working_dir: Path = WorkingDir,
    verbose: bool = Verbose,
) -> None:
    """Resolve amd64/arm64 digests for all chart images and write the image file."""
    _setup_logging(verbose)
    try:
        config = _load_config(working_dir=working_dir)
        images = Updater(config).generate_digests()
    except UpdaterError as e:
        raise _fail(e)

    typer.echo(f"📦 Wrote {len(images)} images to {config.image_path}")


@app.command()
def scan_images(
    working_dir: Path = WorkingDir,
    verbose: bool = Verbose,
) -> None:
    """List the image references found in rendered chart templates."""
    _setup_logging(verbose)
    try:
        config = _load_config(working_dir=working_dir)
        images = Updater(config).scan_images()
    except UpdaterError as e:
        raise _fail(e)

    typer.echo(f"🔍 Found {len(images)} unique image references:")
    for image in images:
        registry = image.registry or "docker.io"
        typer.echo(f"  {registry:<30} {image.name}:{image.tag}")


@app.command()
def version() -> None:
    """Show helm-updater version."""
    typer.echo(f"helm-updater v{__version__}")


def main() -> None:
    """Main entrypoint."""
    app()


if __name__ == "__main__":
    main()
