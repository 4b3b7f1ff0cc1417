"""Synchronous execution of external command-line tools."""

import logging
import os
import shlex
import subprocess
from pathlib import Path

from .errors import CommandError

logger = logging.getLogger(__name__)


def log_multiline(text: str, level: int = logging.INFO) -> None:
    """Log every line of a multi-line string as its own record."""
    for line in text.rstrip("\n").split("\n"):
        logger.log(level, line)


class CommandRunner:
    """Runs external commands, logs their output and raises on failure."""

    def __init__(self, cwd: Path | None = None):
        self.cwd = cwd

    def run(
        self,
        *args: str,
        cwd: Path | None = None,
        stdin: str | None = None,
        env: dict[str, str] | None = None,
        log_output: bool = True,
    ) -> str:
        """Run a command and return its standard output.

        Args:
            args: Executable and its arguments.
            cwd: Directory to run in; defaults to the runner's directory.
            stdin: Text fed to standard input. Never logged.
            env: Extra environment variables layered over the process env.
            log_output: Log standard output after a successful run.

        Returns:
            The command's standard output.

        Raises:
            CommandError: The command could not be started or exited non-zero.
        """
        command = shlex.join(args)
        log_multiline(f"$ {command}")

        run_env = None
        if env:
            run_env = os.environ.copy()
            run_env.update(env)

        try:
            result = subprocess.run(
                list(args),
                cwd=cwd or self.cwd,
                input=stdin,
                env=run_env,
                capture_output=True,
                text=True,
                check=False,
            )
        except OSError as e:
            logger.error(f"Could not run {args[0]}: {e}")
            raise CommandError(command, None, stderr=str(e)) from e

        if result.returncode != 0:
            log_multiline(f"exit status {result.returncode}: {result.stderr}", logging.ERROR)
            if result.stdout:
                log_multiline(result.stdout, logging.ERROR)
            raise CommandError(command, result.returncode, result.stdout, result.stderr)

        if log_output:
            log_multiline(f"Result: {result.stdout}")
        return result.stdout
