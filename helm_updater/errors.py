"""Exceptions raised by the updater.

Nothing below the command line exits the process; every failure is raised as
one of these and handled once by the CLI.
"""


class UpdaterError(Exception):
    """Base class for all updater failures."""


class ConfigError(UpdaterError):
    """Required configuration is missing."""


class ManifestError(UpdaterError):
    """The chart or image manifest file could not be read or written."""


class VersionError(UpdaterError):
    """A chart version string is not a semantic version."""


class UnknownRegistryError(UpdaterError):
    """No login configuration exists for a registry."""

    def __init__(self, registry: str):
        super().__init__(f"No login configuration for {registry}")
        self.registry = registry


class DigestNotFoundError(UpdaterError):
    """The registry did not report both an amd64 and an arm64 digest."""

    def __init__(self, image: str, detail: str = ""):
        message = f"Failed to find both ARM and AMD digests for image {image}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.image = image


class CommandError(UpdaterError):
    """An external command failed or could not be started."""

    def __init__(
        self,
        command: str,
        returncode: int | None,
        stdout: str = "",
        stderr: str = "",
    ):
        if returncode is None:
            message = f"Could not run `{command}`: {stderr}"
        else:
            message = f"`{command}` exited with status {returncode}"
        super().__init__(message)
        self.command = command
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr


class ChartLookupError(UpdaterError):
    """A chart repository did not report a usable latest version."""
