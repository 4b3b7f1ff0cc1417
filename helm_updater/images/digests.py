"""Multi-architecture digest lookup with the reg CLI."""

import json
import logging

from ..errors import DigestNotFoundError
from ..models import Digests, Image, ManifestEntry
from ..runner import CommandRunner

logger = logging.getLogger(__name__)


def parse_manifest_list(output: str) -> list[ManifestEntry]:
    """Parse `reg manifest` JSON into platform-tagged manifest entries.

    Raises:
        ValueError: The output is not a manifest list document.
    """
    data = json.loads(output)
    if not isinstance(data, dict):
        raise ValueError("expected a JSON object")

    manifests = data.get("manifests") or []
    if not isinstance(manifests, list):
        raise ValueError("`manifests` is not a list")

    entries = []
    for manifest in manifests:
        if not isinstance(manifest, dict):
            raise ValueError(f"manifest entry is not an object: {manifest!r}")
        platform = manifest.get("platform") or {}
        if not isinstance(platform, dict):
            raise ValueError(f"`platform` is not an object: {platform!r}")

        entry = ManifestEntry(
            digest=manifest.get("digest", ""),
            architecture=platform.get("architecture", ""),
            os=platform.get("os", ""),
            variant=platform.get("variant", ""),
            media_type=manifest.get("mediaType", ""),
        )
        if not isinstance(entry.digest, str) or not isinstance(entry.architecture, str):
            raise ValueError(f"digest and architecture must be strings: {manifest!r}")
        entries.append(entry)
    return entries


def select_digests(entries: list[ManifestEntry]) -> Digests:
    """Pick the amd64 and arm64 digests; the last entry for an arch wins."""
    digests = Digests()
    for entry in entries:
        if entry.architecture == "amd64":
            digests.amd64 = entry.digest
        elif entry.architecture == "arm64":
            digests.arm64 = entry.digest
    return digests


class DigestResolver:
    """Fills in amd64 and arm64 digests for every image."""

    def __init__(self, runner: CommandRunner, reg_path: str = "reg"):
        self.runner = runner
        self.reg_path = reg_path

    def resolve(self, image: Image) -> Digests:
        output = self.runner.run(self.reg_path, "manifest", image.raw)

        try:
            entries = parse_manifest_list(output)
        except ValueError as e:
            raise DigestNotFoundError(image.raw, f"unreadable manifest: {e}") from e

        digests = select_digests(entries)
        if not digests.complete:
            raise DigestNotFoundError(image.raw)
        return digests

    def resolve_all(self, images: list[Image]) -> list[Image]:
        """Resolve digests in place, aborting on the first incomplete image."""
        for image in images:
            image.digests = self.resolve(image)
        return images
