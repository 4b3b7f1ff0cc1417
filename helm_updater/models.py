"""Data models for the chart and image manifests."""

from dataclasses import dataclass, field


@dataclass
class Chart:
    """A chart entry from charts.yaml."""

    name: str
    repo: str
    url: str
    version: str
    old_version: str | None = None

    @property
    def reference(self) -> str:
        """Chart reference as Helm addresses it (repo/name)."""
        return f"{self.repo}/{self.name}"

    def to_dict(self) -> dict[str, str]:
        """Serialise for charts.yaml; old_version is never persisted."""
        return {
            "name": self.name,
            "repo": self.repo,
            "url": self.url,
            "version": self.version,
        }


@dataclass
class Digests:
    """Per-architecture manifest digests."""

    amd64: str = ""
    arm64: str = ""

    @property
    def complete(self) -> bool:
        return bool(self.amd64 and self.arm64)


@dataclass
class Image:
    """A container image discovered in rendered chart templates."""

    raw: str
    name: str
    registry: str = ""
    tag: str = ""
    digests: Digests = field(default_factory=Digests)

    def to_dict(self) -> dict:
        """Serialise for images.yaml; the registry is omitted for Docker Hub."""
        data: dict = {}
        if self.registry:
            data["registry"] = self.registry
        data["name"] = self.name
        data["digests"] = {"amd64": self.digests.amd64, "arm64": self.digests.arm64}
        return data


@dataclass
class ManifestEntry:
    """One platform-specific manifest from a registry's manifest list."""

    digest: str
    architecture: str
    os: str = ""
    variant: str = ""
    media_type: str = ""
