"""Splitting raw image references into registry, name and tag."""

from ..models import Image

DEFAULT_REGISTRY = "docker.io"
LEGACY_REGISTRIES = {"index.docker.io", "registry-1.docker.io"}


def _is_registry_host(component: str) -> bool:
    return "." in component or ":" in component or component == "localhost"


def parse_image_reference(raw: str) -> Image:
    """
    Parse a raw ``registry/name:tag`` string, best effort.

    Examples:
        quay.io/argoproj/argoexec:v3.0.0 -> registry quay.io, name argoproj/argoexec
        nginx:1.25 -> no registry, name library/nginx
        bitnami/redis:7.0 -> no registry, name bitnami/redis

    The Docker Hub registry is left empty so it is omitted from images.yaml.
    """
    remainder = raw.strip().strip("'")

    # image@sha256:... carries no tag
    if "@" in remainder:
        remainder = remainder.split("@", 1)[0]

    tag = ""
    head, sep, tail = remainder.rpartition(":")
    if sep and "/" not in tail:
        remainder, tag = head, tail

    registry = DEFAULT_REGISTRY
    parts = remainder.split("/")
    if len(parts) > 1 and _is_registry_host(parts[0]):
        registry = parts[0]
        parts = parts[1:]
    if registry in LEGACY_REGISTRIES:
        registry = DEFAULT_REGISTRY

    if registry == DEFAULT_REGISTRY and len(parts) == 1:
        parts = ["library", *parts]

    return Image(
        raw=raw,
        name="/".join(parts),
        registry="" if registry == DEFAULT_REGISTRY else registry,
        tag=tag,
    )


def parse_image_references(raws: list[str]) -> list[Image]:
    return [parse_image_reference(raw) for raw in raws]
