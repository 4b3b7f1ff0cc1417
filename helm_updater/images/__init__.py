"""Image reference parsing, registry login and digest resolution."""

from .digests import DigestResolver
from .reference import parse_image_reference, parse_image_references
from .registry import LoginStrategy, RegistryAuthenticator, classify_registry

__all__ = [
    "DigestResolver",
    "LoginStrategy",
    "RegistryAuthenticator",
    "classify_registry",
    "parse_image_reference",
    "parse_image_references",
]
