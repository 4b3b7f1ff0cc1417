"""helm-updater: Helm chart version bumps and multi-arch image digest pinning."""

__version__ = "0.1.0"
