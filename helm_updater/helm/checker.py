"""Checks charts for newer upstream versions."""

import logging

from ..errors import VersionError
from ..models import Chart
from ..versions import is_newer
from .client import HelmClient

logger = logging.getLogger(__name__)


def check_charts(helm: HelmClient, charts: list[Chart]) -> list[Chart]:
    """
    Bump every chart whose repository publishes a newer version.

    Charts are updated in place: ``version`` takes the latest version text and
    ``old_version`` the previous one. Charts that are already current are left
    untouched.

    Args:
        helm: Helm client used to query repositories.
        charts: Chart entries from charts.yaml.

    Returns:
        Only the charts that changed, in file order.

    Raises:
        VersionError: A current or latest version is not a semantic version.
    """
    updated = []

    for chart in charts:
        latest = helm.latest_version(chart)

        try:
            newer = is_newer(chart.version, latest)
        except VersionError as e:
            raise VersionError(f"{chart.name}: {e}") from e

        if newer:
            logger.info(f"Found newer version: {latest}")
            chart.old_version = chart.version
            chart.version = latest
            updated.append(chart)
        else:
            logger.info(f"Current version {chart.version} latest")

    return updated
