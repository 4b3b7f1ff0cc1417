"""Reading and writing charts.yaml and images.yaml."""

import logging
from pathlib import Path

import yaml

from .errors import ManifestError
from .models import Chart, Image
from .runner import log_multiline

logger = logging.getLogger(__name__)

CHART_FIELDS = ("name", "repo", "url", "version")


def parse_charts(content: str) -> list[Chart]:
    """Parse the chart list.

    Every scalar is loaded as a string so versions such as ``1.10`` keep their
    textual form instead of becoming floats.
    """
    try:
        data = yaml.load(content, Loader=yaml.BaseLoader)
    except yaml.YAMLError as e:
        raise ManifestError(f"Invalid chart YAML: {e}") from e

    if data is None or data == "":
        return []
    if not isinstance(data, list):
        raise ManifestError("Chart file must contain a list of charts")

    charts = []
    for index, entry in enumerate(data):
        if not isinstance(entry, dict):
            raise ManifestError(f"Chart entry {index} is not a mapping")
        missing = [f for f in CHART_FIELDS if not entry.get(f)]
        if missing:
            raise ManifestError(
                f"Chart entry {index} is missing {', '.join(missing)}"
            )
        unknown = sorted(set(entry) - set(CHART_FIELDS))
        if unknown:
            raise ManifestError(
                f"Chart entry {entry['name']} has unknown fields: {', '.join(unknown)}"
            )
        charts.append(Chart(**{f: entry[f] for f in CHART_FIELDS}))
    return charts


def load_charts(path: Path) -> list[Chart]:
    """Read and parse the chart file."""
    logger.info(f"Opening file from {path}...")
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ManifestError(f"Could not read {path}: {e}") from e

    log_multiline(content)
    return parse_charts(content)


def dump_charts(charts: list[Chart]) -> str:
    return yaml.safe_dump(
        [c.to_dict() for c in charts],
        sort_keys=False,
        default_flow_style=False,
    )


def dump_images(images: list[Image]) -> str:
    return yaml.safe_dump(
        [i.to_dict() for i in images],
        sort_keys=False,
        default_flow_style=False,
    )


def _write(path: Path, content: str) -> None:
    try:
        path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise ManifestError(f"Could not write {path}: {e}") from e


def save_charts(path: Path, charts: list[Chart]) -> str:
    """Write the full chart list back to disk and return the YAML written."""
    content = dump_charts(charts)
    _write(path, content)
    logger.info(f"Written new chart version configuration to {path.name}:")
    log_multiline(content)
    return content


def save_images(path: Path, images: list[Image]) -> str:
    """Write the image digest manifest and return the YAML written."""
    content = dump_images(images)
    _write(path, content)
    logger.info(f"Written image digests to {path.name}:")
    log_multiline(content)
    return content
