"""Image discovery in rendered chart templates.

This is a best-effort text scrape, not a Kubernetes-aware scanner. Any token
shaped like ``something:something`` is captured, so non-image values such as
``http://host:8080`` fragments can show up too. Images passed to operators in
``args`` lists are found the same way as ``image:`` fields.

A capture is the longest run of reference characters that holds a ``:``
followed by tag characters, cut at the end of the tag after the last such
``:``. Runs are found with one regex and cut with string searches, so long
tokens such as checksums stay linear.
"""

import logging
import re
from pathlib import Path

from ..models import Chart
from .client import HelmClient

logger = logging.getLogger(__name__)

REFERENCE_RUN = re.compile(r"[a-zA-Z\-./_\\:'\d]+")
TAG_CHARS = frozenset("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789-.'")


def unique(items: list[str]) -> list[str]:
    """Drop duplicate strings, keeping first-seen order."""
    return list(dict.fromkeys(items))


def image_in_run(run: str) -> str | None:
    """Cut a run of reference characters down to its image token, if any."""
    colon = len(run)
    while True:
        # The name part before the colon must not be empty
        colon = run.rfind(":", 1, colon)
        if colon == -1:
            return None
        if colon + 1 < len(run) and run[colon + 1] in TAG_CHARS:
            break

    end = colon + 1
    while end < len(run) and run[end] in TAG_CHARS:
        end += 1
    return run[:end]


def extract_images(rendered: str) -> list[str]:
    """Return every raw image-shaped token in rendered template text."""
    images = []
    for match in REFERENCE_RUN.finditer(rendered):
        image = image_in_run(match.group(0))
        if image is not None:
            images.append(image)
    return images


def values_file_for(chart: Chart, values_dir: Path) -> Path | None:
    """Per-chart values override, if one exists."""
    path = values_dir / f"{chart.name}.yaml"
    return path if path.exists() else None


def scrape_images(
    helm: HelmClient,
    charts: list[Chart],
    values_dir: Path,
    cwd: Path | None = None,
) -> list[str]:
    """Render every chart and collect the deduplicated raw image references."""
    all_images: list[str] = []

    for chart in charts:
        rendered = helm.template(chart, values_file_for(chart, values_dir), cwd=cwd)
        images = extract_images(rendered)
        logger.info(f"Found {len(images)} image references in {chart.name}")
        all_images.extend(images)

    return unique(all_images)
