"""Helm chart version checking and image scraping."""

from .checker import check_charts
from .client import HelmClient
from .scraper import extract_images, scrape_images

__all__ = ["HelmClient", "check_charts", "extract_images", "scrape_images"]
