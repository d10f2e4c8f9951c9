"""
Listing discovery for brand sites.

Modules:
    listing_crawler - ListingCrawler, category pagination to per-category JSON
"""

from typing import Optional

from ..common.config_loader import get_supported_sites, load_site
from ..common.fetcher import PageFetcher
from .listing_crawler import ListingCrawler


def get_crawler_for_site(site: str, fetcher: Optional[PageFetcher] = None) -> ListingCrawler:
    """
    Create a listing crawler for a configured site.

    Args:
        site: Site key (e.g. "iloom")
        fetcher: Optional shared HTTP client

    Returns:
        ListingCrawler

    Raises:
        ValueError: If site is not supported
    """
    return ListingCrawler(load_site(site), fetcher=fetcher)


__all__ = [
    'ListingCrawler',
    'get_crawler_for_site',
    'get_supported_sites',
]
