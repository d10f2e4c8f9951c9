"""
Product extraction for brand sites.

Modules:
    detail_scraper - DetailScraper, detail pages with progress saving
    validator - ProductValidator for scraped records
    parsers - Listing and detail page parsers
"""

from typing import Optional

from ..common.config_loader import load_site
from ..common.fetcher import PageFetcher
from .detail_scraper import DetailScraper
from .validator import ProductValidator
from .parsers import (
    AnchorListingParser,
    DetailPageParser,
    JsonListingParser,
    SelectorListingParser,
    get_listing_parser,
)


def get_scraper_for_site(site: str, fetcher: Optional[PageFetcher] = None) -> DetailScraper:
    """
    Create a detail scraper for a configured site.

    Raises:
        ValueError: If site is not supported
    """
    return DetailScraper(load_site(site), fetcher=fetcher)


__all__ = [
    # Detail scraping
    'DetailScraper',
    'get_scraper_for_site',
    # Validator
    'ProductValidator',
    # Parsers
    'SelectorListingParser',
    'JsonListingParser',
    'AnchorListingParser',
    'DetailPageParser',
    'get_listing_parser',
]
