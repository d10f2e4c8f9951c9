"""
Listing Crawler

Walks the category listing pages of one brand site and writes one JSON
file per category (`<source>-<category>.json`).
"""

import logging
import time
from pathlib import Path
from typing import Dict, List, Optional
from urllib.parse import parse_qs, urlparse

import requests

from ..common.fetcher import FetchError, PageFetcher
from ..common.json_utils import write_json
from ..common.text_utils import safe_filename, with_query_param
from ..extraction.parsers import (
    AnchorListingParser,
    JsonListingParser,
    SelectorListingParser,
    extract_embedded_json,
)
from ..models import CategoryConfig, ScrapedProduct, SiteConfig, product_to_record

logger = logging.getLogger(__name__)


class ListingCrawler:
    """
    Crawls category listings for one site.

    Usage:
        with ListingCrawler(load_site("alloso")) as crawler:
            counts = crawler.crawl_all("data")
    """

    def __init__(
        self,
        site: SiteConfig,
        fetcher: Optional[PageFetcher] = None,
        category_delay: float = 1.0,
    ):
        """
        Initialize the crawler.

        Args:
            site: Site configuration
            fetcher: HTTP client (a default PageFetcher when omitted)
            category_delay: Seconds to wait between categories
        """
        self.site = site
        self.fetcher = fetcher or PageFetcher()
        self.category_delay = category_delay

        self.pages_fetched = 0
        self.pages_failed = 0

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.fetcher.close()

    def build_page_url(self, category_url: str, page: int) -> str:
        """
        URL of a listing page.

        Page 1 is the category URL itself unless it already carries the
        page parameter.
        """
        param = self.site.page_param
        if page == 1 and param not in parse_qs(urlparse(category_url).query):
            return category_url
        return with_query_param(category_url, param, page)

    def fetch_page_products(self, url: str) -> List[ScrapedProduct]:
        """
        Fetch one listing page and parse it with the site's parser.

        Raises:
            FetchError: When the page cannot be fetched
            ValueError: When a JSON endpoint returns a non-JSON body
        """
        listing = self.site.listing
        base_url = self.site.base_url

        if self.site.parser == 'json':
            if self.site.pagination.get('mode') == 'json':
                body = self.fetcher.get_json(url)
                return self._json_parser(body).parse()

            soup = self.fetcher.get_soup(url)
            body = extract_embedded_json(soup, listing.get('embedded_json', 'script#__NEXT_DATA__'))
            products = self._json_parser(body).parse() if body is not None else []
            if not products and listing.get('card'):
                logger.debug("No embedded JSON products on %s, using card selectors", url)
                products = SelectorListingParser(soup, base_url, listing).parse()
            return products

        soup = self.fetcher.get_soup(url)
        if self.site.parser == 'anchor':
            return AnchorListingParser(soup, base_url, listing).parse()
        return SelectorListingParser(soup, base_url, listing).parse()

    def _json_parser(self, body) -> JsonListingParser:
        return JsonListingParser(
            body,
            self.site.base_url,
            image_base=self.site.listing.get('image_base', ''),
            url_pattern=self.site.listing.get('url_pattern', ''),
        )

    def crawl_category(self, category: CategoryConfig) -> List[ScrapedProduct]:
        """
        Crawl all pages of one category.

        Stops at max_pages or per_category_limit; with stop_when_empty,
        also stops at the first page that adds no new product. A page that
        cannot be fetched or parsed ends the category, keeping what was
        collected.

        Returns:
            Unique products tagged with source and category
        """
        limit = self.site.per_category_limit
        products: List[ScrapedProduct] = []
        seen_urls = set()
        seen_keys = set()

        for page in range(1, self.site.max_pages + 1):
            url = self.build_page_url(category.url, page)
            try:
                page_products = self.fetch_page_products(url)
                self.pages_fetched += 1
            except (FetchError, requests.RequestException, ValueError, KeyError, TypeError) as e:
                self.pages_failed += 1
                logger.error("[%s/%s] page %d failed: %s", self.site.source, category.key, page, e)
                break

            added = 0
            for product in page_products:
                key = (product.title, product.image_url)
                if product.product_url in seen_urls or (product.image_url and key in seen_keys):
                    continue
                seen_urls.add(product.product_url)
                seen_keys.add(key)

                product.source = self.site.source
                product.category = category.key
                products.append(product)
                added += 1
                if len(products) >= limit:
                    break

            logger.info("[%s/%s] page %d: +%d (total %d)",
                        self.site.source, category.key, page, added, len(products))

            if len(products) >= limit:
                logger.info("[%s/%s] reached limit of %d", self.site.source, category.key, limit)
                break
            if added == 0 and self.site.stop_when_empty:
                break

        return products

    def crawl_all(
        self,
        output_dir: str | Path,
        categories: Optional[List[CategoryConfig]] = None,
    ) -> Dict[str, int]:
        """
        Crawl every category and write one JSON file per category.

        Args:
            output_dir: Directory for <source>-<category>.json files
            categories: Subset to crawl (default: all configured)

        Returns:
            Category key -> number of products written
        """
        output_dir = Path(output_dir)
        categories = categories if categories is not None else self.site.categories
        counts: Dict[str, int] = {}

        for i, category in enumerate(categories, 1):
            logger.info("[%s] category %d/%d: %s", self.site.source, i, len(categories), category.key)
            products = self.crawl_category(category)
            counts[category.key] = len(products)

            if products:
                path = output_dir / f"{self.site.source}-{safe_filename(category.key)}.json"
                write_json(path, [product_to_record(p) for p in products])
                logger.info("Saved %d products to %s", len(products), path)
            else:
                logger.warning("[%s/%s] no products found, nothing written",
                               self.site.source, category.key)

            if i < len(categories) and self.category_delay:
                time.sleep(self.category_delay)

        return counts

    def get_stats(self) -> dict:
        """Return crawl statistics."""
        return {
            'pages_fetched': self.pages_fetched,
            'pages_failed': self.pages_failed,
        }
