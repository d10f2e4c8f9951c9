"""
Detail Scraper

Visits every product page listed in a category file and adds the detail
content (images, text sections, HTML) in place.

Features:
- Resume: products that already have detail content are skipped
- Progress is written back to the category file every N products
- Per-product retries; failed products keep an `error` message
- Rate limiting between products and between category files
"""

from __future__ import annotations

import logging
import time
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import requests

from ..common.fetcher import FetchError, PageFetcher
from ..common.json_utils import read_json, write_json
from ..models import ScrapedProduct, SiteConfig, product_from_record, product_to_record
from .parsers import DetailPageParser

logger = logging.getLogger(__name__)


class DetailScraper:
    """Detail page scraping with progress saving and resume capability."""

    def __init__(
        self,
        site: SiteConfig,
        fetcher: Optional[PageFetcher] = None,
        attempts: int = 3,
        retry_delay: float = 2.0,
        product_delay: float = 1.0,
        category_delay: float = 2.0,
        save_every: int = 10,
    ):
        """
        Initialize the detail scraper.

        Args:
            site: Site configuration (its `detail` block drives the parser)
            fetcher: HTTP client (a default PageFetcher when omitted)
            attempts: Attempts per product page
            retry_delay: Seconds between attempts on one product
            product_delay: Seconds between products
            category_delay: Seconds between category files
            save_every: Write progress after this many products
        """
        self.site = site
        self.fetcher = fetcher or PageFetcher()
        self.attempts = attempts
        self.retry_delay = retry_delay
        self.product_delay = product_delay
        self.category_delay = category_delay
        self.save_every = save_every

    @classmethod
    def from_settings(cls, site: SiteConfig, settings: Dict[str, Any],
                      fetcher: Optional[PageFetcher] = None) -> "DetailScraper":
        """Create a scraper from the `detail` block of settings.yaml."""
        detail = settings.get("detail", {})
        return cls(
            site,
            fetcher=fetcher,
            attempts=detail.get("attempts", 3),
            retry_delay=detail.get("retry_delay", 2.0),
            product_delay=detail.get("product_delay", 1.0),
            category_delay=detail.get("category_delay", 2.0),
            save_every=detail.get("save_every", 10),
        )

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.fetcher.close()

    def scrape_product(self, product: ScrapedProduct) -> bool:
        """
        Fetch and parse one product page, updating the product in place.

        On final failure the detail fields are cleared and `error` is set;
        the product itself is kept.

        Returns:
            True on success
        """
        last_error = ""

        for attempt in range(1, self.attempts + 1):
            try:
                soup = self.fetcher.get_soup(product.product_url)
                fields = DetailPageParser(soup, product.product_url, self.site.detail).parse()
            except (FetchError, requests.RequestException) as e:
                last_error = str(e)
                logger.warning("Attempt %d/%d failed for %s: %s",
                               attempt, self.attempts, product.product_url, last_error)
                if attempt < self.attempts:
                    time.sleep(self.retry_delay)
                continue

            product.detail_images = fields['detail_images']
            product.gallery_images = fields['gallery_images']
            product.thumbnail_images = fields['thumbnail_images']
            product.detail_sections = fields['detail_sections']
            product.detail_html = fields['detail_html']
            if fields['main_image'] and not product.image_url:
                product.image_url = fields['main_image']
            product.error = ""
            product.scraped_at = datetime.now().isoformat()
            return True

        product.detail_images = []
        product.gallery_images = []
        product.thumbnail_images = []
        product.detail_sections = []
        product.detail_html = ""
        product.error = last_error or "detail page could not be fetched"
        product.scraped_at = datetime.now().isoformat()
        return False

    def scrape_file(
        self,
        path: Union[str, Path],
        limit: int = 0,
        resume: bool = True,
        continue_on_error: bool = True,
    ) -> Dict[str, int]:
        """
        Scrape detail pages for every product in a category file.

        Args:
            path: Category JSON file, rewritten in place
            limit: Maximum products to scrape (0 = no limit)
            resume: Skip products that already have detail content
            continue_on_error: Keep going after a product fails

        Returns:
            Dict with scraped, errors, skipped and total counts
        """
        path = Path(path)
        items: List[Union[ScrapedProduct, dict]] = []
        for record in read_json(path):
            try:
                items.append(product_from_record(record))
            except (ValueError, AttributeError) as e:
                logger.warning("Keeping unreadable record in %s as-is: %s", path.name, e)
                items.append(record)

        products = [item for item in items if isinstance(item, ScrapedProduct)]
        pending = [p for p in products if not (resume and p.has_details())]
        skipped = len(products) - len(pending)
        if limit > 0:
            pending = pending[:limit]

        logger.info("%s: %d products, %d to scrape, %d already done",
                    path.name, len(products), len(pending), skipped)

        scraped = 0
        errors = 0
        for i, product in enumerate(pending, 1):
            logger.info("[%d/%d] %s", i, len(pending), product.title[:50])
            try:
                if self.scrape_product(product):
                    scraped += 1
                else:
                    errors += 1
            except (ValueError, KeyError, TypeError, AttributeError) as e:
                errors += 1
                product.error = f"{type(e).__name__}: {str(e)[:100]}"
                logger.error("Error parsing %s: %s", product.product_url, product.error)
                if not continue_on_error:
                    logger.error("Stopping due to error (use --continue-on-error to ignore)")
                    break

            if i % self.save_every == 0:
                self._save(path, items)

            if i < len(pending) and self.product_delay:
                time.sleep(self.product_delay)

        self._save(path, items)

        return {
            'scraped': scraped,
            'errors': errors,
            'skipped': skipped,
            'total': len(products),
        }

    def scrape_directory(
        self,
        brand_dir: Union[str, Path],
        limit: int = 0,
        resume: bool = True,
        continue_on_error: bool = True,
    ) -> Dict[str, Any]:
        """
        Scrape every `<source>-*.json` category file in a brand folder.

        Returns:
            Summed counts plus per-file results under `files`
        """
        files = [
            f for f in sorted(Path(brand_dir).glob(f"{self.site.source}-*.json"))
            if '.backup.' not in f.name
        ]
        totals: Dict[str, Any] = {'scraped': 0, 'errors': 0, 'skipped': 0, 'total': 0, 'files': {}}

        for i, file_path in enumerate(files, 1):
            logger.info("Category file %d/%d: %s", i, len(files), file_path.name)
            result = self.scrape_file(file_path, limit=limit, resume=resume,
                                      continue_on_error=continue_on_error)
            totals['files'][file_path.name] = result
            for key in ('scraped', 'errors', 'skipped', 'total'):
                totals[key] += result[key]

            if i < len(files) and self.category_delay:
                time.sleep(self.category_delay)

        return totals

    def _save(self, path: Path, items: List[Union[ScrapedProduct, dict]]) -> None:
        write_json(path, [
            product_to_record(item) if isinstance(item, ScrapedProduct) else item
            for item in items
        ])

    @staticmethod
    def print_summary(stats: Dict[str, Any]) -> None:
        """Print scrape summary."""
        print("\n" + "=" * 60)
        print("Detail Scrape Summary")
        print("=" * 60)
        for name, result in stats.get('files', {}).items():
            print(f"  {name:<40} {result['scraped']:>4} ok  {result['errors']:>4} failed")
        print(f"\n  Products total:     {stats['total']}")
        print(f"  Scraped:            {stats['scraped']}")
        print(f"  Failed:             {stats['errors']}")
        print(f"  Skipped (done):     {stats['skipped']}")
        print("=" * 60)
