"""
Brand Normalizer

Reads every brand folder and produces one unified product list with
source, brand and a unified category on every product.
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Mapping, Tuple, Union

from ..common.constants import DEFAULT_CATEGORY, MERGED_PRODUCTS_FILE
from ..common.json_utils import read_json, write_json
from ..models import ScrapedProduct, SiteConfig, product_from_record, product_to_record

logger = logging.getLogger(__name__)


class BrandNormalizer:
    """
    Builds the unified data set from per-brand category files.

    Usage:
        normalizer = BrandNormalizer("data")
        products, stats = normalizer.normalize_all(load_sites())
        normalizer.write_unified(products, "data/premium-brands-unified.json")
    """

    def __init__(self, data_dir: Union[str, Path] = "data"):
        self.data_dir = Path(data_dir)
        self.skipped_records = 0

    @staticmethod
    def category_from_filename(filename: str, site: SiteConfig) -> str:
        """
        Category key encoded in a file name.

        "alloso-소파.json" -> "소파"
        """
        name = Path(filename).name
        if name.endswith('.json'):
            name = name[:-len('.json')]
        for prefix in (site.folder, site.source):
            if prefix and name.startswith(prefix):
                name = name[len(prefix):]
        return name.lstrip('-').strip()

    @staticmethod
    def map_category(
        file_category: str,
        product_category: str,
        mapping: Mapping[str, str],
    ) -> str:
        """
        Resolve the unified category.

        Order: mapping of the file category, mapping of the product's own
        category, the product's own category, the file category, then the
        default category.
        """
        if file_category and file_category in mapping:
            return mapping[file_category]
        if product_category and product_category in mapping:
            return mapping[product_category]
        if product_category:
            return product_category
        if file_category:
            return file_category
        return DEFAULT_CATEGORY

    def normalize_product(
        self,
        record: Dict[str, Any],
        site: SiteConfig,
        file_category: str,
    ) -> ScrapedProduct:
        """
        Convert one record to a normalized product.

        Raises:
            ValueError: If the record has no title or URL
        """
        product = product_from_record(record)
        product.category = self.map_category(file_category, product.category, site.category_mapping)
        product.source = site.source
        product.brand = site.brand
        if not product.scraped_at:
            product.scraped_at = datetime.now().isoformat()
        return product

    def process_brand(self, site: SiteConfig) -> List[ScrapedProduct]:
        """
        Normalize every category file in a brand folder.

        products.json (the merged copy) and backups are ignored.
        """
        folder = self.data_dir / site.folder
        if not folder.is_dir():
            logger.warning("Brand folder not found: %s", folder)
            return []

        products: List[ScrapedProduct] = []
        for file_path in sorted(folder.glob("*.json")):
            if file_path.name == MERGED_PRODUCTS_FILE or '.backup.' in file_path.name:
                continue

            records = read_json(file_path)
            if not isinstance(records, list):
                logger.warning("%s does not hold a JSON array, skipped", file_path.name)
                continue

            file_category = self.category_from_filename(file_path.name, site)
            count = 0
            for record in records:
                try:
                    products.append(self.normalize_product(record, site, file_category))
                    count += 1
                except (ValueError, AttributeError) as e:
                    self.skipped_records += 1
                    logger.debug("Skipping record in %s: %s", file_path.name, e)

            logger.info("  %s: %d products (%s)", file_path.name, count, file_category)

        return products

    def normalize_all(
        self,
        sites: Mapping[str, SiteConfig],
    ) -> Tuple[List[ScrapedProduct], Dict[str, int]]:
        """
        Normalize all brands.

        A brand that fails to load is logged and counted as 0.

        Returns:
            (products, brand name -> product count)
        """
        all_products: List[ScrapedProduct] = []
        stats: Dict[str, int] = {}

        for source, site in sites.items():
            logger.info("Processing %s (%s)", site.brand, source)
            try:
                products = self.process_brand(site)
            except (OSError, json.JSONDecodeError, UnicodeDecodeError) as e:
                logger.error("Failed to process %s: %s", site.brand, e)
                products = []
            stats[site.brand] = len(products)
            all_products.extend(products)

        return all_products, stats

    @staticmethod
    def write_unified(products: List[ScrapedProduct], path: Union[str, Path]) -> None:
        """Write the unified product list."""
        write_json(path, [product_to_record(p) for p in products])
        logger.info("Wrote %d products to %s", len(products), path)

    @staticmethod
    def print_summary(products: List[ScrapedProduct], stats: Dict[str, int]) -> None:
        """Print brand and category breakdown."""
        categories: Dict[str, int] = {}
        for product in products:
            categories[product.category] = categories.get(product.category, 0) + 1

        print("\n" + "=" * 60)
        print("Normalization Summary")
        print("=" * 60)
        print(f"  Total products: {len(products)}")
        print("\n  By brand:")
        for brand, count in sorted(stats.items(), key=lambda x: -x[1]):
            print(f"    {brand:<20} {count:>6}")
        print("\n  By category:")
        for category, count in sorted(categories.items(), key=lambda x: -x[1]):
            print(f"    {category:<20} {count:>6}")
        print("=" * 60)
