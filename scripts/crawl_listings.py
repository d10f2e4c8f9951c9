#!/usr/bin/env python3
"""
Category Listing Crawl Script

Crawls the category listing pages of one or more brand sites and writes
one JSON file per category into the data directory.

Usage:
    python3 scripts/crawl_listings.py --site alloso
    python3 scripts/crawl_listings.py --site iloom --category 조명 --max-pages 3
    python3 scripts/crawl_listings.py --all --output-dir data
"""

import argparse
import logging
import os
import sys

# Add project root to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from lunus.common import FetchError, PageFetcher, load_env, load_settings, load_site, load_sites
from lunus.common.log_config import setup_logging
from lunus.discovery import ListingCrawler

logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(
        description="Crawl brand category listings to per-category JSON files"
    )
    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument("--site", "-s", help="Site key (e.g. alloso, hanssem)")
    target.add_argument("--all", action="store_true", help="Crawl every configured site")
    parser.add_argument(
        "--output-dir", "-o",
        default="data",
        help="Directory for <source>-<category>.json files (default: data)"
    )
    parser.add_argument(
        "--category", "-c",
        action="append",
        help="Only crawl this category key (repeatable)"
    )
    parser.add_argument("--max-pages", type=int, help="Override pages per category")
    parser.add_argument("--limit", type=int, help="Override products per category")
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose (debug) logging"
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress info messages, show only warnings and errors"
    )

    args = parser.parse_args()
    setup_logging(verbose=args.verbose, quiet=args.quiet)
    load_env()

    try:
        sites = list(load_sites().values()) if args.all else [load_site(args.site)]
        settings = load_settings()
    except (ValueError, FileNotFoundError) as e:
        logger.error("%s", e)
        sys.exit(1)

    results = {}
    with PageFetcher.from_settings(settings) as fetcher:
        for site in sites:
            if args.max_pages:
                site.pagination["max_pages"] = args.max_pages
            if args.limit:
                site.pagination["per_category_limit"] = args.limit

            categories = site.categories
            if args.category:
                categories = [c for c in categories if c.key in args.category]
                if not categories:
                    logger.error("No matching categories for %s. Available: %s",
                                 site.source, ", ".join(c.key for c in site.categories))
                    sys.exit(1)

            crawler = ListingCrawler(
                site,
                fetcher=fetcher,
                category_delay=settings.get("detail", {}).get("category_delay", 2.0),
            )
            try:
                results[site.source] = crawler.crawl_all(args.output_dir, categories)
            except FetchError as e:
                logger.error("Crawl of %s aborted: %s", site.source, e)
                results[site.source] = {}

    print("\n" + "=" * 60)
    print("Listing Crawl Summary")
    print("=" * 60)
    grand_total = 0
    for source, counts in results.items():
        total = sum(counts.values())
        grand_total += total
        print(f"\n  {source}: {total} products")
        for key, count in counts.items():
            print(f"     {key:<30} {count:>5}")
    print(f"\n  Total: {grand_total} products in {args.output_dir}/")
    print("=" * 60)

    if grand_total == 0:
        sys.exit(1)


if __name__ == "__main__":
    main()
