#!/usr/bin/env python3
"""
Detail Page Scrape Script

Adds detail images, text sections and detail HTML to the products in a
site's category files. Progress is saved into the files themselves, so
an interrupted run continues where it stopped.

Usage:
    python3 scripts/scrape_details.py --site alloso
    python3 scripts/scrape_details.py --site iloom --dir data/일룸 --limit 20
    python3 scripts/scrape_details.py --site wooami --file data/우아미/wooami-침대.json
    python3 scripts/scrape_details.py --site emons --no-resume
"""

import argparse
import logging
import os
import sys

# Add project root to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from lunus.common import PageFetcher, load_env, load_settings, load_site
from lunus.common.log_config import setup_logging
from lunus.extraction import DetailScraper

logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(
        description="Scrape product detail pages into category JSON files"
    )
    parser.add_argument("--site", "-s", required=True, help="Site key (e.g. alloso)")
    parser.add_argument(
        "--dir", "-d",
        help="Brand folder with category files (default: data/<brand folder>)"
    )
    parser.add_argument("--file", "-f", help="Scrape a single category file")
    parser.add_argument(
        "--limit", "-l",
        type=int,
        default=0,
        help="Limit products per category file (0 = no limit)"
    )
    parser.add_argument(
        "--no-resume",
        action="store_true",
        help="Re-scrape products that already have detail content"
    )
    parser.add_argument(
        "--stop-on-error",
        action="store_true",
        help="Stop if any product fails (default: continue on error)"
    )
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
        site = load_site(args.site)
        settings = load_settings()
    except (ValueError, FileNotFoundError) as e:
        logger.error("%s", e)
        sys.exit(1)

    data_dir = settings.get("paths", {}).get("data_dir", "data")
    brand_dir = args.dir or os.path.join(data_dir, site.folder)

    with DetailScraper.from_settings(site, settings, fetcher=PageFetcher.from_settings(settings)) as scraper:
        if args.file:
            if not os.path.exists(args.file):
                print(f"File not found: {args.file}")
                sys.exit(1)
            result = scraper.scrape_file(
                args.file, limit=args.limit, resume=not args.no_resume,
                continue_on_error=not args.stop_on_error,
            )
            stats = dict(result, files={os.path.basename(args.file): result})
        else:
            if not os.path.isdir(brand_dir):
                print(f"Brand folder not found: {brand_dir}")
                sys.exit(1)
            stats = scraper.scrape_directory(
                brand_dir, limit=args.limit, resume=not args.no_resume,
                continue_on_error=not args.stop_on_error,
            )

    DetailScraper.print_summary(stats)

    if stats["scraped"] == 0 and stats["errors"]:
        logger.error("Every scraped product failed")
        sys.exit(1)


if __name__ == "__main__":
    main()
