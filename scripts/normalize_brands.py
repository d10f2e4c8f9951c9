#!/usr/bin/env python3
"""
Brand Normalization Script

Builds the unified product file from all brand folders, mapping each
site's categories to the unified category set.

Usage:
    python3 scripts/normalize_brands.py
    python3 scripts/normalize_brands.py --output data/premium-brands-unified.json
    python3 scripts/normalize_brands.py --site alloso --site iloom
"""

import argparse
import logging
import os
import sys

# Add project root to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from lunus.common import load_settings, load_sites
from lunus.common.log_config import setup_logging
from lunus.normalization import BrandNormalizer

logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(
        description="Normalize brand data into one unified product file"
    )
    parser.add_argument(
        "--site", "-s",
        action="append",
        help="Only include this site key (repeatable, default: all)"
    )
    parser.add_argument("--data-dir", help="Data directory (default: from settings)")
    parser.add_argument("--output", "-o", help="Unified output file (default: from settings)")
    parser.add_argument("--verbose", action="store_true")
    parser.add_argument("--quiet", action="store_true")

    args = parser.parse_args()
    setup_logging(verbose=args.verbose, quiet=args.quiet)

    try:
        sites = load_sites()
        settings = load_settings()
    except FileNotFoundError as e:
        logger.error("%s", e)
        sys.exit(1)

    if args.site:
        unknown = [s for s in args.site if s not in sites]
        if unknown:
            logger.error("Unsupported site: %s. Supported: %s",
                         ", ".join(unknown), ", ".join(sites.keys()))
            sys.exit(1)
        sites = {key: site for key, site in sites.items() if key in args.site}

    paths = settings.get("paths", {})
    normalizer = BrandNormalizer(args.data_dir or paths.get("data_dir", "data"))
    products, stats = normalizer.normalize_all(sites)

    if not products:
        logger.error("No products found in any brand folder")
        sys.exit(1)

    output = args.output or paths.get("unified_file", "data/premium-brands-unified.json")
    normalizer.write_unified(products, output)
    normalizer.print_summary(products, stats)
    if normalizer.skipped_records:
        print(f"  Skipped records without title/URL: {normalizer.skipped_records}")
    print(f"  Output: {output}")


if __name__ == "__main__":
    main()
