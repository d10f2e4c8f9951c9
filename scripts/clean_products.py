#!/usr/bin/env python3
"""
Product Cleaning Script

Removes non-product records (category pages, door parts, broken links,
unpriced items) from the unified product file and fixes Iloom lighting
prices. A timestamped backup is written first.

Usage:
    python3 scripts/clean_products.py
    python3 scripts/clean_products.py --input data/premium-brands-unified.json --no-backup
    python3 scripts/clean_products.py --output data/cleaned.json
"""

import argparse
import logging
import os
import sys

# Add project root to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from lunus.common import load_settings
from lunus.common.log_config import setup_logging
from lunus.normalization import ProductCleaner

logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(description="Clean the unified product file")
    parser.add_argument("--input", "-i", help="Unified product file (default: from settings)")
    parser.add_argument("--output", "-o", help="Output file (default: overwrite input)")
    parser.add_argument("--no-backup", action="store_true", help="Skip the backup copy")
    parser.add_argument("--verbose", action="store_true")
    parser.add_argument("--quiet", action="store_true")

    args = parser.parse_args()
    setup_logging(verbose=args.verbose, quiet=args.quiet)

    settings = load_settings()
    path = args.input or settings.get("paths", {}).get("unified_file",
                                                       "data/premium-brands-unified.json")
    if not os.path.exists(path):
        print(f"File not found: {path}")
        sys.exit(1)

    cleaner = ProductCleaner.from_settings(settings)
    report = cleaner.clean_file(path, output=args.output, backup=not args.no_backup)
    cleaner.print_report(report)


if __name__ == "__main__":
    main()
