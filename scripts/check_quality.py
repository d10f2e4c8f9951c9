#!/usr/bin/env python3
"""
Data Quality Check Script

Validates every product in the unified file (or a brand folder) and
prints a quality report with per-brand counts, field issue rates,
duplicate URLs, price range and detail coverage.

Usage:
    python3 scripts/check_quality.py
    python3 scripts/check_quality.py --input data/알로소/products.json
    python3 scripts/check_quality.py --threshold 10 --show-errors 20

Exit codes:
    0 = PASS (error rate <= threshold)
    1 = FAIL
"""

import argparse
import logging
import os
import sys

# Add project root to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from lunus.common import load_settings, read_json
from lunus.common.constants import PRICE_MAX_KRW, PRICE_MIN_KRW
from lunus.common.log_config import setup_logging
from lunus.extraction import ProductValidator
from lunus.models import product_from_record
from lunus.validation import CrawlQualityTracker

logger = logging.getLogger(__name__)


def main() -> None:
    parser = argparse.ArgumentParser(description="Check quality of crawled product data")
    parser.add_argument("--input", "-i", help="Product JSON file (default: unified file)")
    parser.add_argument(
        "--threshold",
        type=float,
        default=5.0,
        help="Error rate (%%) above which the check fails (default: 5)"
    )
    parser.add_argument(
        "--show-errors",
        type=int,
        default=0,
        metavar="N",
        help="Print the first N products with errors"
    )
    parser.add_argument("--verbose", action="store_true")
    parser.add_argument("--quiet", action="store_true")
    args = parser.parse_args()

    setup_logging(verbose=args.verbose, quiet=args.quiet)

    settings = load_settings()
    path = args.input or settings.get("paths", {}).get("unified_file",
                                                       "data/premium-brands-unified.json")
    if not os.path.exists(path):
        print(f"ERROR: file not found: {path}")
        sys.exit(1)

    records = read_json(path)
    print(f"\nValidating: {path}")
    print(f"Records: {len(records)}")

    price_range = settings.get("price", {})
    min_price = price_range.get("min", PRICE_MIN_KRW)
    max_price = price_range.get("max", PRICE_MAX_KRW)
    tracker = CrawlQualityTracker()
    unreadable = 0
    shown = 0

    for n, record in enumerate(records, 1):
        try:
            product = product_from_record(record)
        except (ValueError, AttributeError):
            unreadable += 1
            continue

        result = ProductValidator(
            product, min_reasonable_price=min_price, max_reasonable_price=max_price,
        ).validate()
        tracker.record(product, result)

        if result["errors"] and shown < args.show_errors:
            shown += 1
            print(f"  ❌ {product.title[:50]} ({product.product_url[:60]})")
            for issue in result["errors"]:
                print(f"       {issue}")

        if n % 500 == 0:
            tracker.print_periodic_summary(n)

    tracker.print_final_report()
    if unreadable:
        print(f"  Unreadable records (no title/URL): {unreadable}")

    sys.exit(1 if tracker.has_critical_failures(args.threshold) else 0)


if __name__ == "__main__":
    main()
