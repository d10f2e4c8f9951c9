#!/usr/bin/env python3
"""
Product Vectorization Script

Uploads the unified product file to the Supabase products table and
stores a CLIP image embedding for every product.

Steps:
    1. Upsert all products (batches of 100, keyed by product URL)
    2. Embed each product image via Replicate and update image_embedding

Progress is kept in a JSON file; rerunning skips products already done.

Usage:
    python3 scripts/vectorize_products.py
    python3 scripts/vectorize_products.py --upload-only
    python3 scripts/vectorize_products.py --skip-upload --limit 50
    python3 scripts/vectorize_products.py --brand 일룸 --no-resume
"""

import argparse
import logging
import os
import sys

# Add project root to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from lunus.common import load_env, load_settings, read_json
from lunus.common.log_config import setup_logging
from lunus.models import product_from_record
from lunus.vector import ClipEmbedder, ProductVectorizer, SupabaseClient

logger = logging.getLogger(__name__)


def load_products(path: str, brands=None) -> list:
    """Load unified records as products, dropping unusable ones."""
    products = []
    for record in read_json(path):
        try:
            product = product_from_record(record)
        except (ValueError, AttributeError) as e:
            logger.debug("Skipping record: %s", e)
            continue
        if brands and product.brand not in brands:
            continue
        products.append(product)
    return products


def main():
    parser = argparse.ArgumentParser(
        description="Upload products to Supabase and store CLIP image embeddings"
    )
    parser.add_argument("--input", "-i", help="Unified product file (default: from settings)")
    parser.add_argument("--brand", "-b", action="append", help="Only this brand (repeatable)")
    parser.add_argument(
        "--limit", "-l",
        type=int,
        default=0,
        help="Limit number of products to embed (0 = no limit)"
    )
    step = parser.add_mutually_exclusive_group()
    step.add_argument("--upload-only", action="store_true", help="Upload rows, skip embedding")
    step.add_argument("--skip-upload", action="store_true", help="Embed only, rows already uploaded")
    parser.add_argument("--no-resume", action="store_true", help="Ignore the progress file")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose (debug) logging")
    parser.add_argument("--quiet", action="store_true",
                        help="Suppress info messages, show only warnings and errors")

    args = parser.parse_args()
    setup_logging(verbose=args.verbose, quiet=args.quiet)
    load_env()

    settings = load_settings()
    path = args.input or settings.get("paths", {}).get("unified_file",
                                                       "data/premium-brands-unified.json")
    if not os.path.exists(path):
        print(f"File not found: {path}")
        sys.exit(1)

    products = load_products(path, brands=args.brand)
    if not products:
        logger.error("No products to process in %s", path)
        sys.exit(1)

    try:
        client = SupabaseClient.from_env()
        embedder = None if args.upload_only else ClipEmbedder.from_env(
            attempts=settings.get("vector", {}).get("embed_attempts", 3)
        )
    except ValueError as e:
        logger.error("%s", e)
        sys.exit(1)

    print("=" * 60)
    print("Product Vectorization")
    print("=" * 60)
    print(f"  Input file:       {path}")
    print(f"  Products:         {len(products)}")
    print(f"  Resume mode:      {not args.no_resume}")

    vectorizer = ProductVectorizer.from_settings(settings, client, embedder)

    upload = None
    vectorized = None
    with client:
        if not args.skip_upload:
            upload = vectorizer.upload_products(products)
        if embedder is not None:
            with embedder:
                vectorized = vectorizer.vectorize(products, limit=args.limit,
                                                  resume=not args.no_resume)

    vectorizer.print_summary(upload, vectorized)

    if upload and upload["uploaded"] == 0:
        sys.exit(1)


if __name__ == "__main__":
    main()
