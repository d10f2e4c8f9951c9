#!/usr/bin/env python3
"""
Similar Product Search Script

Embeds a query image and lists the most similar products stored in
Supabase.

Usage:
    python3 scripts/search_similar.py --image https://example.org/sofa.jpg
    python3 scripts/search_similar.py --image https://.../chair.jpg --count 5 --threshold 0.7
"""

import argparse
import logging
import os
import sys

# Add project root to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from lunus.common import load_env, load_settings
from lunus.common.log_config import setup_logging
from lunus.vector import ClipEmbedder, EmbeddingError, ProductVectorizer, SupabaseClient

logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(description="Find products similar to an image")
    parser.add_argument("--image", required=True, help="Query image URL")
    parser.add_argument("--threshold", type=float, help="Similarity threshold (default: from settings)")
    parser.add_argument("--count", type=int, help="Number of matches (default: from settings)")
    parser.add_argument("--verbose", action="store_true")
    parser.add_argument("--quiet", action="store_true")

    args = parser.parse_args()
    setup_logging(verbose=args.verbose, quiet=args.quiet)
    load_env()

    try:
        client = SupabaseClient.from_env()
        embedder = ClipEmbedder.from_env()
    except ValueError as e:
        logger.error("%s", e)
        sys.exit(1)

    vectorizer = ProductVectorizer.from_settings(load_settings(), client, embedder)
    try:
        matches = vectorizer.find_similar(args.image, threshold=args.threshold, count=args.count)
    except EmbeddingError as e:
        logger.error("Could not embed query image: %s", e)
        sys.exit(1)
    finally:
        client.close()
        embedder.close()

    print("\n" + "=" * 60)
    print(f"Similar products: {len(matches)}")
    print("=" * 60)
    for i, match in enumerate(matches, 1):
        similarity = match.get("similarity")
        score = f"{similarity:.3f}" if isinstance(similarity, (int, float)) else "-"
        price = match.get("price")
        price_str = f"{price:,}원" if isinstance(price, int) else "-"
        print(f"  {i:>2}. [{score}] {match.get('brand', '')} {match.get('title', '')}")
        print(f"      {price_str}  {match.get('url') or match.get('id', '')}")
    print("=" * 60)


if __name__ == "__main__":
    main()
