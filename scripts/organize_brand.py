#!/usr/bin/env python3
"""
Brand Folder Organizer Script

Moves a site's category files into its brand folder and rebuilds the
merged products.json.

Usage:
    python3 scripts/organize_brand.py --site alloso
    python3 scripts/organize_brand.py --all
    python3 scripts/organize_brand.py --site iloom --merge-only
"""

import argparse
import logging
import os
import sys

# Add project root to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from lunus.common import load_settings, load_site, load_sites
from lunus.common.log_config import setup_logging
from lunus.normalization import BrandOrganizer

logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(
        description="Organize category files into brand folders"
    )
    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument("--site", "-s", help="Site key (e.g. alloso)")
    target.add_argument("--all", action="store_true", help="Organize every configured site")
    parser.add_argument("--data-dir", help="Data directory (default: from settings)")
    parser.add_argument(
        "--merge-only",
        action="store_true",
        help="Only rebuild products.json from files already in the brand folder"
    )
    parser.add_argument("--verbose", action="store_true")
    parser.add_argument("--quiet", action="store_true")

    args = parser.parse_args()
    setup_logging(verbose=args.verbose, quiet=args.quiet)

    try:
        sites = list(load_sites().values()) if args.all else [load_site(args.site)]
        settings = load_settings()
    except (ValueError, FileNotFoundError) as e:
        logger.error("%s", e)
        sys.exit(1)

    organizer = BrandOrganizer(args.data_dir or settings.get("paths", {}).get("data_dir", "data"))

    print("\n" + "=" * 60)
    print("Brand Organization")
    print("=" * 60)
    for site in sites:
        if args.merge_only:
            count = organizer.merge_folder(site.folder, site.source)
            print(f"  {site.brand:<12} merged {count} products")
        else:
            result = organizer.organize(site.source, site.folder)
            print(f"  {site.brand:<12} moved {len(result['moved'])} files, "
                  f"merged {result['products']} products")
    print("=" * 60)


if __name__ == "__main__":
    main()
