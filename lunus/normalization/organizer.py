"""
Brand Organizer

Moves a site's category files into its brand folder and merges them into
one products.json per brand.
"""

import json
import logging
import shutil
from pathlib import Path
from typing import Any, Dict, List, Union

from ..common.constants import MERGED_PRODUCTS_FILE
from ..common.json_utils import read_json, write_json

logger = logging.getLogger(__name__)


class BrandOrganizer:
    """
    Organizes crawl output into per-brand folders.

    Layout after organize("alloso", "알로소"):
        data/알로소/alloso-소파.json
        data/알로소/alloso-의자.json
        data/알로소/products.json      (merged)
    """

    def __init__(self, data_dir: Union[str, Path] = "data"):
        self.data_dir = Path(data_dir)

    def organize(self, source: str, folder: str) -> Dict[str, Any]:
        """
        Move `<source>-*.json` from the data directory into data/<folder>/
        and rebuild the merged products file.

        Args:
            source: Site key used as file prefix
            folder: Brand folder name

        Returns:
            Dict with moved file names and merged product count
        """
        target = self.data_dir / folder
        target.mkdir(parents=True, exist_ok=True)

        moved: List[str] = []
        for file_path in sorted(self.data_dir.glob(f"{source}-*.json")):
            destination = target / file_path.name
            if destination.exists():
                destination.unlink()
            shutil.move(str(file_path), str(destination))
            moved.append(file_path.name)
            logger.info("Moved %s -> %s/", file_path.name, folder)

        products = self.merge_folder(folder, source)
        return {'moved': moved, 'products': products}

    def merge_folder(self, folder: str, prefix: str) -> int:
        """
        Rebuild products.json from the `<prefix>-*.json` files in a folder.

        Unreadable files are logged and skipped.

        Returns:
            Number of merged products
        """
        target = self.data_dir / folder
        merged: List[Any] = []

        for file_path in sorted(target.glob(f"{prefix}-*.json")):
            if '.backup.' in file_path.name:
                continue
            try:
                data = read_json(file_path)
            except (json.JSONDecodeError, OSError, UnicodeDecodeError) as e:
                logger.error("Could not read %s: %s", file_path.name, e)
                continue
            if not isinstance(data, list):
                logger.warning("%s does not hold a JSON array, skipped", file_path.name)
                continue
            merged.extend(data)

        write_json(target / MERGED_PRODUCTS_FILE, merged)
        logger.info("Merged %d products into %s/%s", len(merged), folder, MERGED_PRODUCTS_FILE)
        return len(merged)
