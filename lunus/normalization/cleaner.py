"""
Product Cleaner

Removes records that are not real products (category pages, spare parts,
broken links, zero-priced items) from the unified data set and repairs
known price unit mistakes.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from ..common.json_utils import backup_json, read_json, write_json
from ..common.price_utils import digits_only

logger = logging.getLogger(__name__)

DEFAULT_RULES: dict[str, Any] = {
    "iloom_brand": "일룸",
    "iloom_category_paths": [
        "/product/list.do?categoryNo=",
        "/product/item.do?categoryNo=",
    ],
    "iloom_door_keyword": "도어",
    "iloom_door_max_price": 100,
    "iloom_lighting_category": "조명",
    "iloom_lighting_multiplier": 1000,
    "iloom_lighting_max_price": 1000,
    "inart_brand": "인아트",
    "inart_bad_url_suffix": "no=",
    "hanssem_brand": "한샘",
    "hanssem_custom_keyword": "맞춤설계",
}

REPORT_KEYS = (
    "empty_title",
    "empty_url",
    "iloom_category_pages",
    "iloom_door_parts",
    "inart_bad_urls",
    "zero_price",
    "hanssem_custom",
    "iloom_lighting_fixed",
)


def _price(value: Any) -> int | None:
    """Price as int, or None when the record has no price."""
    if value is None:
        return None
    digits = digits_only(value)
    return int(digits) if digits else None


class ProductCleaner:
    """
    Cleans unified product records.

    Works on raw JSON records so that records too broken to load as
    products (no title, no URL) can still be counted and removed.
    """

    def __init__(self, rules: dict[str, Any] | None = None):
        self.rules = dict(DEFAULT_RULES)
        if rules:
            self.rules.update(rules)

    @classmethod
    def from_settings(cls, settings: dict[str, Any]) -> "ProductCleaner":
        """Create a cleaner from the `cleaning` block of settings.yaml."""
        return cls(settings.get("cleaning"))

    def removal_reason(self, record: dict[str, Any]) -> str | None:
        """Return the report key of the rule removing this record, or None."""
        r = self.rules
        title = str(record.get("title") or "").strip()
        url = str(record.get("productUrl") or "").strip()
        brand = record.get("brand")
        price = _price(record.get("price"))

        if not title:
            return "empty_title"
        if not url:
            return "empty_url"
        if brand == r["iloom_brand"]:
            if any(path in url for path in r["iloom_category_paths"]):
                return "iloom_category_pages"
            if r["iloom_door_keyword"] in title and price and price < r["iloom_door_max_price"]:
                return "iloom_door_parts"
        if brand == r["inart_brand"] and url.endswith(r["inart_bad_url_suffix"]):
            return "inart_bad_urls"
        if price == 0:
            return "zero_price"
        return None

    def clean(self, records: list[dict[str, Any]]) -> tuple[list[dict[str, Any]], dict[str, int]]:
        """
        Remove invalid records and fix Iloom lighting prices.

        Returns:
            (kept records, report with per-rule counts plus before/after)
        """
        r = self.rules
        report = {key: 0 for key in REPORT_KEYS}
        kept: list[dict[str, Any]] = []

        for record in records:
            reason = self.removal_reason(record)
            if reason is None:
                kept.append(record)
                continue
            report[reason] += 1
            if (reason == "zero_price" and record.get("brand") == r["hanssem_brand"]
                    and r["hanssem_custom_keyword"] in str(record.get("title") or "")):
                report["hanssem_custom"] += 1

        # Iloom lists lighting prices in thousands of won
        for record in kept:
            if (record.get("brand") == r["iloom_brand"]
                    and record.get("category") == r["iloom_lighting_category"]):
                price = _price(record.get("price"))
                if price and price < r["iloom_lighting_max_price"]:
                    record["price"] = price * r["iloom_lighting_multiplier"]
                    report["iloom_lighting_fixed"] += 1

        report["before"] = len(records)
        report["after"] = len(kept)
        return kept, report

    def clean_file(
        self,
        path: str | Path,
        output: str | Path | None = None,
        backup: bool = True,
    ) -> dict[str, int]:
        """
        Clean a unified JSON file.

        Args:
            path: Input file
            output: Output file (default: overwrite input)
            backup: Copy the input to a timestamped backup first

        Returns:
            Cleaning report
        """
        records = read_json(path)
        if backup:
            backup_path = backup_json(path)
            logger.info("Backup written to %s", backup_path)

        kept, report = self.clean(records)
        write_json(output or path, kept)
        logger.info("Kept %d of %d products", report["after"], report["before"])
        return report

    @staticmethod
    def print_report(report: dict[str, int]) -> None:
        """Print cleaning report."""
        print("\n" + "=" * 60)
        print("Cleaning Report")
        print("=" * 60)
        print(f"  Before:                      {report['before']}")
        print(f"  Empty title:                 {report['empty_title']}")
        print(f"  Empty URL:                   {report['empty_url']}")
        print(f"  Iloom category pages:        {report['iloom_category_pages']}")
        print(f"  Iloom door parts:            {report['iloom_door_parts']}")
        print(f"  Inart broken URLs:           {report['inart_bad_urls']}")
        print(f"  Zero price:                  {report['zero_price']}")
        print(f"    of which Hanssem custom:   {report['hanssem_custom']}")
        print(f"  Iloom lighting prices fixed: {report['iloom_lighting_fixed']}")
        print(f"  After:                       {report['after']}")
        print("=" * 60)
