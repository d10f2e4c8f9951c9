"""
CrawlQualityTracker

Tracks data quality metrics across a product data set and prints summaries.
"""

from __future__ import annotations

import re
from collections import defaultdict
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..models import ScrapedProduct


class CrawlQualityTracker:
    """
    Aggregate quality tracker for crawled brand data.

    Records per-product validation results, detects duplicate product
    URLs, tracks price range and detail coverage per brand, and prints
    periodic and final quality reports.

    Usage::

        tracker = CrawlQualityTracker()
        for product in products:
            tracker.record(product, ProductValidator(product).validate())
        tracker.print_final_report()
        if tracker.has_critical_failures():
            sys.exit(1)
    """

    def __init__(self) -> None:
        self.total: int = 0
        self.valid: int = 0          # no errors, no warnings
        self.warnings_only: int = 0  # warnings but no errors
        self.errors: int = 0         # at least one error

        # Per-field issue counter: field_name -> count
        self.field_error_counts: dict[str, int] = defaultdict(int)

        # brand -> {"total", "errors", "with_details"}
        self.brand_counts: dict[str, dict[str, int]] = defaultdict(
            lambda: {"total": 0, "errors": 0, "with_details": 0}
        )

        self.seen_urls: set[str] = set()
        self.duplicate_urls: list[str] = []

        self.with_details: int = 0

        self.price_min: int | None = None
        self.price_max: int | None = None

    # ── Public API ────────────────────────────────────────────────────────────

    def record(self, product: "ScrapedProduct", validation_result: dict) -> None:
        """Record a product's validation result."""
        self.total += 1

        errs = validation_result.get("errors", [])
        warns = validation_result.get("warnings", [])

        if errs:
            self.errors += 1
        elif warns:
            self.warnings_only += 1
        else:
            self.valid += 1

        for msg in errs + warns:
            self.field_error_counts[self._extract_field(msg)] += 1

        brand = product.brand or product.source or "unknown"
        stats = self.brand_counts[brand]
        stats["total"] += 1
        if errs:
            stats["errors"] += 1

        if product.has_details():
            self.with_details += 1
            stats["with_details"] += 1

        if product.product_url:
            if product.product_url in self.seen_urls:
                self.duplicate_urls.append(product.product_url)
                self.field_error_counts["productUrl_duplicate"] += 1
            else:
                self.seen_urls.add(product.product_url)

        if product.price:
            if self.price_min is None or product.price < self.price_min:
                self.price_min = product.price
            if self.price_max is None or product.price > self.price_max:
                self.price_max = product.price

    def print_periodic_summary(self, n_processed: int) -> None:
        """Print a one-line quality summary."""
        if self.total == 0:
            return

        valid_pct = self.valid / self.total * 100
        warn_pct = self.warnings_only / self.total * 100
        err_pct = self.errors / self.total * 100

        top_issues = self._top_issues(n=3)
        top_str = ", ".join(f"{f} ({c})" for f, c in top_issues) if top_issues else "none"

        print(
            f"[Progress {n_processed}] Quality: "
            f"✅ {valid_pct:.1f}% valid | "
            f"⚠️  {warn_pct:.1f}% warnings | "
            f"❌ {err_pct:.1f}% errors"
        )
        if top_issues:
            print(f"  Top issues: {top_str}")

    def print_final_report(self) -> None:
        """Print a full quality report table."""
        if self.total == 0:
            print("\n[Quality] No products processed.")
            return

        valid_pct = self.valid / self.total * 100
        warn_pct = self.warnings_only / self.total * 100
        err_pct = self.errors / self.total * 100
        detail_pct = self.with_details / self.total * 100
        gate = "PASS" if not self.has_critical_failures() else "FAIL"

        print("\n" + "=" * 60)
        print(f"Quality Report  [{gate}]")
        print("=" * 60)
        print(f"  Total products:   {self.total}")
        print(f"  Valid (no issues):{self.valid:>6}  ({valid_pct:.1f}%)")
        print(f"  Warnings only:    {self.warnings_only:>6}  ({warn_pct:.1f}%)")
        print(f"  Errors:           {self.errors:>6}  ({err_pct:.1f}%)")
        print(f"  With details:     {self.with_details:>6}  ({detail_pct:.1f}%)")

        if self.brand_counts:
            print("\n  Per brand:")
            for brand, stats in sorted(self.brand_counts.items(), key=lambda x: -x[1]["total"]):
                print(
                    f"    {brand:<20} {stats['total']:>6} products  "
                    f"{stats['errors']:>5} errors  {stats['with_details']:>5} with details"
                )

        if self.field_error_counts:
            print("\n  Per-field failure rates (top 10):")
            for field, count in sorted(
                self.field_error_counts.items(), key=lambda x: -x[1]
            )[:10]:
                pct = count / self.total * 100
                print(f"    {field:<30} {count:>5}  ({pct:.1f}%)")

        if self.duplicate_urls:
            print(
                f"\n  Duplicate URLs: {len(self.duplicate_urls)} "
                f"(e.g. {self.duplicate_urls[0]!r})"
            )

        if self.price_min is not None:
            print(f"\n  Price range: {self.price_min:,} – {self.price_max:,} KRW")

        print("\n  Gate (>5% errors = FAIL):", gate)
        print("=" * 60)

    def has_critical_failures(self, threshold_pct: float = 5.0) -> bool:
        """Return True if the error rate exceeds threshold_pct."""
        if self.total == 0:
            return False
        return (self.errors / self.total * 100) > threshold_pct

    # ── Helpers ───────────────────────────────────────────────────────────────

    @staticmethod
    def _extract_field(message: str) -> str:
        """Extract the field name from a message like 'price: missing'."""
        match = re.match(r"^([a-z_A-Z][a-z_A-Z0-9 ]+?):", message)
        return match.group(1).strip() if match else "unknown"

    def _top_issues(self, n: int = 3) -> list[tuple[str, int]]:
        """Return the top-N fields by issue count."""
        return sorted(self.field_error_counts.items(), key=lambda x: -x[1])[:n]
