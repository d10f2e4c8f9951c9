"""
Product Validator

Checks scraped product records before they are merged and uploaded.
"""

from __future__ import annotations

from urllib.parse import urlparse

from ..common.constants import PRICE_MAX_KRW, PRICE_MIN_KRW
from ..models import ScrapedProduct

# Hosts and path fragments of stock "no image" pictures
_PLACEHOLDER_DOMAINS: frozenset[str] = frozenset({
    "placeholder.com",
    "dummyimage.com",
    "placehold.it",
    "example.com",
})
_PLACEHOLDER_MARKERS = ("noimg", "no_image", "no-image", "noimage", "placeholder", "blank.gif")


def _is_placeholder_image(url: str) -> bool:
    lowered = url.lower()
    hostname = urlparse(lowered).netloc
    if any(hostname == d or hostname.endswith("." + d) for d in _PLACEHOLDER_DOMAINS):
        return True
    return any(marker in lowered for marker in _PLACEHOLDER_MARKERS)


class ProductValidator:
    """Validates one scraped product."""

    TITLE_MIN_LENGTH = 2
    TITLE_MAX_LENGTH = 300

    def __init__(
        self,
        product: ScrapedProduct,
        min_reasonable_price: int = PRICE_MIN_KRW,
        max_reasonable_price: int = PRICE_MAX_KRW,
    ):
        self.product = product
        self.min_reasonable_price = min_reasonable_price
        self.max_reasonable_price = max_reasonable_price

    def validate(self) -> dict:
        """
        Run all checks.

        Returns a dict with keys:
          valid    - False if any error fires
          errors   - blocking problems (the record is not usable as-is)
          warnings - suspicious but usable values
          issues   - errors + warnings
        """
        errors: list[str] = []
        warnings: list[str] = []
        p = self.product

        # ── Error checks ─────────────────────────────────────────────────────

        title = (p.title or "").strip()
        if not title:
            errors.append("title: empty or whitespace-only")
        elif len(title) < self.TITLE_MIN_LENGTH:
            errors.append(f"title: too short ({len(title)} chars, min {self.TITLE_MIN_LENGTH})")
        elif len(title) > self.TITLE_MAX_LENGTH:
            errors.append(f"title: too long ({len(title)} chars, max {self.TITLE_MAX_LENGTH})")

        if not p.product_url or not p.product_url.startswith(("http://", "https://")):
            errors.append(f"productUrl: must be http(s) (got {str(p.product_url)[:50]!r})")

        if p.price is None:
            errors.append("price: missing")
        elif p.price <= 0:
            errors.append(f"price: must be > 0 (got {p.price})")
        elif p.price > self.max_reasonable_price:
            errors.append(f"price: suspiciously high (got {p.price})")
        elif p.price < self.min_reasonable_price:
            warnings.append(f"price: below {self.min_reasonable_price} KRW (got {p.price})")

        image = p.image_url or ""
        if not image:
            errors.append("imageUrl: missing")
        elif image.startswith("data:"):
            # lazy-load placeholder; the detail scrape may still provide images
            warnings.append("imageUrl: data URI placeholder")
        elif not image.startswith(("http://", "https://")):
            errors.append(f"imageUrl: must be http(s) ({image[:60]!r})")
        elif _is_placeholder_image(image):
            warnings.append(f"imageUrl: placeholder image ({image[:60]!r})")

        # ── Warning checks ────────────────────────────────────────────────────

        if not p.has_details():
            warnings.append("details: no detail images, sections or HTML")

        if p.error:
            warnings.append(f"error: detail scrape failed ({p.error[:60]})")

        return {
            "valid": not errors,
            "errors": errors,
            "warnings": warnings,
            "issues": errors + warnings,
        }
