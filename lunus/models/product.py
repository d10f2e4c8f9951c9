"""
Product data models.

Pure data classes for representing scraped furniture products.
No business logic - only data structure definitions.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class DetailSection:
    """Titled text block from a product detail page."""
    title: str = ""
    description: str = ""


@dataclass
class ScrapedProduct:
    """
    Product record as collected from a brand site.

    Listing crawls fill the core fields; the detail scraper adds the
    detail fields; normalization stamps source/brand/category.

    Field Groups:
    - Core fields: title, product URL, price, representative image
    - Origin: source key, brand name, unified category
    - Detail fields: detail/gallery/thumbnail images, sections, raw HTML
    - Metadata: scrape error and timestamp, unrecognized keys
    """

    # Core fields (required)
    title: str
    product_url: str
    price: Optional[int] = None     # KRW, sale price when both are shown
    image_url: str = ""

    # Origin
    source: str = ""                # site key, e.g. "alloso"
    brand: str = ""                 # Korean brand name, e.g. "알로소"
    category: str = ""

    # Detail page content
    detail_images: List[str] = field(default_factory=list)
    gallery_images: List[str] = field(default_factory=list)
    thumbnail_images: List[str] = field(default_factory=list)
    detail_sections: List[DetailSection] = field(default_factory=list)
    detail_html: str = ""

    # Metadata
    error: str = ""
    scraped_at: str = ""
    extra: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        """Validate required fields after initialization."""
        if not self.title or not self.title.strip():
            raise ValueError("Product title is required")
        if not self.product_url:
            raise ValueError("Product URL is required")

    def has_details(self) -> bool:
        """True once any detail-page content has been collected."""
        return bool(
            self.detail_images
            or self.gallery_images
            or self.detail_sections
            or self.detail_html
        )
