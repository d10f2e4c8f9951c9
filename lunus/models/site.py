"""
Site configuration models.

Each supported brand site is described by a SiteConfig built from
config/sites.yaml.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass
class CategoryConfig:
    """A category listing entry point."""
    key: str
    url: str


@dataclass
class SiteConfig:
    """
    Crawl configuration for one brand site.

    Attributes:
        source: Site key used in file names (e.g. "livart")
        brand: Brand display name (e.g. "리바트")
        folder: Data sub-folder holding the brand's JSON files
        base_url: Site root used to resolve relative links
        categories: Category listing entry points
        category_mapping: Site category -> unified category
        parser: Listing parser kind ("selector", "json" or "anchor")
        pagination: Page parameter, page/item limits, stop rule
        listing: Listing parser settings (selectors, url patterns)
        detail: Detail page parser settings
    """
    source: str
    brand: str
    folder: str
    base_url: str
    categories: List[CategoryConfig] = field(default_factory=list)
    category_mapping: Dict[str, str] = field(default_factory=dict)
    parser: str = "selector"
    pagination: Dict[str, Any] = field(default_factory=dict)
    listing: Dict[str, Any] = field(default_factory=dict)
    detail: Dict[str, Any] = field(default_factory=dict)

    @property
    def page_param(self) -> str:
        return self.pagination.get("param", "page")

    @property
    def max_pages(self) -> int:
        return int(self.pagination.get("max_pages", 5))

    @property
    def per_category_limit(self) -> int:
        return int(self.pagination.get("per_category_limit", 600))

    @property
    def stop_when_empty(self) -> bool:
        return bool(self.pagination.get("stop_when_empty", False))
