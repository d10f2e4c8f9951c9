"""
Data models for scraped furniture products and site configuration.

This module contains pure data classes with no business logic.
"""

from .product import DetailSection, ScrapedProduct
from .records import product_from_record, product_to_record
from .site import CategoryConfig, SiteConfig

__all__ = [
    'DetailSection',
    'ScrapedProduct',
    'CategoryConfig',
    'SiteConfig',
    'product_from_record',
    'product_to_record',
]
