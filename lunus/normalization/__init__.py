"""
Post-crawl processing of brand data.

Modules:
    organizer - BrandOrganizer, per-brand folders and merged products.json
    normalizer - BrandNormalizer, unified data set with mapped categories
    cleaner - ProductCleaner, removes non-products and fixes prices
"""

from .cleaner import ProductCleaner
from .normalizer import BrandNormalizer
from .organizer import BrandOrganizer

__all__ = [
    'BrandOrganizer',
    'BrandNormalizer',
    'ProductCleaner',
]
