"""Data quality reporting across crawled products."""

from .crawl_tracker import CrawlQualityTracker

__all__ = ['CrawlQualityTracker']
