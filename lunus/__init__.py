"""
LUNUS Furniture Catalogue Crawler

Modules:
    models        - Data models (ScrapedProduct, DetailSection, SiteConfig)
    common        - Shared utilities (config loader, HTTP fetcher, price/text/JSON utils)
    discovery     - Category listing crawl with pagination
    extraction    - Listing/detail page parsers and the detail scraper
    normalization - Brand folder organizing, unified schema, data cleaning
    validation    - Crawl quality tracking
    vector        - Supabase upload and CLIP image embeddings
"""
