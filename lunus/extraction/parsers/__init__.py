"""
Page parsers for listing and detail pages.

Parsers:
    SelectorListingParser - listing cards via configured CSS selectors
    JsonListingParser - list API bodies and embedded page JSON
    AnchorListingParser - link heuristic for sites without card markup
    DetailPageParser - detail images, sections and HTML
"""

from .listing_parser import SelectorListingParser, image_source
from .json_listing_parser import JsonListingParser, extract_embedded_json, find_product_list
from .anchor_parser import AnchorListingParser
from .detail_parser import DetailPageParser

# Parser kind (sites.yaml `parser`) to listing parser class
LISTING_PARSERS = {
    'selector': SelectorListingParser,
    'json': JsonListingParser,
    'anchor': AnchorListingParser,
}


def get_listing_parser(kind: str):
    """
    Get the listing parser class for a parser kind.

    Raises:
        ValueError: If the kind is unknown
    """
    kind = (kind or 'selector').lower().strip()
    if kind not in LISTING_PARSERS:
        raise ValueError(f"Unsupported parser: {kind}. Supported: {', '.join(LISTING_PARSERS.keys())}")
    return LISTING_PARSERS[kind]


__all__ = [
    'SelectorListingParser',
    'JsonListingParser',
    'AnchorListingParser',
    'DetailPageParser',
    'LISTING_PARSERS',
    'get_listing_parser',
    'extract_embedded_json',
    'find_product_list',
    'image_source',
]
