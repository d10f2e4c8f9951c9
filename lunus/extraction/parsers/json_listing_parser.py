"""
JSON Listing Parser

Extracts products from commerce list API responses and from JSON state
embedded in pages (e.g. Next.js `__NEXT_DATA__`).

Field names differ per shop, so each field is looked up through a list
of common aliases.
"""

import json
import logging
from typing import Any, Dict, Iterable, List, Optional

from bs4 import BeautifulSoup

from ...common.price_utils import JSON_PRICE_FIELDS, price_from_fields
from ...common.text_utils import absolute_url, clean_title
from ...models import ScrapedProduct

logger = logging.getLogger(__name__)

# Where list endpoints usually put the product array
LIST_PATHS = ('items', 'data', 'data.list', 'data.items', 'result.items', 'goods')

TITLE_KEYS = ('goodsNm', 'name', 'title', 'goodsName')
IMAGE_KEYS = ('imageUrl', 'thumbnailUrl', 'thumbnail', 'img', 'listImage')
URL_KEYS = ('url', 'link')
ID_KEYS = ('goodsId', 'id', 'code', 'goodsNo')


def _get_path(data: Any, path: str) -> Any:
    current = data
    for part in path.split('.'):
        if not isinstance(current, dict):
            return None
        current = current.get(part)
    return current


def _first(item: Dict[str, Any], keys: Iterable[str]) -> Any:
    for key in keys:
        value = item.get(key)
        if value not in (None, ''):
            return value
    return None


def _looks_like_products(value: Any) -> bool:
    if not isinstance(value, list) or not value:
        return False
    return any(
        isinstance(item, dict) and _first(item, TITLE_KEYS) is not None
        and (_first(item, URL_KEYS) is not None or _first(item, ID_KEYS) is not None)
        for item in value
    )


def find_product_list(body: Any) -> List[Dict[str, Any]]:
    """
    Locate the product array in a JSON body.

    The well-known paths are tried first; otherwise the structure is
    searched breadth-first for the first list of product-like objects.
    """
    if isinstance(body, list):
        if _looks_like_products(body):
            return body
    elif isinstance(body, dict):
        for path in LIST_PATHS:
            candidate = _get_path(body, path)
            if isinstance(candidate, list):
                return candidate

    queue = [body]
    while queue:
        node = queue.pop(0)
        if _looks_like_products(node):
            return node
        if isinstance(node, dict):
            queue.extend(v for v in node.values() if isinstance(v, (dict, list)))
        elif isinstance(node, list):
            queue.extend(v for v in node if isinstance(v, (dict, list)))

    return []


def extract_embedded_json(soup: BeautifulSoup, selector: str = 'script#__NEXT_DATA__') -> Any:
    """
    Parse the JSON content of a <script> element.

    Returns:
        Parsed JSON, or None when the element is missing or invalid
    """
    script = soup.select_one(selector)
    if script is None or not script.string:
        return None
    try:
        return json.loads(script.string)
    except json.JSONDecodeError as e:
        logger.warning("Invalid embedded JSON in %s: %s", selector, e)
        return None


class JsonListingParser:
    """
    Parses a JSON list body into products.

    Usage:
        parser = JsonListingParser(body, "https://store.hanssem.com",
                                   image_base="https://image.hanssem.com",
                                   url_pattern="/goods/{id}")
        products = parser.parse()
    """

    def __init__(
        self,
        body: Any,
        base_url: str,
        image_base: str = '',
        url_pattern: str = '',
        price_fields: Iterable[str] = JSON_PRICE_FIELDS,
    ):
        self.body = body
        self.base_url = base_url
        self.image_base = image_base
        self.url_pattern = url_pattern
        self.price_fields = tuple(price_fields)

    def parse(self) -> List[ScrapedProduct]:
        products = []
        seen = set()
        for item in find_product_list(self.body):
            if not isinstance(item, dict):
                continue
            product = self.parse_item(item)
            if product is None or product.product_url in seen:
                continue
            seen.add(product.product_url)
            products.append(product)
        return products

    def parse_item(self, item: Dict[str, Any]) -> Optional[ScrapedProduct]:
        title = clean_title(str(_first(item, TITLE_KEYS) or ''))
        url = self._url(item)
        if not title or not url:
            return None

        return ScrapedProduct(
            title=title,
            product_url=url,
            price=price_from_fields(item, self.price_fields),
            image_url=self._image(item) or '',
        )

    def _url(self, item: Dict[str, Any]) -> Optional[str]:
        url = _first(item, URL_KEYS)
        if isinstance(url, str) and url.strip():
            return absolute_url(url, self.base_url)

        product_id = _first(item, ID_KEYS)
        if product_id is not None and self.url_pattern:
            return absolute_url(self.url_pattern.format(id=product_id), self.base_url)
        return None

    def _image(self, item: Dict[str, Any]) -> Optional[str]:
        image = _first(item, IMAGE_KEYS)
        if not isinstance(image, str) or not image.strip():
            return None
        image = image.strip()
        if image.startswith('//'):
            return 'https:' + image
        if image.startswith(('http://', 'https://')):
            return image
        if self.image_base:
            return self.image_base.rstrip('/') + '/' + image.lstrip('/')
        return absolute_url(image, self.base_url)
