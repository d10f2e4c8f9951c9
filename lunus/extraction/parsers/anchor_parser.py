"""
Anchor Listing Parser

Heuristic listing parser for sites without stable card markup
(site builders such as the one VillaRecord runs on). Every same-site
link that is not a navigation link is treated as a product candidate;
title, price and image come from the link's surrounding container.
"""

import re
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

from bs4 import BeautifulSoup, Tag

from ...common.price_utils import parse_price
from ...common.text_utils import absolute_url, clean_text, clean_title
from ...models import ScrapedProduct
from .listing_parser import image_source

DEFAULT_CONTAINER = 'article, li, div[class*="product"], div[class*="item"]'
TITLE_SELECTORS = 'h1, h2, h3, h4, h5, h6, [class*="title"], [class*="name"]'


class AnchorListingParser:
    """
    Finds products by walking anchors instead of cards.

    Config keys:
        href_pattern  regex a product href must match (optional)
        href_skip     path fragments marking navigation links
        container     CSS selector for the element around a product link
    """

    def __init__(self, soup: BeautifulSoup, base_url: str, config: Dict[str, Any]):
        self.soup = soup
        self.base_url = base_url
        self.config = config
        self.host = urlparse(base_url).netloc
        self.href_pattern = re.compile(config['href_pattern']) if config.get('href_pattern') else None
        self.skip = [s.lower() for s in config.get('href_skip', [])]
        self.container = config.get('container', DEFAULT_CONTAINER)

    def parse(self) -> List[ScrapedProduct]:
        products = []
        seen = set()

        for anchor in self.soup.find_all('a', href=True):
            url = self._product_url(anchor['href'])
            if not url or url in seen:
                continue

            container = anchor.css.closest(self.container) or anchor
            title = self._title(anchor, container)
            if not title:
                continue

            seen.add(url)
            products.append(ScrapedProduct(
                title=title,
                product_url=url,
                price=self._price(container),
                image_url=self._image(anchor, container) or '',
            ))

        return products

    def _product_url(self, href: str) -> Optional[str]:
        url = absolute_url(href, self.base_url)
        if not url:
            return None

        parts = urlparse(url)
        if parts.netloc and parts.netloc != self.host:
            return None
        path = parts.path.lower()
        if path in ('', '/'):
            return None
        if any(fragment in path for fragment in self.skip):
            return None
        if self.href_pattern and not self.href_pattern.search(url):
            return None

        # drop fragments so one product is not listed twice
        return url.split('#', 1)[0]

    def _title(self, anchor: Tag, container: Tag) -> str:
        for scope in (anchor, container):
            element = scope.select_one(TITLE_SELECTORS)
            if element:
                title = clean_title(element.get_text(' '))
                if title:
                    return title

        img = anchor.find('img', alt=True) or container.find('img', alt=True)
        if img:
            title = clean_title(img['alt'])
            if title:
                return title

        return clean_title(anchor.get_text(' '))

    def _price(self, container: Tag) -> Optional[int]:
        for element in container.select('[class*="price"]'):
            price = parse_price(element.get_text(' '))
            if price is not None:
                return price

        text = clean_text(container.get_text(' '))
        if '원' in text or '₩' in text:
            return parse_price(text)
        return None

    def _image(self, anchor: Tag, container: Tag) -> Optional[str]:
        img = anchor.find('img') or container.find('img')
        if img is None:
            return None
        return absolute_url(image_source(img), self.base_url)
