"""
Selector Listing Parser

Extracts product cards from a category listing page using the CSS
selectors declared for the site in config/sites.yaml:
- Product URL from the card link, or from an id attribute + URL pattern
- Title from title selectors, falling back to the image alt text
- Price from sale price selectors first, then normal price selectors
- Representative image, preferring sources that look like product images

Most shops (Cafe24, GodoMall and custom builds) render listing cards
server-side, so this parser covers all sites except the JSON and
anchor-heuristic ones.
"""

import logging
import re
from typing import Any, Dict, List, Optional

from bs4 import BeautifulSoup, Tag

from ...common.constants import PRICE_MIN_KRW
from ...common.price_utils import parse_price
from ...common.text_utils import absolute_url, clean_text, clean_title, contains_hangul
from ...models import ScrapedProduct

logger = logging.getLogger(__name__)

# Lazy-loading attributes first; Cafe24 uses ec-data-src
IMAGE_ATTRS = ('ec-data-src', 'data-src', 'data-original', 'src')


def image_source(img: Tag) -> Optional[str]:
    """Return the first non-empty image source attribute of an <img>."""
    for attr in IMAGE_ATTRS:
        value = img.get(attr)
        if value and not value.startswith('data:'):
            return value.strip()
    return None


def _as_list(value: Any) -> List[str]:
    if not value:
        return []
    if isinstance(value, str):
        return [value]
    return list(value)


class SelectorListingParser:
    """
    Parses product cards from listing HTML.

    Config keys (all optional except `card`):
        card, link, href_contains, href_pattern, id_attrs, url_pattern,
        title, title_join, title_require_hangul, title_exclude, title_strip,
        sale_price, price, price_min, price_text_contains,
        image, image_scope, image_prefer, require_price, require_image

    Usage:
        parser = SelectorListingParser(soup, "https://www.alloso.co.kr", site.listing)
        products = parser.parse()
    """

    def __init__(self, soup: BeautifulSoup, base_url: str, config: Dict[str, Any]):
        """
        Initialize the listing parser.

        Args:
            soup: Parsed listing page
            base_url: Site root for resolving relative links
            config: The site's `listing` block
        """
        self.soup = soup
        self.base_url = base_url
        self.config = config

        self.title_exclude = [re.compile(p) for p in _as_list(config.get('title_exclude'))]
        self.title_strip = [re.compile(p) for p in _as_list(config.get('title_strip'))]
        self.href_pattern = re.compile(config['href_pattern']) if config.get('href_pattern') else None

    def parse(self) -> List[ScrapedProduct]:
        """
        Extract all products on the page.

        Cards without a URL or title are skipped, as are cards failing
        require_price / require_image.

        Returns:
            Products in page order, unique by URL
        """
        card_selector = self.config.get('card')
        if not card_selector:
            return []

        products = []
        seen = set()
        for card in self.soup.select(card_selector):
            product = self.parse_card(card)
            if product is None or product.product_url in seen:
                continue
            seen.add(product.product_url)
            products.append(product)

        logger.debug("Parsed %d products from %d cards", len(products),
                     len(self.soup.select(card_selector)))
        return products

    def parse_card(self, card: Tag) -> Optional[ScrapedProduct]:
        """Build a product from one card, or None when the card is unusable."""
        url = self.extract_url(card)
        if not url:
            return None

        title = self.extract_title(card)
        if not title:
            return None
        if any(p.search(title) for p in self.title_exclude):
            return None

        price = self.extract_price(card)
        if self.config.get('require_price') and price is None:
            return None

        image = self.extract_image(card)
        if self.config.get('require_image') and not image:
            return None

        return ScrapedProduct(title=title, product_url=url, price=price, image_url=image or '')

    # ── Fields ────────────────────────────────────────────────────────────────

    def extract_url(self, card: Tag) -> Optional[str]:
        """
        Resolve the product URL.

        An id attribute combined with url_pattern wins over the card link,
        since some shops route clicks through JavaScript.
        """
        pattern = self.config.get('url_pattern')
        if pattern:
            for attr in _as_list(self.config.get('id_attrs')):
                product_id = card.get(attr)
                if product_id:
                    return absolute_url(pattern.format(id=product_id.strip()), self.base_url)

        link = self._find_link(card)
        if link is None:
            return None

        href = link.get('href', '')
        contains = _as_list(self.config.get('href_contains'))
        if contains and not any(c in href for c in contains):
            return None
        if self.href_pattern and not self.href_pattern.search(href):
            return None

        return absolute_url(href, self.base_url)

    def extract_title(self, card: Tag) -> str:
        """Return the cleaned title, or an empty string."""
        selectors = _as_list(self.config.get('title'))
        require_hangul = self.config.get('title_require_hangul', False)

        if self.config.get('title_join'):
            parts = []
            for selector in selectors:
                element = card.select_one(selector)
                if element:
                    text = clean_text(element.get_text(' '))
                    if text:
                        parts.append(text)
            candidates = [' '.join(parts)]
        else:
            candidates = []
            for selector in selectors:
                for element in card.select(selector):
                    candidates.append(element.get_text(' '))

        img = card.find('img', alt=True)
        if img:
            candidates.append(img['alt'])

        for candidate in candidates:
            title = clean_title(candidate)
            for pattern in self.title_strip:
                title = pattern.sub('', title).strip()
            if not title:
                continue
            if require_hangul and not contains_hangul(title):
                continue
            return title

        return ''

    def extract_price(self, card: Tag) -> Optional[int]:
        """Sale price selectors first, then normal price selectors."""
        min_price = int(self.config.get('price_min', PRICE_MIN_KRW))

        for key in ('sale_price', 'price'):
            for selector in _as_list(self.config.get(key)):
                for element in card.select(selector):
                    price = parse_price(element.get_text(' '), min_price=min_price)
                    if price is not None:
                        return price

        marker = self.config.get('price_text_contains')
        if marker:
            texts = [s for s in card.stripped_strings if marker in s]
            return parse_price(' '.join(texts), min_price=min_price)

        return None

    def extract_image(self, card: Tag) -> Optional[str]:
        """Pick the card image, preferring sources containing image_prefer."""
        scope = card
        if self.config.get('image_scope'):
            scope = card.find_parent(self.config['image_scope']) or card

        sources = []
        for selector in _as_list(self.config.get('image')) or ['img']:
            for img in scope.select(selector):
                src = absolute_url(image_source(img), self.base_url)
                if src and src not in sources:
                    sources.append(src)

        if not sources:
            return None

        for prefer in _as_list(self.config.get('image_prefer')):
            for src in sources:
                if prefer in src:
                    return src

        return sources[0]

    # ── Helpers ───────────────────────────────────────────────────────────────

    def _find_link(self, card: Tag) -> Optional[Tag]:
        if card.name == 'a' and card.get('href'):
            return card

        selector = self.config.get('link')
        if selector:
            link = card.select_one(selector)
            if link is not None and link.get('href'):
                return link
            return None

        return card.find('a', href=True)
