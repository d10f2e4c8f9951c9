"""
Price Utilities

Parsing of KRW prices from listing text and JSON API items.
"""

import re
from typing import Any, Iterable, Mapping, Optional

from .constants import PRICE_MAX_KRW, PRICE_MIN_KRW

# "1,290,000" / "1.290.000" / "1290000"
_PRICE_TOKEN = re.compile(r'\d{1,3}(?:[.,]\d{3})+|\d{4,9}')
_FIRST_PRICE = re.compile(r'(\d{1,3}(?:[.,]\d{3})+|\d+)\s*(?:원|KRW|₩)?')

# Field names seen in commerce list APIs, sale-ish names first
JSON_PRICE_FIELDS = (
    'salePrice', 'discountPrice', 'finalPrice', 'sellPrice', 'goodsSalePrice',
    'lowPrice', 'minPrice', 'price', 'displayPrice', 'dcPrice',
)


def digits_only(text: Any) -> str:
    """Strip everything except ASCII digits."""
    if text is None:
        return ''
    return re.sub(r'[^0-9]', '', str(text))


def parse_price(
    text: Optional[str],
    min_price: int = PRICE_MIN_KRW,
    max_price: int = PRICE_MAX_KRW,
) -> Optional[int]:
    """
    Parse the lowest plausible price from free text.

    Listing cards usually show the list price next to the sale price,
    so the minimum in-range value is taken as the selling price.

    Args:
        text: Price text, e.g. "1,290,000원 990,000원"
        min_price: Smallest accepted value
        max_price: Largest accepted value

    Returns:
        Price in KRW or None when nothing plausible is found
    """
    if not text:
        return None

    values = [int(digits_only(token)) for token in _PRICE_TOKEN.findall(str(text))]
    values = [v for v in values if min_price <= v <= max_price]
    return min(values) if values else None


def parse_first_price(text: Optional[str]) -> Optional[int]:
    """Parse the first number in the text, with no range check."""
    if not text:
        return None
    match = _FIRST_PRICE.search(str(text))
    if not match:
        return None
    return int(digits_only(match.group(1)))


def price_from_fields(
    item: Mapping[str, Any],
    fields: Iterable[str] = JSON_PRICE_FIELDS,
) -> Optional[int]:
    """
    Pick the selling price from a JSON list item.

    Takes the minimum positive value among the price fields. When only a
    list price and a discount rate are present, applies the discount.

    Returns:
        Price in KRW or None
    """
    candidates = []
    for name in fields:
        value = item.get(name)
        if value is None:
            continue
        digits = digits_only(value)
        if digits and int(digits) > 0:
            candidates.append(int(digits))

    if candidates:
        return min(candidates)

    rate = item.get('discountRate')
    list_price = item.get('price')
    if isinstance(rate, (int, float)) and not isinstance(rate, bool) and list_price is not None:
        digits = digits_only(list_price)
        if digits:
            return round(int(digits) * (100 - rate) / 100)

    return None
