"""
JSON record conversion.

Product files on disk are JSON arrays of camelCase records
(title, price, productUrl, imageUrl, ...). Older files written by
earlier crawls use other key names; those are accepted on read.
"""

from typing import Any, Dict, List

from .product import DetailSection, ScrapedProduct

# Keys consumed by product_from_record; anything else lands in `extra`
_KNOWN_KEYS = {
    'title', 'name', 'price', 'productUrl', 'url', 'imageUrl', 'image',
    'source', 'brand', 'category',
    'detailImages', 'galleryImages', 'thumbnailImages', 'detailSections',
    'detailHTML', 'detailImage', 'detailImage1', 'detailImage2', 'detailImage3',
    'detailText1', 'detailText2', 'detailText3',
    'detailTextTitle1', 'detailTextTitle2', 'detailTextTitle3',
    'error', 'scrapedAt', 'capturedAt',
}


def _to_price(value: Any):
    if value is None or value == '':
        return None
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return int(value)
    digits = ''.join(ch for ch in str(value) if ch.isdigit())
    return int(digits) if digits else None


def _legacy_images(record: Dict[str, Any]) -> List[str]:
    images = []
    for key in ('detailImage', 'detailImage1', 'detailImage2', 'detailImage3'):
        value = record.get(key)
        if value:
            images.append(value)
    return images


def _legacy_sections(record: Dict[str, Any]) -> List[DetailSection]:
    sections = []
    for n in (1, 2, 3):
        title = record.get(f'detailTextTitle{n}') or ''
        text = record.get(f'detailText{n}') or ''
        if title or text:
            sections.append(DetailSection(title=title, description=text))
    return sections


def product_from_record(record: Dict[str, Any]) -> ScrapedProduct:
    """
    Build a ScrapedProduct from a JSON record.

    Args:
        record: Dictionary as read from a product JSON file

    Returns:
        ScrapedProduct

    Raises:
        ValueError: If the record has no title or no product URL
    """
    sections = [
        DetailSection(
            title=s.get('title', '') or '',
            description=s.get('description', s.get('text', '')) or '',
        )
        for s in record.get('detailSections') or []
        if isinstance(s, dict)
    ]
    if not sections:
        sections = _legacy_sections(record)

    detail_images = list(record.get('detailImages') or []) or _legacy_images(record)

    return ScrapedProduct(
        title=(record.get('title') or record.get('name') or '').strip(),
        product_url=record.get('productUrl') or record.get('url') or '',
        price=_to_price(record.get('price')),
        image_url=record.get('imageUrl') or record.get('image') or '',
        source=record.get('source', '') or '',
        brand=record.get('brand', '') or '',
        category=record.get('category', '') or '',
        detail_images=detail_images,
        gallery_images=list(record.get('galleryImages') or []),
        thumbnail_images=list(record.get('thumbnailImages') or []),
        detail_sections=sections,
        detail_html=record.get('detailHTML', '') or '',
        error=record.get('error', '') or '',
        scraped_at=record.get('scrapedAt') or record.get('capturedAt') or '',
        extra={k: v for k, v in record.items() if k not in _KNOWN_KEYS},
    )


def product_to_record(product: ScrapedProduct) -> Dict[str, Any]:
    """
    Convert a ScrapedProduct to a JSON record.

    Core keys are always written; empty optional fields are omitted.
    """
    record: Dict[str, Any] = {}
    if product.source:
        record['source'] = product.source
    if product.brand:
        record['brand'] = product.brand
    if product.category:
        record['category'] = product.category

    record['title'] = product.title
    record['price'] = product.price
    record['productUrl'] = product.product_url
    record['imageUrl'] = product.image_url or None

    if product.detail_images:
        record['detailImages'] = list(product.detail_images)
    if product.gallery_images:
        record['galleryImages'] = list(product.gallery_images)
    if product.thumbnail_images:
        record['thumbnailImages'] = list(product.thumbnail_images)
    if product.detail_sections:
        record['detailSections'] = [
            {'title': s.title, 'description': s.description}
            for s in product.detail_sections
        ]
    if product.detail_html:
        record['detailHTML'] = product.detail_html
    if product.error:
        record['error'] = product.error
    if product.scraped_at:
        record['scrapedAt'] = product.scraped_at

    for key, value in product.extra.items():
        record.setdefault(key, value)

    return record
