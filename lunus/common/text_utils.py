"""
Text Utilities

Helper functions for text cleanup, URLs and file names.
"""

import re
from typing import Optional
from urllib.parse import parse_qsl, urlencode, urljoin, urlparse, urlunparse

_HANGUL = re.compile(r'[가-힣]')
_UNSAFE_FILENAME = re.compile(r'[/\\?%*:|"<>\x00-\x1f\x7f]')


def clean_text(text: Optional[str]) -> str:
    """Collapse whitespace runs and strip."""
    if not text:
        return ''
    return re.sub(r'\s+', ' ', text).strip()


def clean_title(text: Optional[str]) -> str:
    """
    Clean a listing title.

    Removes the "상품명:" label some shops render for screen readers.
    Bracket-only titles such as "[이벤트]" are banners, not products,
    and return an empty string.
    """
    title = clean_text(text)
    title = re.sub(r'^상품명\s*:?\s*', '', title)
    if re.fullmatch(r'\[.+\]', title):
        return ''
    return title


def contains_hangul(text: Optional[str]) -> bool:
    return bool(text and _HANGUL.search(text))


def absolute_url(url: Optional[str], base: str) -> Optional[str]:
    """
    Resolve a possibly relative URL against base.

    Returns:
        Absolute URL, or None for empty, javascript: or data: values
    """
    if not url:
        return None
    url = url.strip()
    if not url or url.startswith(('javascript:', 'data:', '#')):
        return None
    if url.startswith('//'):
        return 'https:' + url
    return urljoin(base, url)


def with_query_param(url: str, name: str, value) -> str:
    """Set (or replace) one query parameter, keeping the others in order."""
    parts = urlparse(url)
    query = parse_qsl(parts.query, keep_blank_values=True)
    replaced = False
    updated = []
    for key, val in query:
        if key == name:
            if not replaced:
                updated.append((key, str(value)))
                replaced = True
        else:
            updated.append((key, val))
    if not replaced:
        updated.append((name, str(value)))
    return urlunparse(parts._replace(query=urlencode(updated, safe='/,')))


def safe_filename(name: str) -> str:
    """Make a category key usable as a file name ("옷장/드레스룸" -> "옷장드레스룸")."""
    cleaned = _UNSAFE_FILENAME.sub('', name or '').strip().rstrip('.')
    return cleaned or '_'
