"""
Detail Page Parser

Extracts detail content from a product page:
- Detail images (long description images), filtered and de-duplicated
- Gallery and thumbnail images
- Titled text sections
- Detail HTML with links made absolute and lazy-load handlers inlined

Which nodes to read is configured per site in the `detail` block of
config/sites.yaml.
"""

import copy
import re
from typing import Any, Dict, List, Optional, Sequence

from bs4 import BeautifulSoup, Tag

from ...common.constants import DEFAULT_IMAGE_EXCLUDE
from ...common.text_utils import absolute_url, clean_text
from ...models import DetailSection
from .listing_parser import IMAGE_ATTRS, image_source

# onload="$(this).css('display','block')" used by GodoMall/Cafe24 editors
_JQUERY_SHOW = re.compile(r"\$\(this\)\.css\(\s*['\"]display['\"]\s*,\s*['\"]block['\"]\s*\)")


class DetailPageParser:
    """
    Parses a product detail page.

    Config keys:
        image_selector, image_include, image_exclude, image_pattern,
        exclude_within, skip, limit,
        gallery_selector, gallery_include,
        thumbnail_selector, thumbnail_include,
        main_image_selector,
        section_selector, section_title, section_text, section_limit,
        html_selectors

    Usage:
        parser = DetailPageParser(soup, product.product_url, site.detail)
        fields = parser.parse()
    """

    def __init__(self, soup: BeautifulSoup, base_url: str, config: Dict[str, Any]):
        """
        Initialize the detail parser.

        Args:
            soup: Parsed detail page
            base_url: Page URL, used to resolve relative sources
            config: The site's `detail` block
        """
        self.soup = soup
        self.base_url = base_url
        self.config = config

    def parse(self) -> Dict[str, Any]:
        """
        Extract all configured detail fields.

        Returns:
            Dict with detail_images, gallery_images, thumbnail_images,
            detail_sections, detail_html and main_image
        """
        return {
            'detail_images': self.extract_detail_images(),
            'gallery_images': self.extract_gallery_images(),
            'thumbnail_images': self.extract_thumbnail_images(),
            'detail_sections': self.extract_sections(),
            'detail_html': self.extract_html(),
            'main_image': self.extract_main_image(),
        }

    # ── Images ────────────────────────────────────────────────────────────────

    def extract_detail_images(self) -> List[str]:
        cfg = self.config
        exclude = cfg.get('image_exclude')
        images = self.collect_images(
            cfg.get('image_selector', 'img'),
            include=cfg.get('image_include', ()),
            exclude=DEFAULT_IMAGE_EXCLUDE if exclude is None else exclude,
            pattern=cfg.get('image_pattern'),
            exclude_within=cfg.get('exclude_within'),
        )

        skip = int(cfg.get('skip', 0))
        images = images[skip:]
        limit = int(cfg.get('limit', 0))
        return images[:limit] if limit else images

    def extract_gallery_images(self) -> List[str]:
        selector = self.config.get('gallery_selector')
        if not selector:
            return []
        return self.collect_images(
            selector,
            include=self.config.get('gallery_include', ()),
            exclude=DEFAULT_IMAGE_EXCLUDE,
        )

    def extract_thumbnail_images(self) -> List[str]:
        selector = self.config.get('thumbnail_selector')
        if not selector:
            return []
        return self.collect_images(
            selector,
            include=self.config.get('thumbnail_include', ()),
            exclude=DEFAULT_IMAGE_EXCLUDE,
        )

    def extract_main_image(self) -> Optional[str]:
        selector = self.config.get('main_image_selector')
        if not selector:
            return None
        img = self.soup.select_one(selector)
        if img is None:
            return None
        return absolute_url(image_source(img), self.base_url)

    def collect_images(
        self,
        selector: str,
        include: Sequence[str] = (),
        exclude: Sequence[str] = (),
        pattern: Optional[str] = None,
        exclude_within: Optional[str] = None,
    ) -> List[str]:
        """
        Collect image URLs under a selector.

        Args:
            selector: CSS selector for <img> elements
            include: Keep only sources containing one of these substrings
            exclude: Drop sources containing one of these (case-insensitive)
            pattern: Keep only sources matching this regex
            exclude_within: Drop images inside elements matching this selector

        Returns:
            Absolute URLs in document order, unique
        """
        regex = re.compile(pattern) if pattern else None
        images: List[str] = []

        for img in self.soup.select(selector):
            if exclude_within and img.css.closest(exclude_within) is not None:
                continue
            src = absolute_url(image_source(img), self.base_url)
            if not src or src in images:
                continue
            if include and not any(s in src for s in include):
                continue
            if any(s.lower() in src.lower() for s in exclude):
                continue
            if regex and not regex.search(src):
                continue
            images.append(src)

        return images

    # ── Text ──────────────────────────────────────────────────────────────────

    def extract_sections(self) -> List[DetailSection]:
        cfg = self.config
        selector = cfg.get('section_selector')
        if not selector:
            return []

        sections = []
        for node in self.soup.select(selector):
            if cfg.get('section_title') or cfg.get('section_text'):
                title_el = node.select_one(cfg['section_title']) if cfg.get('section_title') else None
                title = clean_text(title_el.get_text(' ')) if title_el else ''
                texts = [
                    clean_text(el.get_text(' '))
                    for el in node.select(cfg.get('section_text') or 'p')
                ]
                description = '\n'.join(t for t in texts if t)
            else:
                title = ''
                description = clean_text(node.get_text(' '))

            if title or description:
                sections.append(DetailSection(title=title, description=description))

        limit = int(cfg.get('section_limit', 0))
        return sections[:limit] if limit else sections

    # ── HTML ──────────────────────────────────────────────────────────────────

    def extract_html(self) -> str:
        """
        Return the detail HTML of the first selector that matches.

        All nodes matched by that selector are concatenated.
        """
        for selector in self.config.get('html_selectors', []):
            nodes = [n for n in self.soup.select(selector) if n.get_text(strip=True) or n.find('img')]
            if nodes:
                return ''.join(str(self._rewrite(node)) for node in nodes)
        return ''

    def _rewrite(self, node: Tag) -> Tag:
        """Copy a node with absolute src/href and inlined show handlers."""
        node = copy.copy(node)

        for tag in [node] + node.find_all(True):
            if tag.name == 'img':
                src = image_source(tag)
                if src:
                    tag['src'] = absolute_url(src, self.base_url) or src
                for attr in IMAGE_ATTRS[:-1]:
                    if attr in tag.attrs:
                        del tag[attr]

            for attr in ('src', 'href'):
                value = tag.get(attr)
                if value and not value.startswith(('http://', 'https://', 'data:', '#', 'javascript:', 'mailto:')):
                    resolved = absolute_url(value, self.base_url)
                    if resolved:
                        tag[attr] = resolved

            onload = tag.get('onload')
            if onload and _JQUERY_SHOW.search(onload):
                del tag['onload']
                style = tag.get('style', '')
                style = re.sub(r'display\s*:\s*none;?', '', style).strip()
                tag['style'] = (style + ' display: block;').strip()

        return node
