"""Tests for lunus/extraction/parsers/listing_parser.py"""

import pytest
from bs4 import BeautifulSoup

from lunus.extraction.parsers import get_listing_parser
from lunus.extraction.parsers.listing_parser import SelectorListingParser, image_source


def make_parser(html: str, config: dict, base_url: str = "https://www.example.co.kr") -> SelectorListingParser:
    """Create a SelectorListingParser from an HTML string."""
    return SelectorListingParser(BeautifulSoup(html, "lxml"), base_url, config)


class TestParse:
    def test_parses_cards(self, listing_soup, sample_site):
        parser = SelectorListingParser(listing_soup, sample_site.base_url, sample_site.listing)
        products = parser.parse()

        assert [p.title for p in products] == ["모먼트 3인 소파", "노드 테이블"]
        assert products[0].product_url == "https://www.alloso.co.kr/product/detail?productCd=A100"
        assert products[0].price == 1290000
        assert products[1].price == 890000

    def test_lazy_image_and_relative_image(self, listing_soup, sample_site):
        products = SelectorListingParser(listing_soup, sample_site.base_url, sample_site.listing).parse()

        assert products[0].image_url == "https://cdn.alloso.co.kr/AllosoUpload/goods/A100.jpg"
        assert products[1].image_url == "https://www.alloso.co.kr/AllosoUpload/goods/A200.jpg"

    def test_no_card_selector(self, listing_soup):
        assert SelectorListingParser(listing_soup, "https://www.alloso.co.kr", {}).parse() == []

    def test_duplicate_urls_kept_once(self):
        html = """
        <div class="item"><a href="/goods/1">소파</a></div>
        <div class="item"><a href="/goods/1">소파</a></div>
        """
        products = make_parser(html, {"card": ".item", "title": ["a"]}).parse()
        assert len(products) == 1

    def test_card_is_anchor(self):
        html = '<a class="card" href="/goods/7"><span class="name">수납장</span></a>'
        products = make_parser(html, {"card": "a.card", "title": [".name"]}).parse()
        assert products[0].product_url == "https://www.example.co.kr/goods/7"


class TestExtractUrl:
    def test_id_attribute_and_pattern(self):
        html = '<li class="prd" data-goods-no="G123"><a href="javascript:void(0)">침대</a></li>'
        config = {
            "card": "li.prd",
            "id_attrs": ["data-goods-no"],
            "url_pattern": "/goods/view?no={id}",
            "title": ["a"],
        }
        products = make_parser(html, config).parse()
        assert products[0].product_url == "https://www.example.co.kr/goods/view?no=G123"

    def test_href_contains_filter(self):
        html = """
        <li><a href="/event/1">기획전 소파</a></li>
        <li><a href="/goods/goods_view.php?goodsNo=5">소파</a></li>
        """
        config = {"card": "li", "href_contains": ["goods_view.php"], "title": ["a"]}
        products = make_parser(html, config).parse()
        assert [p.title for p in products] == ["소파"]

    def test_href_pattern_filter(self):
        html = """
        <li><a href="/product/list.do?categoryNo=3">의자</a></li>
        <li><a href="/product/item.do?productNo=991">의자</a></li>
        """
        config = {"card": "li", "href_pattern": r"productNo=\d+", "title": ["a"]}
        products = make_parser(html, config).parse()
        assert products[0].product_url.endswith("productNo=991")
        assert len(products) == 1

    def test_javascript_href_rejected(self):
        html = '<li><a href="javascript:goDetail(1)">책상</a></li>'
        assert make_parser(html, {"card": "li", "title": ["a"]}).parse() == []


class TestExtractTitle:
    def test_alt_fallback(self):
        html = '<li><a href="/goods/1"><img src="/a.jpg" alt="원목 식탁"></a></li>'
        products = make_parser(html, {"card": "li", "title": [".missing"]}).parse()
        assert products[0].title == "원목 식탁"

    def test_title_join(self):
        html = '<li><a href="/goods/1"><em class="series">아르떼</em><span class="name">4인 식탁</span></a></li>'
        config = {"card": "li", "title": [".series", ".name"], "title_join": True}
        assert make_parser(html, config).parse()[0].title == "아르떼 4인 식탁"

    def test_require_hangul_skips_latin_labels(self):
        html = '<li><a href="/goods/1"><span class="t">NEW</span><span class="t">라운지 체어</span></a></li>'
        config = {"card": "li", "title": [".t"], "title_require_hangul": True}
        assert make_parser(html, config).parse()[0].title == "라운지 체어"

    def test_title_exclude(self):
        html = '<li><a href="/goods/1">배송비 결제</a></li><li><a href="/goods/2">협탁</a></li>'
        config = {"card": "li", "title": ["a"], "title_exclude": ["배송비"]}
        assert [p.title for p in make_parser(html, config).parse()] == ["협탁"]

    def test_title_strip(self):
        html = '<li><a href="/goods/1">모듈 소파 (3)</a></li>'
        config = {"card": "li", "title": ["a"], "title_strip": [r"\s*\(\d+\)$"]}
        assert make_parser(html, config).parse()[0].title == "모듈 소파"

    def test_banner_card_skipped(self):
        html = '<li><a href="/event/9">[이벤트]</a></li>'
        assert make_parser(html, {"card": "li", "title": ["a"]}).parse() == []


class TestExtractPrice:
    def test_sale_price_first(self):
        html = """
        <li><a href="/goods/1">소파</a>
          <span class="org">1,500,000원</span><span class="sale">1,190,000원</span>
        </li>
        """
        config = {"card": "li", "title": ["a"], "sale_price": [".sale"], "price": [".org"]}
        assert make_parser(html, config).parse()[0].price == 1190000

    def test_falls_back_to_price(self):
        html = '<li><a href="/goods/1">소파</a><span class="org">1,500,000원</span><span class="sale"></span></li>'
        config = {"card": "li", "title": ["a"], "sale_price": [".sale"], "price": [".org"]}
        assert make_parser(html, config).parse()[0].price == 1500000

    def test_price_text_contains(self):
        html = '<li><a href="/goods/1">소파</a><p>리뷰 1234</p><p>판매가 459,000원</p></li>'
        config = {"card": "li", "title": ["a"], "price_text_contains": "원"}
        assert make_parser(html, config).parse()[0].price == 459000

    def test_price_min(self):
        html = '<li><a href="/goods/1">소파</a><span class="p">5,000 459,000</span></li>'
        config = {"card": "li", "title": ["a"], "price": [".p"], "price_min": 10000}
        assert make_parser(html, config).parse()[0].price == 459000

    def test_require_price(self):
        html = '<li><a href="/goods/1">소파</a><span class="p">품절</span></li>'
        config = {"card": "li", "title": ["a"], "price": [".p"], "require_price": True}
        assert make_parser(html, config).parse() == []

    def test_missing_price_is_none(self):
        html = '<li><a href="/goods/1">소파</a></li>'
        assert make_parser(html, {"card": "li", "title": ["a"]}).parse()[0].price is None


class TestExtractImage:
    def test_image_prefer(self):
        html = """
        <li><a href="/goods/1">소파</a>
          <img src="/web/upload/icon_sale.gif"><img src="/web/product/medium/sofa.jpg">
        </li>
        """
        config = {"card": "li", "title": ["a"], "image_prefer": ["/product/"]}
        assert make_parser(html, config).parse()[0].image_url == "https://www.example.co.kr/web/product/medium/sofa.jpg"

    def test_image_scope_parent(self):
        html = """
        <li class="box">
          <div class="thumb"><img src="/img/bed.jpg"></div>
          <a class="name" href="/goods/3"><span>침대</span></a>
        </li>
        """
        config = {"card": "a.name", "title": ["span"], "image_scope": "li"}
        assert make_parser(html, config).parse()[0].image_url == "https://www.example.co.kr/img/bed.jpg"

    def test_require_image(self):
        html = '<li><a href="/goods/1">소파</a></li>'
        config = {"card": "li", "title": ["a"], "require_image": True}
        assert make_parser(html, config).parse() == []


class TestImageSource:
    def test_cafe24_attribute_first(self):
        img = BeautifulSoup('<img ec-data-src="/a.jpg" src="/b.jpg">', "lxml").img
        assert image_source(img) == "/a.jpg"

    def test_skips_data_uri(self):
        img = BeautifulSoup('<img src="data:image/gif;base64,R0l">', "lxml").img
        assert image_source(img) is None


class TestGetListingParser:
    def test_known_kinds(self):
        assert get_listing_parser("selector") is SelectorListingParser
        assert get_listing_parser(None) is SelectorListingParser

    def test_unknown_kind(self):
        with pytest.raises(ValueError, match="Unsupported parser"):
            get_listing_parser("xpath")
