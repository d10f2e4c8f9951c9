"""Tests for lunus/extraction/parsers/json_listing_parser.py"""

import json

from bs4 import BeautifulSoup

from lunus.extraction.parsers.json_listing_parser import (
    JsonListingParser,
    extract_embedded_json,
    find_product_list,
)


def next_data_page(payload) -> BeautifulSoup:
    html = f'<html><body><script id="__NEXT_DATA__" type="application/json">{json.dumps(payload, ensure_ascii=False)}</script></body></html>'
    return BeautifulSoup(html, "lxml")


class TestFindProductList:
    def test_known_path(self):
        body = {"data": {"list": [{"goodsNm": "소파", "goodsId": 1}]}}
        assert find_product_list(body) == [{"goodsNm": "소파", "goodsId": 1}]

    def test_top_level_list(self):
        body = [{"name": "의자", "url": "/goods/2"}]
        assert find_product_list(body) == body

    def test_nested_search(self):
        items = [{"goodsNm": "침대", "goodsId": 793}]
        body = {"props": {"pageProps": {"dehydratedState": {"queries": [
            {"state": {"data": {"pages": [{"goodsList": items}]}}},
        ]}}}}
        assert find_product_list(body) == items

    def test_ignores_lists_without_products(self):
        body = {"menu": [{"label": "소파"}], "nested": {"products": [{"title": "식탁", "id": 9}]}}
        assert find_product_list(body) == [{"title": "식탁", "id": 9}]

    def test_nothing_found(self):
        assert find_product_list({"meta": {"total": 0}}) == []
        assert find_product_list(None) == []


class TestExtractEmbeddedJson:
    def test_parses_script(self):
        soup = next_data_page({"props": {"pageProps": {}}})
        assert extract_embedded_json(soup) == {"props": {"pageProps": {}}}

    def test_missing_script(self):
        soup = BeautifulSoup("<html><body></body></html>", "lxml")
        assert extract_embedded_json(soup) is None

    def test_invalid_json(self):
        soup = BeautifulSoup('<script id="__NEXT_DATA__">{not json</script>', "lxml")
        assert extract_embedded_json(soup) is None


class TestJsonListingParser:
    def make_parser(self, body):
        return JsonListingParser(
            body,
            "https://store.hanssem.com",
            image_base="https://image.hanssem.com",
            url_pattern="/goods/{id}",
        )

    def test_id_and_url_pattern(self):
        body = {"items": [{"goodsNm": "샘 책상", "goodsId": 123, "salePrice": 259000}]}
        product = self.make_parser(body).parse()[0]

        assert product.title == "샘 책상"
        assert product.product_url == "https://store.hanssem.com/goods/123"
        assert product.price == 259000

    def test_explicit_url_wins(self):
        body = {"items": [{"name": "소파", "url": "/goods/55?ref=list", "goodsId": 1}]}
        assert self.make_parser(body).parse()[0].product_url == "https://store.hanssem.com/goods/55?ref=list"

    def test_relative_image_uses_image_base(self):
        body = {"items": [{"goodsNm": "소파", "goodsId": 1, "imageUrl": "/gds/500/1.jpg"}]}
        assert self.make_parser(body).parse()[0].image_url == "https://image.hanssem.com/gds/500/1.jpg"

    def test_protocol_relative_image(self):
        body = {"items": [{"goodsNm": "소파", "goodsId": 1, "thumbnail": "//img.hanssem.com/1.jpg"}]}
        assert self.make_parser(body).parse()[0].image_url == "https://img.hanssem.com/1.jpg"

    def test_minimum_price_field(self):
        body = {"items": [{"goodsNm": "소파", "goodsId": 1, "price": 990000, "salePrice": 790000}]}
        assert self.make_parser(body).parse()[0].price == 790000

    def test_skips_items_without_title_or_url(self):
        body = {"items": [
            {"goodsId": 1},
            {"goodsNm": "소파"},
            "not a dict",
            {"goodsNm": "식탁", "goodsId": 2},
        ]}
        products = JsonListingParser(body, "https://store.hanssem.com").parse()
        assert products == []

        products = self.make_parser(body).parse()
        assert [p.title for p in products] == ["식탁"]

    def test_dedupes_by_url(self):
        body = {"items": [
            {"goodsNm": "소파", "goodsId": 1},
            {"goodsNm": "소파 (재입고)", "goodsId": 1},
        ]}
        assert len(self.make_parser(body).parse()) == 1

    def test_next_data_end_to_end(self):
        soup = next_data_page({"props": {"pageProps": {"initialData": {"goodsList": [
            {"goodsNm": "바흐 침대", "goodsId": 793, "salePrice": "1,090,000"},
        ]}}}})
        products = self.make_parser(extract_embedded_json(soup)).parse()

        assert products[0].product_url == "https://store.hanssem.com/goods/793"
        assert products[0].price == 1090000
