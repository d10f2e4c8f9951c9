"""Tests for lunus/common/price_utils.py"""

from lunus.common.price_utils import digits_only, parse_first_price, parse_price, price_from_fields


class TestParsePrice:
    def test_comma_separated(self):
        assert parse_price("1,290,000원") == 1290000

    def test_takes_minimum_of_list_and_sale_price(self):
        assert parse_price("1,290,000원 990,000원") == 990000

    def test_dot_separated(self):
        assert parse_price("1.290.000") == 1290000

    def test_plain_digits(self):
        assert parse_price("판매가 459000") == 459000

    def test_ignores_small_numbers(self):
        # discount percentages and review counts
        assert parse_price("30% 리뷰 12 890,000원") == 890000

    def test_out_of_range_only(self):
        assert parse_price("999") is None

    def test_custom_min(self):
        assert parse_price("5,000원 25,000원", min_price=10000) == 25000

    def test_empty(self):
        assert parse_price("") is None
        assert parse_price(None) is None


class TestParseFirstPrice:
    def test_first_number(self):
        assert parse_first_price("590,000원 ~") == 590000

    def test_no_bounds(self):
        assert parse_first_price("50원") == 50

    def test_no_number(self):
        assert parse_first_price("가격문의") is None


class TestPriceFromFields:
    def test_minimum_positive_field(self):
        item = {"price": 1200000, "salePrice": 990000, "dcPrice": 0}
        assert price_from_fields(item) == 990000

    def test_string_values(self):
        assert price_from_fields({"sellPrice": "459,000"}) == 459000

    def test_discount_rate_fallback(self):
        assert price_from_fields({"price": 100000, "discountRate": 20}, fields=("salePrice",)) == 80000

    def test_nothing(self):
        assert price_from_fields({"name": "소파"}) is None


class TestDigitsOnly:
    def test_strips_non_digits(self):
        assert digits_only("₩1,290,000") == "1290000"

    def test_none(self):
        assert digits_only(None) == ""
