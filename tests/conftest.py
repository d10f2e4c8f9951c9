"""Shared test fixtures."""

from unittest.mock import MagicMock

import pytest
from bs4 import BeautifulSoup

from lunus.common.fetcher import PageFetcher
from lunus.models import CategoryConfig, DetailSection, ScrapedProduct, SiteConfig


@pytest.fixture(autouse=True)
def no_sleep(monkeypatch):
    """Disable time.sleep so retry and delay paths run instantly."""
    monkeypatch.setattr("time.sleep", lambda *_: None)


@pytest.fixture
def minimal_product():
    """Create a product with only the listing fields."""
    return ScrapedProduct(
        title="모먼트 3인 소파",
        product_url="https://www.alloso.co.kr/product/detail?productCd=A100",
        price=1290000,
        image_url="https://cdn.alloso.co.kr/AllosoUpload/goods/A100.jpg",
    )


@pytest.fixture
def full_product():
    """Create a normalized product with detail content."""
    return ScrapedProduct(
        title="모먼트 3인 소파",
        product_url="https://www.alloso.co.kr/product/detail?productCd=A100",
        price=1290000,
        image_url="https://cdn.alloso.co.kr/AllosoUpload/goods/A100.jpg",
        source="alloso",
        brand="알로소",
        category="소파",
        detail_images=[
            "https://cdn.alloso.co.kr/AllosoUpload/contents/A100_1.jpg",
            "https://cdn.alloso.co.kr/AllosoUpload/contents/A100_2.jpg",
        ],
        detail_sections=[DetailSection(title="소재", description="이탈리아산 가죽")],
        scraped_at="2025-01-15T10:00:00",
    )


@pytest.fixture
def sample_site():
    """Small selector-based site configuration."""
    return SiteConfig(
        source="alloso",
        brand="알로소",
        folder="알로소",
        base_url="https://www.alloso.co.kr",
        categories=[
            CategoryConfig(key="소파", url="https://www.alloso.co.kr/product/list?categoryNo=1"),
            CategoryConfig(key="스토리지", url="https://www.alloso.co.kr/product/list?categoryNo=3"),
        ],
        category_mapping={"소파": "소파", "스토리지": "수납"},
        pagination={"max_pages": 3, "per_category_limit": 100},
        listing={
            "card": "ul.product_list > li.goods_item",
            "link": "a.link_goods",
            "title": [".goods_info .tit"],
            "price": [".goods_price .selling_price"],
            "image": [".goods_thumb img"],
        },
        detail={
            "image_include": ["cdn.alloso.co.kr/AllosoUpload/contents"],
            "exclude_within": ".detail_specify",
            "limit": 2,
        },
    )


@pytest.fixture
def listing_html():
    """Listing page with two product cards and one banner card."""
    return """
    <html><body>
    <ul class="product_list">
      <li class="goods_item">
        <a class="link_goods" href="/product/detail?productCd=A100">
          <div class="goods_thumb"><img data-src="//cdn.alloso.co.kr/AllosoUpload/goods/A100.jpg" src="data:image/gif;base64,R0l"></div>
          <div class="goods_info"><p class="tit">모먼트 3인 소파</p></div>
          <div class="goods_price"><span class="selling_price">1,290,000원</span></div>
        </a>
      </li>
      <li class="goods_item">
        <a class="link_goods" href="/product/detail?productCd=A200">
          <div class="goods_thumb"><img src="/AllosoUpload/goods/A200.jpg" alt="노드 테이블"></div>
          <div class="goods_info"><p class="tit">  노드   테이블 </p></div>
          <div class="goods_price"><span class="selling_price">890,000원</span></div>
        </a>
      </li>
      <li class="goods_item">
        <div class="goods_info"><p class="tit">[기획전]</p></div>
      </li>
    </ul>
    </body></html>
    """


@pytest.fixture
def listing_soup(listing_html):
    return BeautifulSoup(listing_html, "lxml")


@pytest.fixture
def mock_fetcher():
    """PageFetcher double; set get_soup/get_json side effects per test."""
    fetcher = MagicMock(spec=PageFetcher)
    return fetcher
