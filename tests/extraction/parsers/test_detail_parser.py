"""Tests for lunus/extraction/parsers/detail_parser.py"""

from bs4 import BeautifulSoup

from lunus.extraction.parsers.detail_parser import DetailPageParser

PAGE_URL = "https://www.alloso.co.kr/product/detail?productCd=A100"

DETAIL_HTML = """
<html><body>
<div class="thumb_list">
  <img src="/AllosoUpload/goods/A100_s1.jpg">
  <img src="/AllosoUpload/goods/A100_s2.jpg">
</div>
<div class="main_img"><img data-src="//cdn.alloso.co.kr/AllosoUpload/goods/A100_main.jpg"></div>
<div class="detail_cont">
  <img src="https://cdn.alloso.co.kr/AllosoUpload/contents/A100_1.jpg">
  <img data-src="//cdn.alloso.co.kr/AllosoUpload/contents/A100_2.jpg" src="data:image/gif;base64,R0l">
  <img src="https://cdn.alloso.co.kr/AllosoUpload/contents/A100_1.jpg">
  <img src="https://cdn.alloso.co.kr/AllosoUpload/contents/icon_new.png">
  <div class="detail_specify"><img src="https://cdn.alloso.co.kr/AllosoUpload/contents/size_chart.jpg"></div>
  <img src="https://cdn.alloso.co.kr/AllosoUpload/contents/A100_3.jpg">
</div>
<div class="info_box"><h4>소재</h4><p>이탈리아산 가죽</p><p>오크 원목</p></div>
<div class="info_box"><h4>관리</h4><p>마른 천으로 닦아주세요</p></div>
<div class="info_box"><h4></h4></div>
<img src="/images/banner.jpg">
</body></html>
"""


def make_parser(config: dict, html: str = DETAIL_HTML, base_url: str = PAGE_URL) -> DetailPageParser:
    return DetailPageParser(BeautifulSoup(html, "lxml"), base_url, config)


class TestDetailImages:
    CONFIG = {
        "image_include": ["cdn.alloso.co.kr/AllosoUpload/contents"],
        "exclude_within": ".detail_specify",
    }

    def test_filters_and_dedupes(self):
        images = make_parser(self.CONFIG).extract_detail_images()
        assert images == [
            "https://cdn.alloso.co.kr/AllosoUpload/contents/A100_1.jpg",
            "https://cdn.alloso.co.kr/AllosoUpload/contents/A100_2.jpg",
            "https://cdn.alloso.co.kr/AllosoUpload/contents/A100_3.jpg",
        ]

    def test_limit(self):
        images = make_parser({**self.CONFIG, "limit": 2}).extract_detail_images()
        assert len(images) == 2

    def test_skip(self):
        images = make_parser({**self.CONFIG, "skip": 1}).extract_detail_images()
        assert images[0].endswith("A100_2.jpg")

    def test_image_pattern(self):
        images = make_parser({**self.CONFIG, "image_pattern": r"_3\.jpg$"}).extract_detail_images()
        assert images == ["https://cdn.alloso.co.kr/AllosoUpload/contents/A100_3.jpg"]

    def test_empty_exclude_list_keeps_icons(self):
        config = {"image_selector": ".detail_cont img", "image_exclude": []}
        images = make_parser(config).extract_detail_images()
        assert any("icon_new" in src for src in images)

    def test_default_exclude_drops_icons(self):
        images = make_parser({"image_selector": ".detail_cont img"}).extract_detail_images()
        assert not any("icon_new" in src for src in images)


class TestOtherImages:
    def test_thumbnails(self):
        parser = make_parser({"thumbnail_selector": ".thumb_list img"})
        assert parser.extract_thumbnail_images() == [
            "https://www.alloso.co.kr/AllosoUpload/goods/A100_s1.jpg",
            "https://www.alloso.co.kr/AllosoUpload/goods/A100_s2.jpg",
        ]

    def test_gallery_include(self):
        parser = make_parser({"gallery_selector": "img", "gallery_include": ["/goods/A100_s"]})
        assert len(parser.extract_gallery_images()) == 2

    def test_main_image(self):
        parser = make_parser({"main_image_selector": ".main_img img"})
        assert parser.extract_main_image() == "https://cdn.alloso.co.kr/AllosoUpload/goods/A100_main.jpg"

    def test_unconfigured_selectors(self):
        parser = make_parser({})
        assert parser.extract_gallery_images() == []
        assert parser.extract_thumbnail_images() == []
        assert parser.extract_main_image() is None


class TestSections:
    def test_title_and_text(self):
        parser = make_parser({"section_selector": ".info_box", "section_title": "h4", "section_text": "p"})
        sections = parser.extract_sections()

        assert len(sections) == 2
        assert sections[0].title == "소재"
        assert sections[0].description == "이탈리아산 가죽\n오크 원목"

    def test_whole_node_text(self):
        sections = make_parser({"section_selector": ".info_box p"}).extract_sections()
        assert sections[0].title == ""
        assert sections[0].description == "이탈리아산 가죽"

    def test_section_limit(self):
        config = {"section_selector": ".info_box p", "section_limit": 1}
        assert len(make_parser(config).extract_sections()) == 1

    def test_no_selector(self):
        assert make_parser({}).extract_sections() == []


class TestDetailHtml:
    HTML = """
    <div class="goods_desc">
      <img data-src="/upload/a.jpg" src="data:image/gif;base64,R0l"
           onload="$(this).css('display','block')" style="display:none;">
      <a href="/event/1">이벤트</a>
    </div>
    """
    BASE = "https://www.enex.co.kr/goods/goods_view.php?goodsNo=1"

    def test_first_matching_selector(self):
        parser = make_parser({"html_selectors": [".missing", ".goods_desc"]}, self.HTML, self.BASE)
        assert parser.extract_html().startswith('<div class="goods_desc">')

    def test_rewrites_lazy_images_and_links(self):
        html = make_parser({"html_selectors": [".goods_desc"]}, self.HTML, self.BASE).extract_html()

        assert 'src="https://www.enex.co.kr/upload/a.jpg"' in html
        assert "data-src" not in html
        assert 'href="https://www.enex.co.kr/event/1"' in html

    def test_inlines_jquery_show_handler(self):
        html = make_parser({"html_selectors": [".goods_desc"]}, self.HTML, self.BASE).extract_html()

        assert "onload" not in html
        assert 'style="display: block;"' in html

    def test_original_soup_untouched(self):
        parser = make_parser({"html_selectors": [".goods_desc"]}, self.HTML, self.BASE)
        parser.extract_html()
        assert parser.soup.img.get("data-src") == "/upload/a.jpg"

    def test_concatenates_all_matches(self):
        html = '<div class="d"><p>상세 1</p></div><div class="d"><p>상세 2</p></div><div class="d"></div>'
        result = make_parser({"html_selectors": [".d"]}, html).extract_html()
        assert result.count('<div class="d">') == 2

    def test_no_match(self):
        assert make_parser({"html_selectors": [".missing"]}).extract_html() == ""


class TestParse:
    def test_all_fields(self):
        fields = make_parser({"image_include": ["AllosoUpload/contents"]}).parse()
        assert set(fields) == {
            "detail_images", "gallery_images", "thumbnail_images",
            "detail_sections", "detail_html", "main_image",
        }
        assert fields["detail_html"] == ""
