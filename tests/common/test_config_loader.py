"""Tests for lunus/common/config_loader.py"""

import os

import pytest

from lunus.common.config_loader import (
    build_site_config,
    get_brand_lookup,
    get_supported_sites,
    load_config,
    load_env,
    load_settings,
    load_site,
    load_sites,
)

ALL_SITES = [
    "alloso", "emons", "enex", "flatpoint", "hanssem", "iloom", "inart",
    "jangin", "livart", "wooami", "casamia", "dongsuh", "villarecord",
]


@pytest.fixture(autouse=True)
def clear_site_overrides(monkeypatch):
    for source in ALL_SITES:
        for suffix in ("CATEGORIES", "MAX_PAGES", "PER_CATEGORY_LIMIT"):
            monkeypatch.delenv(f"{source.upper()}_{suffix}", raising=False)


class TestLoadConfig:
    def test_missing_file_raises(self):
        with pytest.raises(FileNotFoundError):
            load_config("nonexistent.yaml")

    def test_settings_sections(self):
        settings = load_settings()
        for section in ("http", "paths", "detail", "cleaning", "vector"):
            assert section in settings

    def test_settings_price_range(self):
        price = load_settings()["price"]
        assert price["min"] < price["max"]


class TestLoadSites:
    def test_all_sites_configured(self):
        assert sorted(get_supported_sites()) == sorted(ALL_SITES)

    def test_every_site_has_categories(self):
        for source, site in load_sites().items():
            assert site.categories, source
            assert site.base_url.startswith("https://"), source
            for category in site.categories:
                assert category.url.startswith("http"), (source, category.key)

    def test_parsers_are_known(self):
        for site in load_sites().values():
            assert site.parser in ("selector", "json", "anchor")

    def test_hanssem_uses_embedded_json(self):
        site = load_site("hanssem")
        assert site.parser == "json"
        assert site.listing["embedded_json"] == "script#__NEXT_DATA__"

    def test_load_site_case_insensitive(self):
        site = load_site(" Livart ")
        assert site.source == "livart"
        assert site.brand == "리바트"

    def test_unknown_site_raises(self):
        with pytest.raises(ValueError, match="Unsupported site"):
            load_site("ikea")


class TestBuildSiteConfig:
    def test_defaults(self):
        site = build_site_config("demo", {"base_url": "https://demo.kr"})
        assert site.brand == "demo"
        assert site.folder == "demo"
        assert site.parser == "selector"
        assert site.categories == []

    def test_folder_defaults_to_brand(self):
        site = build_site_config("demo", {"brand": "데모"})
        assert site.folder == "데모"

    def test_categories_override(self, monkeypatch):
        monkeypatch.setenv("DEMO_CATEGORIES", '[{"key": "소파", "url": "https://demo.kr/sofa"}]')
        site = build_site_config("demo", {
            "categories": [{"key": "침대", "url": "https://demo.kr/bed"}],
        })
        assert [c.key for c in site.categories] == ["소파"]

    def test_invalid_categories_override_ignored(self, monkeypatch):
        monkeypatch.setenv("DEMO_CATEGORIES", "not json")
        site = build_site_config("demo", {
            "categories": [{"key": "침대", "url": "https://demo.kr/bed"}],
        })
        assert [c.key for c in site.categories] == ["침대"]

    def test_pagination_overrides(self, monkeypatch):
        monkeypatch.setenv("DEMO_MAX_PAGES", "2")
        monkeypatch.setenv("DEMO_PER_CATEGORY_LIMIT", "50")
        site = build_site_config("demo", {"pagination": {"max_pages": 10}})
        assert site.max_pages == 2
        assert site.per_category_limit == 50

    def test_non_integer_override_ignored(self, monkeypatch):
        monkeypatch.setenv("DEMO_MAX_PAGES", "many")
        site = build_site_config("demo", {"pagination": {"max_pages": 10}})
        assert site.max_pages == 10


class TestBrandLookup:
    def test_brand_to_source(self):
        lookup = get_brand_lookup()
        assert lookup["일룸"] == "iloom"
        assert lookup["한샘"] == "hanssem"

    def test_explicit_sites(self, sample_site):
        assert get_brand_lookup({"alloso": sample_site}) == {"알로소": "alloso"}


class TestLoadEnv:
    def test_prefers_env_local(self, tmp_path, monkeypatch):
        monkeypatch.delenv("LUNUS_TEST_VALUE", raising=False)
        (tmp_path / ".env").write_text("LUNUS_TEST_VALUE=plain\n", encoding="utf-8")
        (tmp_path / ".env.local").write_text("LUNUS_TEST_VALUE=local\n", encoding="utf-8")

        loaded = load_env(tmp_path)

        assert loaded == tmp_path / ".env.local"
        assert os.environ["LUNUS_TEST_VALUE"] == "local"
        monkeypatch.delenv("LUNUS_TEST_VALUE", raising=False)

    def test_no_file(self, tmp_path):
        assert load_env(tmp_path) is None
