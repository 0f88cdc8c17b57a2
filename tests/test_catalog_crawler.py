# -*- coding: utf-8 -*-
"""
Tests for xodindex.catalog.crawler - ListCrawler.

Created
-------
2026-10-17
"""

from unittest.mock import MagicMock

import pytest

from xodindex.catalog.crawler import ListCrawler
from xodindex.catalog.parser import XodPageParser
from xodindex.core.config import IndexConfig
from xodindex.core.errors import DiscoveryError, FetchError, HttpStatusError

BASE = "https://xod.io/libs/"


def _page(*ids):
    return "".join(f'<a href="/libs/{i}/">{i}</a>' for i in ids)


def _fetcher(pages):
    """Fetcher serving ``pages`` (url -> html or exception); others 404."""
    fetcher = MagicMock()

    def get_text(url):
        value = pages.get(url)
        if value is None:
            raise HttpStatusError(url, 404)
        if isinstance(value, Exception):
            raise value
        return value

    fetcher.get_text.side_effect = get_text
    return fetcher


def _crawler(fetcher):
    return ListCrawler(IndexConfig(libs_base_url=BASE), fetcher, XodPageParser())


class TestPageUrls:
    def test_first_page(self):
        assert _crawler(MagicMock()).page_urls(1) == [BASE]

    def test_later_pages(self):
        assert _crawler(MagicMock()).page_urls(3) == [
            f"{BASE}?page=3", f"{BASE}page/3/",
        ]


class TestCrawl:
    def test_stops_on_empty_page(self):
        fetcher = _fetcher({
            BASE: _page("xod/core", "xod/bits"),
            f"{BASE}?page=2": _page("alice/leds"),
            f"{BASE}?page=3": "<p>no more</p>",
        })
        assert _crawler(fetcher).crawl() == ["alice/leds", "xod/bits", "xod/core"]

    def test_falls_back_to_path_segment_url(self):
        fetcher = _fetcher({
            BASE: _page("xod/core"),
            f"{BASE}page/2/": _page("bob/motors"),
        })
        assert _crawler(fetcher).crawl() == ["bob/motors", "xod/core"]
        requested = [call.args[0] for call in fetcher.get_text.call_args_list]
        assert f"{BASE}?page=2" in requested
        assert f"{BASE}page/2/" in requested

    def test_stops_when_registry_loops(self):
        loop = _page("xod/core", "xod/bits")
        fetcher = MagicMock()
        fetcher.get_text.return_value = loop
        assert _crawler(fetcher).crawl() == ["xod/bits", "xod/core"]
        assert fetcher.get_text.call_count == 2

    def test_not_found_on_later_page_stops(self):
        fetcher = _fetcher({BASE: _page("xod/core")})
        assert _crawler(fetcher).crawl() == ["xod/core"]

    def test_first_page_not_found_is_fatal(self):
        with pytest.raises(DiscoveryError):
            _crawler(_fetcher({})).crawl()

    def test_first_page_failure_is_fatal(self):
        fetcher = _fetcher({BASE: FetchError(BASE, 5, RuntimeError("HTTP 503"))})
        with pytest.raises(DiscoveryError):
            _crawler(fetcher).crawl()

    def test_later_page_failure_is_fatal(self):
        fetcher = _fetcher({
            BASE: _page("xod/core"),
            f"{BASE}?page=2": HttpStatusError(f"{BASE}?page=2", 403),
        })
        with pytest.raises(HttpStatusError):
            _crawler(fetcher).crawl()

    def test_nothing_discovered_is_fatal(self):
        fetcher = _fetcher({BASE: "<p>no links</p>"})
        with pytest.raises(DiscoveryError):
            _crawler(fetcher).crawl()
