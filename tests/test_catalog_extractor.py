# -*- coding: utf-8 -*-
"""
Tests for xodindex.catalog.extractor - DetailExtractor.

Created
-------
2026-10-17
"""

from unittest.mock import MagicMock

import pytest

from xodindex.catalog.extractor import DetailExtractor
from xodindex.catalog.parser import XodPageParser
from xodindex.core.config import IndexConfig
from xodindex.core.errors import FetchError


@pytest.fixture
def fetcher():
    return MagicMock()


@pytest.fixture
def extractor(fetcher):
    return DetailExtractor(IndexConfig(), fetcher, XodPageParser())


class TestExtract:
    def test_record(self, extractor, fetcher):
        fetcher.get_text.return_value = (
            '<meta name="description" content="Servo helpers">'
            '<p>2021-05-05</p><p>GPL-3.0</p>'
            '<code>alice/servo@1.0.0</code><code>alice/servo@1.10.0</code>'
        )
        record = extractor.extract("alice/servo")

        fetcher.get_text.assert_called_once_with("https://xod.io/libs/alice/servo/")
        assert record['id'] == "alice/servo"
        assert record['source'] == {
            'provider': "xod.io",
            'url': "https://xod.io/libs/alice/servo/",
        }
        assert record['latest'] == "1.10.0"
        assert record['versions'] == ["1.10.0", "1.0.0"]
        assert record['summary'] == "Servo helpers"
        assert record['updatedAt'] == "2021-05-05"
        assert record['license'] == "GPL-3.0"
        assert record['boardCompatibility'] == {}
        assert record['quality'] == {}

    def test_no_versions_uses_latest_sentinel(self, extractor, fetcher):
        fetcher.get_text.return_value = "<p>bare page</p>"
        record = extractor.extract("alice/servo")
        assert record['latest'] == "latest"
        assert record['versions'] == ["latest"]
        assert record['updatedAt'] is None
        assert record['license'] is None

    def test_fetch_failure_propagates(self, extractor, fetcher):
        fetcher.get_text.side_effect = FetchError("u", 5, RuntimeError("HTTP 503"))
        with pytest.raises(FetchError):
            extractor.extract("alice/servo")
