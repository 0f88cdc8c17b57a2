# -*- coding: utf-8 -*-
"""
Tests for xodindex.catalog.sync - CatalogSync end to end.

Created
-------
2026-10-17
"""

import json
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from xodindex.catalog.sync import CatalogSync
from xodindex.core.config import IndexConfig
from xodindex.core.errors import (
    CatalogInvariantError,
    DiscoveryError,
    FetchError,
    HttpStatusError,
    OverlayError,
)

BASE = "https://xod.io/libs/"
FIXED_NOW = datetime(2026, 10, 17, 12, 0, tzinfo=timezone.utc)

LISTING = (
    '<a href="/libs/xod/core/">core</a>'
    '<a href="/libs/alice/servo/">servo</a>'
    '<a href="/libs/bob/broken/">broken</a>'
)
PAGES = {
    BASE: LISTING,
    f"{BASE}xod/core/": (
        '<meta name="description" content="Core nodes">'
        '<p>2024-02-02</p><code>xod/core@0.35.0</code><code>xod/core@0.34.1</code>'
    ),
    f"{BASE}alice/servo/": '<p>MIT</p><code>alice/servo@1.0.0</code>',
}


def _fetcher(pages):
    fetcher = MagicMock()

    def get_text(url):
        if url in pages:
            return pages[url]
        if url == f"{BASE}bob/broken/":
            raise FetchError(url, 5, RuntimeError("HTTP 503"))
        raise HttpStatusError(url, 404)

    fetcher.get_text.side_effect = get_text
    return fetcher


@pytest.fixture
def config(tmp_path):
    return IndexConfig(root_dir=tmp_path)


def _sync(config, pages=PAGES):
    return CatalogSync(config, fetcher=_fetcher(pages), clock=lambda: FIXED_NOW)


class TestRun:
    def test_writes_catalog_and_reports_skips(self, config):
        report = _sync(config).run()

        assert report.library_ids == ["alice/servo", "xod/core"]
        assert list(report.skipped) == ["bob/broken"]
        document = json.loads(config.index_path.read_text(encoding="utf-8"))
        assert document['generatedAt'] == "2026-10-17T12:00:00.000Z"
        core = document['libraries'][1]
        assert core['id'] == "xod/core"
        assert core['latest'] == "0.35.0"
        assert core['versions'] == ["0.35.0", "0.34.1"]
        assert core['summary'] == "Core nodes"

    def test_overlay_applied(self, config):
        config.index_dir.mkdir(parents=True)
        config.overlay_path.write_text(json.dumps({
            "libraries": [{
                "owner": "alice", "libname": "servo",
                "supportStatus": "experimental",
                "boardCompatibility": {"uno": {"status": "working"}},
                "hasReadme": True,
            }],
        }))
        _sync(config).run()
        document = json.loads(config.index_path.read_text(encoding="utf-8"))
        servo = document['libraries'][0]
        assert servo['supportStatus'] == "experimental"
        assert servo['compatibilitySummary']['workingBoards'] == ["uno"]
        assert servo['quality'] == {'hasReadme': True}

    def test_rerun_is_byte_identical(self, config):
        _sync(config).run()
        first = config.index_path.read_bytes()
        _sync(config).run()
        assert config.index_path.read_bytes() == first

    def test_parallel_run_matches_sequential(self, config, tmp_path):
        _sync(config).run()
        sequential = config.index_path.read_bytes()

        parallel_config = IndexConfig(root_dir=tmp_path / "parallel", max_workers=4)
        _sync(parallel_config).run()
        assert parallel_config.index_path.read_bytes() == sequential

    def test_all_failed_is_fatal(self, config):
        pages = {BASE: '<a href="/libs/bob/broken/">broken</a>'}
        with pytest.raises(CatalogInvariantError):
            _sync(config, pages).run()
        assert not config.index_path.exists()

    def test_discovery_failure_is_fatal(self, config):
        with pytest.raises(DiscoveryError):
            _sync(config, {}).run()

    def test_malformed_overlay_is_fatal(self, config):
        config.index_dir.mkdir(parents=True)
        config.overlay_path.write_text('"just a string"')
        with pytest.raises(OverlayError):
            _sync(config).run()
        assert not config.index_path.exists()


class TestProcess:
    def test_normalization_failure_is_skip(self, config, monkeypatch):
        sync = _sync(config)
        monkeypatch.setattr(
            'xodindex.catalog.sync.normalize_with_retry',
            MagicMock(side_effect=ValueError("bad")),
        )
        outcome = sync.process("xod/core", {})
        assert not outcome.ok
        assert "normalization failed" in outcome.skip_reason
