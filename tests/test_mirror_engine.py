# -*- coding: utf-8 -*-
"""
Tests for xodindex.mirror.engine - ArtifactMirror.

Created
-------
2026-10-17
"""

import hashlib
import json
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from xodindex.core.config import IndexConfig
from xodindex.core.errors import FetchError, MirrorInputError, ServiceDescriptionError
from xodindex.mirror.engine import ArtifactMirror

SWAGGER_URL = "https://pm.xod.io/swagger/"
API = "https://pm.xod.io"
TEMPLATE = "/users/{orgname}/libs/{libname}/rels/{semver_or_latest}/xodball"
SWAGGER = {'paths': {TEMPLATE: {'get': {'operationId': 'getLibVersionXodball'}}}}
FIXED_NOW = datetime(2026, 10, 17, 8, 30, tzinfo=timezone.utc)


def _url(owner, libname, version):
    return f"{API}/users/{owner}/libs/{libname}/rels/{version}/xodball"


def _index(*libraries, generated_at="2026-10-16T00:00:00.000Z"):
    return {'generatedAt': generated_at, 'libraries': list(libraries)}


class FakeApi:
    """Serves the swagger document and per-URL artifact payloads."""

    def __init__(self, payloads=None, failing=()):
        self.payloads = payloads or {}
        self.failing = set(failing)
        self.requested = []
        self.fetcher = MagicMock()
        self.fetcher.get_json.side_effect = self._get_json

    def _get_json(self, url):
        self.requested.append(url)
        if url == SWAGGER_URL:
            return SWAGGER
        if url in self.failing:
            raise FetchError(url, 5, RuntimeError("HTTP 503"))
        return self.payloads.get(url, {'url': url})


@pytest.fixture
def config(tmp_path):
    return IndexConfig(root_dir=tmp_path, swagger_url=SWAGGER_URL)


def _write_index(config, index):
    config.index_dir.mkdir(parents=True, exist_ok=True)
    config.index_path.write_text(json.dumps(index), encoding="utf-8")


def _mirror(config, api):
    return ArtifactMirror(config, fetcher=api.fetcher, clock=lambda: FIXED_NOW)


def _state(config):
    return json.loads(config.state_path.read_text(encoding="utf-8"))


# ---------------------------------------------------------------------------
# enumerate_candidates
# ---------------------------------------------------------------------------

class TestEnumerateCandidates:
    def test_marks_versions_and_skips_invalid_ids(self, config):
        index = _index(
            {'id': "zed/lib", 'versions': ["1.0.0", "v1.0.0", "latest"]},
            {'id': "not an id", 'versions': ["1.0.0"]},
            {'id': "Abe/Lib", 'latest': "2.0.0"},
        )
        candidates = _mirror(config, FakeApi()).enumerate_candidates(index)
        assert [c.key for c in candidates] == [
            "abe/lib@v2.0.0", "zed/lib@v1.0.0", "zed/lib@latest",
        ]
        assert candidates[0].relative_path == "mirror/libs/abe/lib/v2.0.0.xodball.json"


# ---------------------------------------------------------------------------
# run
# ---------------------------------------------------------------------------

class TestRun:
    def test_first_run_downloads_everything(self, config):
        _write_index(config, _index({'id': "xod/core", 'versions': ["0.35.0", "0.34.1"]}))
        payload = {'name': "core", 'version': "0.35.0"}
        api = FakeApi(payloads={_url("xod", "core", "v0.35.0"): payload})

        report = _mirror(config, api).run()

        assert report.stats.total_candidates == 2
        assert report.stats.downloaded == 2
        assert report.stats.failed == 0
        assert report.total_artifacts == 2

        artifact = config.root_dir / "mirror/libs/xod/core/v0.35.0.xodball.json"
        data = artifact.read_bytes()
        assert json.loads(data) == payload
        entry = _state(config)['artifacts']["xod/core@v0.35.0"]
        assert entry['sha256'] == hashlib.sha256(data).hexdigest()
        assert entry['bytes'] == len(data)
        assert entry['sourceUrl'] == _url("xod", "core", "v0.35.0")
        assert entry['path'] == "mirror/libs/xod/core/v0.35.0.xodball.json"
        assert entry['mirroredAt'] == "2026-10-17T08:30:00.000Z"

    def test_second_run_skips_existing(self, config):
        _write_index(config, _index({'id': "owner/lib", 'versions': ["1.0.0"]}))
        _mirror(config, FakeApi()).run()

        api = FakeApi()
        report = _mirror(config, api).run()

        assert report.stats.skipped_existing == 1
        assert report.stats.downloaded == 0
        assert _url("owner", "lib", "v1.0.0") not in api.requested

    def test_missing_file_is_redownloaded_once(self, config):
        _write_index(config, _index({'id': "owner/lib", 'versions': ["1.0.0"]}))
        _mirror(config, FakeApi()).run()
        (config.root_dir / "mirror/libs/owner/lib/v1.0.0.xodball.json").unlink()

        api = FakeApi()
        report = _mirror(config, api).run()

        assert report.stats.downloaded == 1
        assert api.requested.count(_url("owner", "lib", "v1.0.0")) == 1
        assert (config.root_dir / "mirror/libs/owner/lib/v1.0.0.xodball.json").exists()

    def test_changed_content_is_flagged(self, config):
        _write_index(config, _index({'id': "owner/lib", 'versions': ["1.0.0"]}))
        url = _url("owner", "lib", "v1.0.0")
        _mirror(config, FakeApi(payloads={url: {'rev': 1}})).run()
        first_sha = _state(config)['artifacts']["owner/lib@v1.0.0"]['sha256']
        (config.root_dir / "mirror/libs/owner/lib/v1.0.0.xodball.json").unlink()

        report = _mirror(config, FakeApi(payloads={url: {'rev': 2}})).run()

        entry = _state(config)['artifacts']["owner/lib@v1.0.0"]
        assert report.stats.content_changed == 1
        assert entry['previousSha256'] == first_sha
        assert entry['sha256'] != first_sha

    def test_failures_are_counted_not_fatal(self, config):
        _write_index(config, _index(
            {'id': "owner/lib", 'versions': ["1.0.0", "2.0.0"]},
        ))
        api = FakeApi(failing={_url("owner", "lib", "v2.0.0")})

        report = _mirror(config, api).run()

        assert report.stats.downloaded == 1
        assert report.stats.failed == 1
        assert "owner/lib@v2.0.0" in report.failures
        assert set(_state(config)['artifacts']) == {"owner/lib@v1.0.0"}

    def test_state_never_pruned(self, config):
        _write_index(config, _index({'id': "old/lib", 'versions': ["1.0.0"]}))
        _mirror(config, FakeApi()).run()

        _write_index(config, _index({'id': "new/lib", 'versions': ["1.0.0"]}))
        report = _mirror(config, FakeApi()).run()

        assert set(_state(config)['artifacts']) == {"new/lib@v1.0.0", "old/lib@v1.0.0"}
        assert report.total_artifacts == 2

    def test_manifest(self, config):
        _write_index(config, _index(
            {'id': "b/lib", 'versions': ["1.0.0"]},
            {'id': "a/lib", 'versions': ["2.0.0", "1.0.0"]},
        ))
        _mirror(config, FakeApi()).run()

        manifest = json.loads(config.manifest_path.read_text(encoding="utf-8"))
        assert manifest['sourceIndexGeneratedAt'] == "2026-10-16T00:00:00.000Z"
        assert manifest['stats'] == {
            'totalCandidates': 3,
            'downloaded': 3,
            'skippedExisting': 0,
            'failed': 0,
            'contentChanged': 0,
            'totalMirroredArtifacts': 3,
        }
        assert [(a['id'], a['version']) for a in manifest['artifacts']] == [
            ("a/lib", "v1.0.0"), ("a/lib", "v2.0.0"), ("b/lib", "v1.0.0"),
        ]

    def test_parallel_downloads(self, tmp_path):
        config = IndexConfig(root_dir=tmp_path, swagger_url=SWAGGER_URL, max_workers=4)
        _write_index(config, _index(
            {'id': "owner/lib", 'versions': ["1.0.0", "1.1.0", "1.2.0", "2.0.0"]},
        ))
        api = FakeApi(failing={_url("owner", "lib", "v1.1.0")})
        report = _mirror(config, api).run()
        assert report.stats.downloaded == 3
        assert report.stats.failed == 1

    def test_invalid_index_is_fatal(self, config):
        with pytest.raises(MirrorInputError):
            _mirror(config, FakeApi()).run()

    def test_missing_operation_is_fatal(self, config):
        _write_index(config, _index({'id': "owner/lib", 'versions': ["1.0.0"]}))
        fetcher = MagicMock()
        fetcher.get_json.return_value = {'paths': {}}
        with pytest.raises(ServiceDescriptionError):
            ArtifactMirror(config, fetcher=fetcher).run()
        assert not config.state_path.exists()

    def test_corrupt_state_is_fatal(self, config):
        _write_index(config, _index({'id': "owner/lib", 'versions': ["1.0.0"]}))
        config.mirror_dir.mkdir(parents=True)
        config.state_path.write_text("{broken")
        with pytest.raises(MirrorInputError):
            _mirror(config, FakeApi()).run()
