# -*- coding: utf-8 -*-
"""
Tests for xodindex.core.identifiers.

Created
-------
2026-10-17
"""

import pytest

from xodindex.core.identifiers import id_from_record, normalize_id, parse_id


class TestNormalizeId:
    def test_lowercases(self):
        assert normalize_id("Foo/Bar") == "foo/bar"

    def test_strips_slashes_and_whitespace(self):
        assert normalize_id("/foo/bar/") == "foo/bar"
        assert normalize_id("  xod/core  ") == "xod/core"

    @pytest.mark.parametrize("value", [
        "foo",
        "foo//bar",
        "foo bar/baz",
        "a/b/c",
        "",
        None,
        42,
    ])
    def test_invalid(self, value):
        assert normalize_id(value) is None

    def test_allows_dots_dashes_underscores(self):
        assert normalize_id("gabbapeople/ws2812.lib_v-2") == "gabbapeople/ws2812.lib_v-2"


class TestParseId:
    def test_split(self):
        parsed = parse_id("Bradzilla84/Servo-Pro")
        assert parsed.id == "bradzilla84/servo-pro"
        assert parsed.owner == "bradzilla84"
        assert parsed.libname == "servo-pro"

    def test_invalid(self):
        assert parse_id("nope") is None


class TestIdFromRecord:
    def test_from_id(self):
        assert id_from_record({'id': 'XOD/Core'}) == "xod/core"

    def test_from_owner_and_libname(self):
        assert id_from_record({'owner': 'xod', 'libname': 'common-hardware'}) == (
            "xod/common-hardware"
        )

    def test_id_wins_over_parts(self):
        assert id_from_record({'id': 'a/b', 'owner': 'c', 'libname': 'd'}) == "a/b"

    def test_unrecoverable(self):
        assert id_from_record({'owner': 'xod'}) is None
        assert id_from_record("xod/core") is None
