# -*- coding: utf-8 -*-
"""
Page Parser - Extract catalog fields from registry HTML.

``PageParser`` is the narrow contract the crawler and the detail
extractor depend on. ``XodPageParser`` implements it for xod.io pages
with regular expressions over the raw page text; a different registry
layout only needs a new parser.

License
-------
MIT License
Copyright (c) 2026 xod-library-index contributors
See LICENSE file for full text.

Created
-------
2026-10-17

Modified
--------
2026-10-17
"""

# Standard library
import re
from abc import ABC, abstractmethod
from typing import List, Optional

# xodindex internal
from xodindex.core.identifiers import normalize_id
from xodindex.core.versions import sort_versions_desc, unique_strings


class PageParser(ABC):
    """Extracts library ids and detail fields from registry pages."""

    @abstractmethod
    def extract_library_ids(self, html: str) -> List[str]:
        """Normalized, deduplicated, sorted ids linked from a listing page."""

    @abstractmethod
    def extract_summary(self, html: str) -> str:
        """Human-readable summary, or ``""``."""

    @abstractmethod
    def extract_updated_at(self, html: str) -> Optional[str]:
        """Most recent ISO calendar date on the page, or None."""

    @abstractmethod
    def extract_license(self, html: str) -> Optional[str]:
        """License token, or None."""

    @abstractmethod
    def extract_versions(self, html: str, library_id: str) -> List[str]:
        """Version tokens, newest first."""


_LIBRARY_LINK = re.compile(
    r"""href=["']/libs/([a-z0-9._-]+/[a-z0-9._-]+)/?["']""", re.IGNORECASE
)
_META_DESCRIPTION = (
    re.compile(
        r"""<meta[^>]+name=["']description["'][^>]+content=["']([^"']+)["']""",
        re.IGNORECASE,
    ),
    re.compile(
        r"""<meta[^>]+content=["']([^"']+)["'][^>]+name=["']description["']""",
        re.IGNORECASE,
    ),
)
_ISO_DATE = re.compile(r"\b(20\d{2}-\d{2}-\d{2})\b")
_LICENSE_LABEL = re.compile(r"license[^a-z0-9]+([A-Za-z0-9.\-+ ]{2,40})", re.IGNORECASE)
_KNOWN_LICENSE = re.compile(
    r"\b(MIT|BSD(?:-?\d-Clause)?|Apache(?:-?2\.0)?|GPL(?:-?\d(?:\.\d)?)?"
    r"|LGPL(?:-?\d(?:\.\d)?)?|MPL(?:-?2\.0)?)\b",
    re.IGNORECASE,
)
_SEMVER = r"([0-9]+\.[0-9]+\.[0-9]+(?:-[0-9A-Za-z.-]+)?)"
_ANY_VERSION = re.compile("@" + _SEMVER)


class XodPageParser(PageParser):
    """Regex scraper for xod.io listing and library pages."""

    def extract_library_ids(self, html: str) -> List[str]:
        ids = []
        for match in _LIBRARY_LINK.finditer(html):
            library_id = normalize_id(match.group(1))
            if library_id:
                ids.append(library_id)
        return sorted(unique_strings(ids))

    def extract_summary(self, html: str) -> str:
        for pattern in _META_DESCRIPTION:
            match = pattern.search(html)
            if match:
                return match.group(1).strip()
        return ""

    def extract_updated_at(self, html: str) -> Optional[str]:
        # ISO dates order correctly as strings.
        dates = _ISO_DATE.findall(html)
        return max(dates) if dates else None

    def extract_license(self, html: str) -> Optional[str]:
        match = _LICENSE_LABEL.search(html) or _KNOWN_LICENSE.search(html)
        return match.group(1).strip() if match else None

    def extract_versions(self, html: str, library_id: str) -> List[str]:
        qualified = re.compile(re.escape(library_id) + "@" + _SEMVER, re.IGNORECASE)
        versions = qualified.findall(html)
        if not versions:
            versions = _ANY_VERSION.findall(html)
        return sort_versions_desc(unique_strings(versions))
