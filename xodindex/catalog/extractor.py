# -*- coding: utf-8 -*-
"""
Detail Extractor - Build a raw catalog record from a library page.

Fetches ``{libs_base_url}{owner}/{library}/`` and pulls the summary,
last-updated date, license and version tokens out of it. The result is
the "discovered" record the overlay is later merged onto.

Dependencies
------------
requests (through ``ResilientFetcher``)

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
import logging
from typing import Any, Dict

logger = logging.getLogger(__name__)

# xodindex internal
from xodindex.catalog.parser import PageParser
from xodindex.core.config import IndexConfig
from xodindex.core.fetch import ResilientFetcher
from xodindex.core.versions import LATEST


class DetailExtractor:
    """Extracts discovered metadata for one library.

    Parameters
    ----------
    config : IndexConfig
        Supplies the registry base URL and provider name.
    fetcher : ResilientFetcher
        HTTP client; the full retry policy applies.
    parser : PageParser
        Field extraction from the page text.
    """

    def __init__(
        self,
        config: IndexConfig,
        fetcher: ResilientFetcher,
        parser: PageParser,
    ) -> None:
        self._config = config
        self._fetcher = fetcher
        self._parser = parser

    def detail_url(self, library_id: str) -> str:
        return f"{self._config.libs_base_url}{library_id}/"

    def extract(self, library_id: str) -> Dict[str, Any]:
        """Fetch and parse the detail page of ``library_id``.

        Parameters
        ----------
        library_id : str
            Normalized ``owner/name`` id.

        Returns
        -------
        Dict[str, Any]
            Raw discovered record in catalog field order.

        Raises
        ------
        FetchError
            If the page cannot be fetched. The sync records the id as
            skipped and carries on.
        """
        url = self.detail_url(library_id)
        html = self._fetcher.get_text(url)

        versions = self._parser.extract_versions(html, library_id)
        latest = versions[0] if versions else LATEST
        logger.debug("Parsed %s: %d versions", library_id, len(versions))

        return {
            'id': library_id,
            'source': {
                'provider': self._config.source_provider,
                'url': url,
            },
            'latest': latest,
            'versions': versions if versions else [latest],
            'summary': self._parser.extract_summary(html),
            'updatedAt': self._parser.extract_updated_at(html),
            'license': self._parser.extract_license(html),
            'tags': [],
            'interfaces': [],
            'mcu': [],
            'boardCompatibility': {},
            'compatibilitySummary': {
                'workingBoards': [],
                'brokenBoards': [],
                'untestedBoards': [],
            },
            'quality': {},
        }
