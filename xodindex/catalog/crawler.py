# -*- coding: utf-8 -*-
"""
List Crawler - Discover library ids from the paginated registry listing.

Walks listing pages from 1 upward until a page yields no ids, or only
ids already seen on earlier pages (a registry that loops back to page 1
instead of answering 404 would otherwise never end).

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
from typing import List, Optional, Set

logger = logging.getLogger(__name__)

# xodindex internal
from xodindex.catalog.parser import PageParser
from xodindex.core.config import IndexConfig
from xodindex.core.errors import DiscoveryError, HttpStatusError
from xodindex.core.fetch import ResilientFetcher


class ListCrawler:
    """Crawls the registry listing for library ids.

    Parameters
    ----------
    config : IndexConfig
        Supplies the listing base URL.
    fetcher : ResilientFetcher
        HTTP client; owns retries.
    parser : PageParser
        Extracts ids from listing HTML.
    """

    def __init__(
        self,
        config: IndexConfig,
        fetcher: ResilientFetcher,
        parser: PageParser,
    ) -> None:
        self._base_url = config.libs_base_url
        self._fetcher = fetcher
        self._parser = parser

    def page_urls(self, page: int) -> List[str]:
        """Candidate URLs for a listing page, tried in order."""
        if page == 1:
            return [self._base_url]
        return [
            f"{self._base_url}?page={page}",
            f"{self._base_url}page/{page}/",
        ]

    def fetch_page(self, page: int) -> Optional[str]:
        """Fetch one listing page.

        A 404 moves on to the next candidate URL.

        Returns
        -------
        Optional[str]
            Page HTML, or None if every candidate answered 404.

        Raises
        ------
        FetchError
            Any failure other than 404.
        """
        for url in self.page_urls(page):
            try:
                return self._fetcher.get_text(url)
            except HttpStatusError as e:
                if e.status != 404:
                    raise
                logger.debug("Listing page candidate not found: %s", url)
        return None

    def crawl(self) -> List[str]:
        """Discover every library id.

        Returns
        -------
        List[str]
            Sorted, deduplicated library ids.

        Raises
        ------
        DiscoveryError
            If the first page cannot be fetched or nothing is found.
        FetchError
            If a later page fails with anything other than 404.
        """
        seen: Set[str] = set()
        page = 1

        while True:
            if page == 1:
                try:
                    html = self.fetch_page(page)
                except Exception as e:
                    raise DiscoveryError(
                        f"Unable to fetch initial library list page: {e}"
                    ) from e
                if html is None:
                    raise DiscoveryError("Unable to fetch initial library list page")
            else:
                html = self.fetch_page(page)
                if html is None:
                    logger.info("Listing page %d not found, stopping", page)
                    break

            ids = self._parser.extract_library_ids(html)
            if not ids:
                break
            if all(library_id in seen for library_id in ids):
                logger.info("Listing page %d repeats known ids, stopping", page)
                break

            seen.update(ids)
            logger.info("Page %d: found %d library ids", page, len(ids))
            page += 1

        if not seen:
            raise DiscoveryError("No libraries were discovered from the registry listing")
        return sorted(seen)
