# -*- coding: utf-8 -*-
"""
Catalog Sync - Crawl, extract, merge and write the library catalog.

Provides ``CatalogSync``, which runs the whole pipeline once: load the
overlay, discover ids from the registry listing, extract and normalize
each library, then validate and write the catalog. A library that
cannot be fetched or normalized is skipped with a warning; anything
that breaks a catalog invariant aborts the run before writing.

Dependencies
------------
requests
tenacity

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
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)

# xodindex internal
from xodindex.catalog.crawler import ListCrawler
from xodindex.catalog.extractor import DetailExtractor
from xodindex.catalog.merge import normalize_with_retry
from xodindex.catalog.models import ItemOutcome, SyncReport
from xodindex.catalog.overlay import load_overlay
from xodindex.catalog.parser import PageParser, XodPageParser
from xodindex.catalog.writer import write_catalog
from xodindex.core.config import IndexConfig
from xodindex.core.errors import CatalogInvariantError
from xodindex.core.fetch import ResilientFetcher
from xodindex.core.io import Clock, isoformat_utc, utc_now
from xodindex.core.pool import WorkerPool


class CatalogSync:
    """Runs one catalog synchronization.

    Parameters
    ----------
    config : IndexConfig
        Registry URLs, retry policy and output paths.
    fetcher : Optional[ResilientFetcher]
        HTTP client. Built from ``config`` if None.
    parser : Optional[PageParser]
        Page parser. Defaults to ``XodPageParser``.
    clock : Optional[Clock]
        Returns the current UTC time; used for ``generatedAt``.
    """

    def __init__(
        self,
        config: IndexConfig,
        fetcher: Optional[ResilientFetcher] = None,
        parser: Optional[PageParser] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        self._config = config
        self._fetcher = fetcher or ResilientFetcher(config)
        self._parser = parser or XodPageParser()
        self._clock = clock or utc_now
        self._crawler = ListCrawler(config, self._fetcher, self._parser)
        self._extractor = DetailExtractor(config, self._fetcher, self._parser)

    def process(self, library_id: str, overlay: Dict[str, dict]) -> ItemOutcome:
        """Extract and normalize one library, never raising."""
        try:
            discovered = self._extractor.extract(library_id)
        except Exception as e:
            return ItemOutcome.skipped(library_id, f"fetch failed: {e}")

        try:
            record = normalize_with_retry(
                discovered,
                overlay.get(library_id),
                attempts=self._config.max_normalize_retries,
                default_provider=self._config.source_provider,
                libs_base_url=self._config.libs_base_url,
            )
        except Exception as e:
            return ItemOutcome.skipped(library_id, f"normalization failed: {e}")
        return ItemOutcome.success(library_id, record)

    def run(self) -> SyncReport:
        """Synchronize the catalog.

        Returns
        -------
        SyncReport
            Written ids and skipped ids with reasons.

        Raises
        ------
        FatalSyncError
            On a malformed overlay, failed discovery, no surviving
            records or a catalog invariant violation.
        """
        logger.info("Sync started")
        overlay = load_overlay(self._config.overlay_path)
        library_ids = self._crawler.crawl()
        logger.info("Discovered %d libraries", len(library_ids))

        pool = WorkerPool(self._config.max_workers)
        results = pool.map(lambda library_id: self.process(library_id, overlay), library_ids)

        records: List[dict] = []
        skipped: Dict[str, str] = {}
        for result in results:
            outcome = result.value if result.ok else ItemOutcome.skipped(
                result.item, f"unexpected error: {result.error}"
            )
            if outcome.ok:
                records.append(outcome.record)
                logger.info("Processed %s", outcome.library_id)
            else:
                skipped[outcome.library_id] = outcome.skip_reason
                logger.warning("Skipped %s: %s", outcome.library_id, outcome.skip_reason)

        if not records:
            raise CatalogInvariantError(
                f"All library detail fetches failed. Skipped {len(skipped)} libraries."
            )

        generated_at = isoformat_utc(self._clock())
        write_catalog(records, self._config.index_path, generated_at)

        if skipped:
            logger.warning(
                "Skipped %d libraries due to fetch errors: %s",
                len(skipped), ", ".join(sorted(skipped)),
            )
        return SyncReport(
            output_path=self._config.index_path,
            generated_at=generated_at,
            library_ids=sorted(record['id'] for record in records),
            skipped=skipped,
        )
