# -*- coding: utf-8 -*-
"""
Catalog Models - Vocabulary and result types for the catalog sync.

Defines the recognized compatibility, support and quality vocabularies,
the ``ItemOutcome`` value returned for each discovered library, and the
``SyncReport`` summarizing a run.

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
from pathlib import Path
from typing import Any, Dict, List, Optional


COMPATIBILITY_STATUSES = ("working", "broken", "untested")
SUPPORT_STATUSES = ("stable", "experimental", "deprecated")
QUALITY_FLAGS = ("hasExamples", "hasReadme", "maintainerVerified")
SUMMARY_KEYS = ("workingBoards", "brokenBoards", "untestedBoards")

# Classifier lists that are unioned rather than replaced by the overlay.
UNION_FIELDS = ("tags", "interfaces", "mcu")


class ItemOutcome:
    """Result of processing one discovered library.

    Exactly one of ``record`` and ``skip_reason`` is set.

    Parameters
    ----------
    library_id : str
        Normalized library id.
    record : Optional[Dict[str, Any]]
        Normalized catalog record on success.
    skip_reason : Optional[str]
        Why the library was left out of the catalog.
    """

    def __init__(
        self,
        library_id: str,
        record: Optional[Dict[str, Any]] = None,
        skip_reason: Optional[str] = None,
    ) -> None:
        if (record is None) == (skip_reason is None):
            raise ValueError("ItemOutcome needs exactly one of record or skip_reason")
        self.library_id = library_id
        self.record = record
        self.skip_reason = skip_reason

    @classmethod
    def success(cls, library_id: str, record: Dict[str, Any]) -> 'ItemOutcome':
        return cls(library_id, record=record)

    @classmethod
    def skipped(cls, library_id: str, reason: str) -> 'ItemOutcome':
        return cls(library_id, skip_reason=reason)

    @property
    def ok(self) -> bool:
        return self.record is not None

    def __repr__(self) -> str:
        if self.ok:
            return f"ItemOutcome({self.library_id!r}: ok)"
        return f"ItemOutcome({self.library_id!r}: skipped, {self.skip_reason!r})"


class SyncReport:
    """Summary of a catalog sync run.

    Parameters
    ----------
    output_path : Path
        Where the catalog was written.
    generated_at : str
        Catalog generation timestamp.
    library_ids : List[str]
        Ids written to the catalog.
    skipped : Dict[str, str]
        Skipped ids mapped to the reason.
    """

    def __init__(
        self,
        output_path: Path,
        generated_at: str,
        library_ids: List[str],
        skipped: Dict[str, str],
    ) -> None:
        self.output_path = output_path
        self.generated_at = generated_at
        self.library_ids = library_ids
        self.skipped = skipped

    @property
    def processed(self) -> int:
        return len(self.library_ids)

    def __repr__(self) -> str:
        return (
            f"SyncReport(processed={self.processed}, "
            f"skipped={len(self.skipped)})"
        )
