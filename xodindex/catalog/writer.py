# -*- coding: utf-8 -*-
"""
Catalog Writer - Validate and atomically write the catalog document.

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
import json
import logging
from collections import Counter
from pathlib import Path
from typing import Any, Dict, List, Sequence

logger = logging.getLogger(__name__)

# xodindex internal
from xodindex.core.errors import CatalogInvariantError, DuplicateIdError
from xodindex.core.io import atomic_write_text, dumps_stable

_REQUIRED_FIELDS = ('id', 'source', 'latest')


def find_duplicate_ids(records: Sequence[Dict[str, Any]]) -> List[str]:
    """Ids that occur on more than one record, sorted."""
    counts = Counter(record.get('id') for record in records)
    return sorted(str(i) for i, n in counts.items() if n > 1)


def validate_catalog(records: Sequence[Dict[str, Any]]) -> None:
    """Check catalog-wide invariants.

    Raises
    ------
    DuplicateIdError
        If two records share an id.
    CatalogInvariantError
        If a record lacks ``id``, ``source`` or ``latest``.
    """
    duplicates = find_duplicate_ids(records)
    if duplicates:
        raise DuplicateIdError(duplicates)

    for record in records:
        if not all(record.get(field) for field in _REQUIRED_FIELDS):
            raise CatalogInvariantError(
                f"Invalid library record detected: {json.dumps(record, ensure_ascii=False)}"
            )


def render_catalog(records: Sequence[Dict[str, Any]], generated_at: str) -> str:
    """Serialize records sorted by id, wrapped with the generation time.

    The serialized text is parsed back before it is returned.
    """
    document = {
        'generatedAt': generated_at,
        'libraries': sorted(records, key=lambda record: record['id']),
    }
    text = dumps_stable(document)
    json.loads(text)
    return text


def write_catalog(
    records: Sequence[Dict[str, Any]],
    path: Path,
    generated_at: str,
) -> int:
    """Validate, render and atomically write the catalog.

    Parameters
    ----------
    records : Sequence[Dict[str, Any]]
        Normalized library records.
    path : Path
        Destination file.
    generated_at : str
        ISO-8601 UTC generation timestamp.

    Returns
    -------
    int
        Bytes written.
    """
    validate_catalog(records)
    text = render_catalog(records, generated_at)
    written = atomic_write_text(path, text)
    logger.info("Wrote %d libraries to %s", len(records), path)
    return written
