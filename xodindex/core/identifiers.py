# -*- coding: utf-8 -*-
"""
Identifiers - Validate and canonicalize ``owner/library`` ids.

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
from typing import Any, NamedTuple, Optional


_ID_PATTERN = re.compile(r"^[a-z0-9._-]+/[a-z0-9._-]+$", re.IGNORECASE)


class LibraryId(NamedTuple):
    """A normalized library id split into its parts."""

    id: str
    owner: str
    libname: str


def to_non_empty_string(value: Any) -> Optional[str]:
    """Return ``value`` stripped, or None if it is not a non-blank string."""
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def normalize_id(value: Any) -> Optional[str]:
    """Canonicalize a library id.

    Trims whitespace and surrounding slashes, then requires exactly one
    ``owner/name`` pair of ``[a-z0-9._-]`` segments (case-insensitive).

    Parameters
    ----------
    value : Any
        Candidate id.

    Returns
    -------
    Optional[str]
        Lowercase id, or None when the value is not a valid id. Callers
        treat None as "skip this entry".
    """
    if not isinstance(value, str):
        return None
    cleaned = value.strip().strip("/")
    if not _ID_PATTERN.match(cleaned):
        return None
    return cleaned.lower()


def parse_id(value: Any) -> Optional[LibraryId]:
    """Normalize ``value`` and split it into owner and library name."""
    normalized = normalize_id(value)
    if normalized is None:
        return None
    owner, libname = normalized.split("/")
    return LibraryId(normalized, owner, libname)


def id_from_record(record: Any) -> Optional[str]:
    """Recover a library id from a record.

    Uses ``record['id']`` when valid, otherwise ``owner`` + ``libname``.
    """
    if not isinstance(record, dict):
        return None
    from_id = normalize_id(record.get("id"))
    if from_id:
        return from_id

    owner = to_non_empty_string(record.get("owner"))
    libname = to_non_empty_string(record.get("libname"))
    if owner and libname:
        return normalize_id(f"{owner}/{libname}")
    return None
