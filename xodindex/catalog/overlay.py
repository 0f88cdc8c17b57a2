# -*- coding: utf-8 -*-
"""
Overlay Loader - Read curated metadata keyed by library id.

Three document shapes are accepted and normalized to one map::

    {"owner/lib": {...}, ...}            # object keyed by id
    [{"id": "owner/lib", ...}, ...]      # array of self-identifying records
    {"libraries": [{...}, ...]}          # wrapped array

Records may identify themselves with ``id`` or ``owner`` + ``libname``.
The overlay is operator-controlled, so anything malformed is fatal.

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
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Tuple

logger = logging.getLogger(__name__)

# xodindex internal
from xodindex.core.errors import OverlayError
from xodindex.core.identifiers import id_from_record, normalize_id
from xodindex.core.io import read_json


_MISSING = object()


def _collect(entries: Iterable[Tuple[Optional[str], Any]], where: str) -> Dict[str, dict]:
    overlay: Dict[str, dict] = {}
    for label, record in entries:
        if not isinstance(record, dict):
            raise OverlayError(f"Overlay entry {label} in {where} must be an object")
        library_id = normalize_id(label) or id_from_record(record)
        if not library_id:
            raise OverlayError(
                f"Overlay entry {label} in {where} has no recognizable library id"
            )
        if library_id in overlay:
            raise OverlayError(f"Overlay defines {library_id} more than once in {where}")
        overlay[library_id] = record
    return overlay


def parse_overlay(document: Any, where: str = "overlay") -> Dict[str, dict]:
    """Normalize an overlay document to a map keyed by library id.

    Parameters
    ----------
    document : Any
        Decoded overlay JSON.
    where : str
        Label used in error messages.

    Returns
    -------
    Dict[str, dict]
        Overlay entries keyed by canonical id.

    Raises
    ------
    OverlayError
        If the shape is not recognized or an entry cannot be identified.
    """
    if isinstance(document, list):
        return _collect(
            ((f"#{i}", record) for i, record in enumerate(document)), where
        )

    if isinstance(document, dict) and isinstance(document.get("libraries"), list):
        return _collect(
            ((f"libraries[{i}]", record) for i, record in enumerate(document["libraries"])),
            where,
        )

    if isinstance(document, dict):
        return _collect(document.items(), where)

    raise OverlayError(
        "Overlay must be an object map keyed by library id or libraries array"
    )


def load_overlay(path: Path) -> Dict[str, dict]:
    """Load the overlay file; a missing file is an empty overlay.

    Raises
    ------
    OverlayError
        If the file is not valid JSON or has an unsupported shape.
    """
    try:
        document = read_json(path, default=_MISSING)
    except json.JSONDecodeError as e:
        raise OverlayError(f"Overlay {path} is not valid JSON: {e}") from e

    if document is _MISSING:
        logger.info("No overlay at %s", path)
        return {}

    overlay = parse_overlay(document, where=str(path))
    logger.info("Loaded %d overlay entries from %s", len(overlay), path)
    return overlay
