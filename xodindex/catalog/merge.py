# -*- coding: utf-8 -*-
"""
Merge & Normalize - Overlay curated data onto discovered records.

``deep_merge`` combines a discovered record with its overlay entry:
mappings merge key by key, everything else is replaced by the overlay
value, and the classifier lists named in ``UNION_FIELDS`` are unioned.
``normalize_library_record`` then re-derives every output field from
the merged data so the catalog schema holds no matter how the overlay
was shaped.

Dependencies
------------
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
from typing import Any, Dict, Iterable, List, Optional

# Third-party
from tenacity import Retrying, stop_after_attempt

logger = logging.getLogger(__name__)

# xodindex internal
from xodindex.catalog.models import (
    COMPATIBILITY_STATUSES,
    QUALITY_FLAGS,
    SUMMARY_KEYS,
    SUPPORT_STATUSES,
    UNION_FIELDS,
)
from xodindex.core.identifiers import to_non_empty_string
from xodindex.core.versions import LATEST, normalize_versions, unique_strings


def deep_merge(
    base: Optional[Dict[str, Any]],
    overlay: Optional[Dict[str, Any]],
    union_keys: Iterable[str] = (),
) -> Dict[str, Any]:
    """Merge ``overlay`` onto ``base`` without mutating either.

    Parameters
    ----------
    base : Optional[Dict[str, Any]]
        Discovered data.
    overlay : Optional[Dict[str, Any]]
        Curated data; wins every conflict.
    union_keys : Iterable[str]
        Top-level keys whose list values are concatenated instead of
        replaced. Duplicates are removed later by normalization.

    Returns
    -------
    Dict[str, Any]
        Merged mapping.
    """
    union = set(union_keys)
    out = dict(base or {})
    for key, overlay_value in (overlay or {}).items():
        base_value = out.get(key)
        if isinstance(base_value, dict) and isinstance(overlay_value, dict):
            out[key] = deep_merge(base_value, overlay_value)
        elif key in union and isinstance(base_value, list) and isinstance(overlay_value, list):
            out[key] = base_value + overlay_value
        else:
            out[key] = overlay_value
    return out


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def normalize_string_list(value: Any) -> List[str]:
    """Trimmed, deduplicated, sorted strings; a bare string is a one-item list."""
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        return []
    return sorted(unique_strings(value))


def normalize_board_compatibility(value: Any) -> Dict[str, Dict[str, str]]:
    """Keep only boards with a non-empty id and a recognized status.

    Returns
    -------
    Dict[str, Dict[str, str]]
        Board id to ``{'status': ..., 'notes'?: ...}``, sorted by board id.
    """
    normalized: Dict[str, Dict[str, str]] = {}
    for raw_board_id, entry in _as_dict(value).items():
        board_id = to_non_empty_string(raw_board_id)
        parsed = _as_dict(entry)
        status = parsed.get('status')
        if not board_id or status not in COMPATIBILITY_STATUSES:
            continue
        normalized_entry = {'status': status}
        notes = to_non_empty_string(parsed.get('notes'))
        if notes:
            normalized_entry['notes'] = notes
        normalized[board_id] = normalized_entry
    return {k: normalized[k] for k in sorted(normalized)}


def derive_compatibility_summary(
    board_compatibility: Dict[str, Dict[str, str]],
) -> Dict[str, List[str]]:
    """Partition normalized board entries by status."""
    buckets: Dict[str, List[str]] = {status: [] for status in COMPATIBILITY_STATUSES}
    for board_id, entry in board_compatibility.items():
        buckets[entry['status']].append(board_id)
    return {
        f"{status}Boards": normalize_string_list(buckets[status])
        for status in COMPATIBILITY_STATUSES
    }


def normalize_compatibility_summary(
    value: Any,
    board_compatibility: Dict[str, Dict[str, str]],
) -> Dict[str, List[str]]:
    """Use an explicit summary if it names any board, else derive one."""
    raw = _as_dict(value)
    explicit = {key: normalize_string_list(raw.get(key)) for key in SUMMARY_KEYS}
    if any(explicit.values()):
        return explicit
    return derive_compatibility_summary(board_compatibility)


def normalize_support_status(value: Any) -> Optional[str]:
    status = to_non_empty_string(value)
    return status if status in SUPPORT_STATUSES else None


def normalize_quality(record: Dict[str, Any]) -> Dict[str, Any]:
    """Resolve quality flags from ``quality.*`` or legacy top-level fields.

    Unknown keys inside ``quality`` pass through. A known flag is kept only
    if it resolves to a real boolean.
    """
    quality = dict(_as_dict(record.get('quality')))
    for flag in QUALITY_FLAGS:
        value = quality[flag] if flag in quality else record.get(flag)
        quality.pop(flag, None)
        if isinstance(value, bool):
            quality[flag] = value
    return quality


def normalize_library_record(
    discovered: Dict[str, Any],
    overlay_entry: Optional[Dict[str, Any]] = None,
    default_provider: str = "xod.io",
    libs_base_url: str = "https://xod.io/libs/",
) -> Dict[str, Any]:
    """Merge the overlay onto a discovered record and enforce the schema.

    Parameters
    ----------
    discovered : Dict[str, Any]
        Record produced by the detail extractor.
    overlay_entry : Optional[Dict[str, Any]]
        Matching overlay entry, if any.
    default_provider : str
        Provider used when the merged ``source`` names none.
    libs_base_url : str
        Prefix of the default detail URL.

    Returns
    -------
    Dict[str, Any]
        Catalog record with a fixed key order.
    """
    merged = deep_merge(discovered, overlay_entry or {}, union_keys=UNION_FIELDS)

    library_id = discovered['id']
    source = _as_dict(merged.get('source'))
    latest = (
        to_non_empty_string(merged.get('latest'))
        or to_non_empty_string(discovered.get('latest'))
        or LATEST
    )
    board_compatibility = normalize_board_compatibility(merged.get('boardCompatibility'))
    support_status = normalize_support_status(merged.get('supportStatus'))

    record: Dict[str, Any] = {
        'id': library_id,
        'source': {
            'provider': to_non_empty_string(source.get('provider')) or default_provider,
            'url': to_non_empty_string(source.get('url')) or f"{libs_base_url}{library_id}/",
        },
        'latest': latest,
        'versions': normalize_versions(merged.get('versions'), latest),
        'summary': to_non_empty_string(merged.get('summary')) or "",
        'updatedAt': to_non_empty_string(merged.get('updatedAt')),
        'license': to_non_empty_string(merged.get('license')),
        'tags': normalize_string_list(merged.get('tags')),
        'interfaces': normalize_string_list(merged.get('interfaces')),
        'mcu': normalize_string_list(merged.get('mcu')),
        'boardCompatibility': board_compatibility,
        'compatibilitySummary': normalize_compatibility_summary(
            merged.get('compatibilitySummary'), board_compatibility
        ),
    }
    if support_status:
        record['supportStatus'] = support_status
    record['quality'] = normalize_quality(merged)
    return record


def normalize_with_retry(
    discovered: Dict[str, Any],
    overlay_entry: Optional[Dict[str, Any]] = None,
    attempts: int = 3,
    **kwargs: Any,
) -> Dict[str, Any]:
    """Run ``normalize_library_record`` up to ``attempts`` times.

    Raises
    ------
    Exception
        The error from the final attempt.
    """
    retrying = Retrying(stop=stop_after_attempt(attempts), reraise=True)
    return retrying(normalize_library_record, discovered, overlay_entry, **kwargs)
