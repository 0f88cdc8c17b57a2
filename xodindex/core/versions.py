# -*- coding: utf-8 -*-
"""
Versions - Semantic-version ordering for library version strings.

The registry publishes plain ``MAJOR.MINOR.PATCH[-PRERELEASE]`` tokens.
Ordering compares the numeric core first; at an equal core a release
sorts ahead of any prerelease, and prereleases compare as plain strings.

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
import functools
import re
from typing import Iterable, List, Optional, Tuple

# xodindex internal
from xodindex.core.identifiers import to_non_empty_string


LATEST = "latest"
VERSION_MARKER = "v"

_LEADING_DIGITS = re.compile(r"\d+")


def _parse(version: str) -> Tuple[Tuple[int, int, int], str]:
    core, _, pre = str(version).partition("-")
    parts = []
    for piece in core.split("."):
        match = _LEADING_DIGITS.match(piece)
        parts.append(int(match.group()) if match else 0)
    while len(parts) < 3:
        parts.append(0)
    return (parts[0], parts[1], parts[2]), pre


def compare_versions_desc(a: str, b: str) -> int:
    """Comparator placing higher versions first.

    Parameters
    ----------
    a, b : str
        Version strings.

    Returns
    -------
    int
        Negative if ``a`` sorts before ``b``, positive if after, else 0.
    """
    core_a, pre_a = _parse(a)
    core_b, pre_b = _parse(b)
    for part_a, part_b in zip(core_a, core_b):
        if part_a != part_b:
            return part_b - part_a
    if not pre_a and pre_b:
        return -1
    if pre_a and not pre_b:
        return 1
    return (pre_a > pre_b) - (pre_a < pre_b)


def sort_versions_desc(versions: Iterable[str]) -> List[str]:
    """Return ``versions`` sorted newest first."""
    return sorted(versions, key=functools.cmp_to_key(compare_versions_desc))


def unique_strings(values: Iterable[object]) -> List[str]:
    """Trimmed, non-blank strings from ``values`` in first-seen order."""
    seen = {}
    for value in values:
        text = to_non_empty_string(value)
        if text is not None and text not in seen:
            seen[text] = None
    return list(seen)


def normalize_versions(versions: object, latest: Optional[str]) -> List[str]:
    """Deduplicate, complete and order a version list.

    Parameters
    ----------
    versions : object
        Candidate list; anything that is not a list counts as empty.
    latest : Optional[str]
        Resolved latest version, inserted when missing.

    Returns
    -------
    List[str]
        Versions newest first; ``[latest]`` (or ``["latest"]``) when
        nothing usable remains.
    """
    normalized = unique_strings(versions if isinstance(versions, list) else [])
    if latest and latest not in normalized:
        normalized.insert(0, latest)
    normalized = sort_versions_desc(normalized)
    return normalized if normalized else [latest or LATEST]


def with_version_marker(version: object) -> Optional[str]:
    """Prefix a version with ``v`` unless it is the ``latest`` sentinel."""
    value = to_non_empty_string(version)
    if value is None:
        return None
    if value == LATEST or value.startswith(VERSION_MARKER):
        return value
    return f"{VERSION_MARKER}{value}"
