# -*- coding: utf-8 -*-
"""
Mirror Manifest - Derive and persist the manifest and state documents.

The state map is the source of truth. The manifest is a sorted array
view over it plus run statistics. Both are written with the same
temp-file-then-rename contract as the catalog.

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
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

# xodindex internal
from xodindex.core.io import atomic_write_json
from xodindex.mirror.models import MirrorStats, artifact_key


def sorted_artifacts(state: Dict[str, Dict[str, Any]]) -> List[Dict[str, Any]]:
    """State entries with an id and version, sorted by id then version."""
    artifacts = []
    for key, entry in state.items():
        if isinstance(entry, dict) and entry.get('id') and entry.get('version'):
            artifacts.append(entry)
        else:
            logger.warning("Dropping malformed state entry %s", key)
    return sorted(artifacts, key=lambda entry: (entry['id'], entry['version']))


def build_manifest(
    state: Dict[str, Dict[str, Any]],
    stats: MirrorStats,
    source_generated_at: Optional[str],
    generated_at: str,
) -> Dict[str, Any]:
    """Build the manifest document from the state map."""
    artifacts = sorted_artifacts(state)
    return {
        'generatedAt': generated_at,
        'sourceIndexGeneratedAt': source_generated_at,
        'stats': stats.to_dict(total_mirrored=len(artifacts)),
        'artifacts': artifacts,
    }


def build_state(manifest: Dict[str, Any]) -> Dict[str, Any]:
    """Re-key the manifest's artifacts into the state document."""
    return {
        'generatedAt': manifest['generatedAt'],
        'sourceIndexGeneratedAt': manifest['sourceIndexGeneratedAt'],
        'artifacts': {
            artifact_key(entry['id'], entry['version']): entry
            for entry in manifest['artifacts']
        },
    }


def write_mirror(
    manifest_path: Path,
    state_path: Path,
    manifest: Dict[str, Any],
    state: Dict[str, Any],
) -> None:
    """Atomically write the manifest, then the state document."""
    atomic_write_json(manifest_path, manifest)
    atomic_write_json(state_path, state)
    logger.info(
        "Wrote mirror manifest (%d artifacts) to %s",
        len(manifest['artifacts']), manifest_path,
    )
