# -*- coding: utf-8 -*-
"""
Mirror Models - Data models for mirrored library artifacts.

Defines the download candidate, the persisted state entry, run
statistics and the run report used by the artifact mirror.

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
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Any, Dict, Optional


def artifact_key(library_id: str, version: str) -> str:
    """State key for one artifact: ``owner/lib@version``."""
    return f"{library_id}@{version}"


def artifact_relative_path(owner: str, libname: str, version: str) -> str:
    """Repository-relative POSIX path of an artifact file."""
    return str(PurePosixPath("mirror", "libs", owner, libname, f"{version}.xodball.json"))


@dataclass(frozen=True)
class ArtifactCandidate:
    """One ``(library, version)`` pair the mirror should hold.

    Attributes
    ----------
    library_id : str
        Normalized ``owner/lib`` id.
    owner : str
        Library owner.
    libname : str
        Library name.
    version : str
        Version carrying a ``v`` marker, or ``latest``.
    """

    library_id: str
    owner: str
    libname: str
    version: str

    @property
    def key(self) -> str:
        return artifact_key(self.library_id, self.version)

    @property
    def relative_path(self) -> str:
        return artifact_relative_path(self.owner, self.libname, self.version)


class ArtifactEntry:
    """Persisted record of one successfully mirrored artifact.

    Parameters
    ----------
    library_id : str
        Normalized library id.
    owner : str
        Library owner.
    libname : str
        Library name.
    version : str
        Marked version string.
    source_provider : str
        Registry the artifact came from.
    source_url : str
        URL the artifact was downloaded from.
    path : str
        Repository-relative path of the stored file.
    sha256 : str
        Hex digest of the stored bytes.
    size : int
        Byte length of the stored file.
    mirrored_at : str
        ISO-8601 UTC download timestamp.
    previous_sha256 : Optional[str]
        Digest recorded before a re-download changed the content.
    """

    def __init__(
        self,
        library_id: str,
        owner: str,
        libname: str,
        version: str,
        source_provider: str,
        source_url: str,
        path: str,
        sha256: str,
        size: int,
        mirrored_at: str,
        previous_sha256: Optional[str] = None,
    ) -> None:
        self.library_id = library_id
        self.owner = owner
        self.libname = libname
        self.version = version
        self.source_provider = source_provider
        self.source_url = source_url
        self.path = path
        self.sha256 = sha256
        self.size = size
        self.mirrored_at = mirrored_at
        self.previous_sha256 = previous_sha256

    @property
    def key(self) -> str:
        return artifact_key(self.library_id, self.version)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the state document's camelCase layout."""
        data: Dict[str, Any] = {
            'id': self.library_id,
            'owner': self.owner,
            'libname': self.libname,
            'version': self.version,
            'sourceProvider': self.source_provider,
            'sourceUrl': self.source_url,
            'path': self.path,
            'sha256': self.sha256,
            'bytes': self.size,
            'mirroredAt': self.mirrored_at,
        }
        if self.previous_sha256:
            data['previousSha256'] = self.previous_sha256
        return data

    def __repr__(self) -> str:
        return f"ArtifactEntry({self.key!r}, sha256={self.sha256[:12]!r})"


class MirrorStats:
    """Counters for one mirror run."""

    def __init__(self) -> None:
        self.total_candidates = 0
        self.downloaded = 0
        self.skipped_existing = 0
        self.failed = 0
        self.content_changed = 0

    def to_dict(self, total_mirrored: int) -> Dict[str, int]:
        return {
            'totalCandidates': self.total_candidates,
            'downloaded': self.downloaded,
            'skippedExisting': self.skipped_existing,
            'failed': self.failed,
            'contentChanged': self.content_changed,
            'totalMirroredArtifacts': total_mirrored,
        }

    def __repr__(self) -> str:
        return (
            f"MirrorStats(downloaded={self.downloaded}, "
            f"skippedExisting={self.skipped_existing}, failed={self.failed})"
        )


class MirrorReport:
    """Result of a mirror run.

    Parameters
    ----------
    stats : MirrorStats
        Run counters.
    total_artifacts : int
        Artifacts recorded in state after the run.
    failures : Dict[str, str]
        Failed candidate keys mapped to the error message.
    """

    def __init__(
        self,
        stats: MirrorStats,
        total_artifacts: int,
        failures: Dict[str, str],
    ) -> None:
        self.stats = stats
        self.total_artifacts = total_artifacts
        self.failures = failures
