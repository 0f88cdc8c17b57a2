# -*- coding: utf-8 -*-
"""
Artifact Mirror - Incrementally download library version artifacts.

Reads the catalog and the prior mirror state, enumerates every
``(library, version)`` candidate, skips candidates whose recorded file
is still on disk and downloads the rest through the package-manager
API. Each stored file is hashed over the exact bytes written. State is
only ever added to or overwritten; a library dropped from the catalog
keeps its mirrored artifacts.

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
import hashlib
import json
import logging
from typing import Any, Dict, List, NamedTuple, Optional

logger = logging.getLogger(__name__)

# xodindex internal
from xodindex.core.config import IndexConfig
from xodindex.core.errors import MirrorInputError
from xodindex.core.fetch import ResilientFetcher
from xodindex.core.identifiers import parse_id
from xodindex.core.io import (
    Clock,
    atomic_write_bytes,
    dumps_stable,
    isoformat_utc,
    read_json,
    utc_now,
)
from xodindex.core.pool import WorkerPool
from xodindex.core.versions import unique_strings, with_version_marker
from xodindex.mirror.manifest import build_manifest, build_state, write_mirror
from xodindex.mirror.models import (
    ArtifactCandidate,
    ArtifactEntry,
    MirrorReport,
    MirrorStats,
)
from xodindex.mirror.service import (
    ServiceOperation,
    api_base_url,
    build_path,
    fetch_service_description,
    resolve_operation,
)


class ArtifactEndpoint(NamedTuple):
    """Resolved download endpoint: API origin plus operation."""

    base_url: str
    operation: ServiceOperation


class ArtifactMirror:
    """Mirrors every catalogued library version to local storage.

    Parameters
    ----------
    config : IndexConfig
        Catalog, mirror and service-description locations.
    fetcher : Optional[ResilientFetcher]
        HTTP client. Built from ``config`` if None.
    clock : Optional[Clock]
        Returns the current UTC time.
    """

    def __init__(
        self,
        config: IndexConfig,
        fetcher: Optional[ResilientFetcher] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        self._config = config
        self._fetcher = fetcher or ResilientFetcher(config)
        self._clock = clock or utc_now

    def load_index(self) -> Dict[str, Any]:
        """Load the catalog document.

        Raises
        ------
        MirrorInputError
            If the catalog is missing, unreadable or has no library list.
        """
        path = self._config.index_path
        try:
            index = read_json(path)
        except json.JSONDecodeError as e:
            raise MirrorInputError(f"Invalid index file at {path}: {e}") from e
        if not isinstance(index, dict) or not isinstance(index.get('libraries'), list):
            raise MirrorInputError(f"Invalid index file at {path}")
        return index

    def load_state(self) -> Dict[str, Dict[str, Any]]:
        """Load prior artifact state keyed by ``id@version``; empty if absent."""
        path = self._config.state_path
        try:
            document = read_json(path, default={})
        except json.JSONDecodeError as e:
            raise MirrorInputError(f"Invalid mirror state at {path}: {e}") from e
        artifacts = document.get('artifacts') if isinstance(document, dict) else None
        return dict(artifacts) if isinstance(artifacts, dict) else {}

    def resolve_endpoint(self) -> ArtifactEndpoint:
        """Look up the artifact download operation once per run.

        Raises
        ------
        ServiceDescriptionError
            If the description is unreachable or lacks the operation.
        """
        swagger_url = self._config.swagger_url
        spec = fetch_service_description(self._fetcher, swagger_url)
        operation = resolve_operation(spec, self._config.operation_id)
        logger.info(
            "Resolved %s to %s %s",
            self._config.operation_id, operation.method, operation.path_template,
        )
        return ArtifactEndpoint(api_base_url(swagger_url), operation)

    def enumerate_candidates(self, index: Dict[str, Any]) -> List[ArtifactCandidate]:
        """List every artifact the catalog declares, sorted by library id.

        Libraries with an invalid id are skipped. A library without a
        ``versions`` list contributes its ``latest`` value.
        """
        libraries = []
        for library in index.get('libraries', []):
            parsed = parse_id(library.get('id')) if isinstance(library, dict) else None
            if parsed is None:
                logger.debug("Skipping catalog entry with invalid id: %r", library)
                continue
            libraries.append((parsed, library))
        libraries.sort(key=lambda pair: pair[0].id)

        candidates: List[ArtifactCandidate] = []
        seen = set()
        for parsed, library in libraries:
            raw_versions = library.get('versions')
            if not isinstance(raw_versions, list):
                raw_versions = [library.get('latest')]
            for version in unique_strings(with_version_marker(v) for v in raw_versions):
                candidate = ArtifactCandidate(parsed.id, parsed.owner, parsed.libname, version)
                if candidate.key not in seen:
                    seen.add(candidate.key)
                    candidates.append(candidate)
        return candidates

    def is_mirrored(
        self,
        candidate: ArtifactCandidate,
        state: Dict[str, Dict[str, Any]],
    ) -> bool:
        """True if state records the candidate and its file still exists."""
        existing = state.get(candidate.key)
        if not isinstance(existing, dict) or existing.get('path') != candidate.relative_path:
            return False
        if (self._config.root_dir / candidate.relative_path).is_file():
            return True
        logger.info("State lists %s but the file is missing, re-downloading", candidate.key)
        return False

    def artifact_url(self, candidate: ArtifactCandidate, endpoint: ArtifactEndpoint) -> str:
        path = build_path(endpoint.operation.path_template, {
            'orgname': candidate.owner,
            'libname': candidate.libname,
            'semver_or_latest': candidate.version,
        })
        return f"{endpoint.base_url}{path}"

    def download(
        self,
        candidate: ArtifactCandidate,
        endpoint: ArtifactEndpoint,
        previous: Optional[Dict[str, Any]] = None,
    ) -> ArtifactEntry:
        """Fetch, store and hash one artifact.

        Parameters
        ----------
        candidate : ArtifactCandidate
            Artifact to download.
        endpoint : ArtifactEndpoint
            Resolved download endpoint.
        previous : Optional[Dict[str, Any]]
            Prior state entry for this key, if any.

        Returns
        -------
        ArtifactEntry
            New state entry.
        """
        source_url = self.artifact_url(candidate, endpoint)
        payload = self._fetcher.get_json(source_url)

        data = dumps_stable(payload).encode("utf-8")
        sha256 = hashlib.sha256(data).hexdigest()
        size = atomic_write_bytes(
            self._config.root_dir / candidate.relative_path, data
        )

        previous_sha256 = None
        if isinstance(previous, dict):
            recorded = previous.get('sha256')
            if recorded and recorded != sha256:
                logger.warning(
                    "Content of %s changed since it was last mirrored (%s -> %s)",
                    candidate.key, recorded, sha256,
                )
                previous_sha256 = recorded

        return ArtifactEntry(
            library_id=candidate.library_id,
            owner=candidate.owner,
            libname=candidate.libname,
            version=candidate.version,
            source_provider=self._config.source_provider,
            source_url=source_url,
            path=candidate.relative_path,
            sha256=sha256,
            size=size,
            mirrored_at=isoformat_utc(self._clock()),
            previous_sha256=previous_sha256,
        )

    def run(self) -> MirrorReport:
        """Mirror every missing artifact and persist manifest and state.

        Returns
        -------
        MirrorReport
            Run statistics and per-candidate failures.

        Raises
        ------
        FatalSyncError
            If the catalog is invalid or the endpoint cannot be resolved.
        """
        index = self.load_index()
        prior_state = self.load_state()
        endpoint = self.resolve_endpoint()

        stats = MirrorStats()
        next_state = dict(prior_state)
        candidates = self.enumerate_candidates(index)
        stats.total_candidates = len(candidates)

        pending = []
        for candidate in candidates:
            if self.is_mirrored(candidate, next_state):
                stats.skipped_existing += 1
            else:
                pending.append(candidate)

        pool = WorkerPool(self._config.max_workers)
        results = pool.map(
            lambda c: self.download(c, endpoint, prior_state.get(c.key)), pending
        )

        failures: Dict[str, str] = {}
        for result in results:
            key = result.item.key
            if result.ok:
                entry = result.value
                next_state[key] = entry.to_dict()
                stats.downloaded += 1
                if entry.previous_sha256:
                    stats.content_changed += 1
                logger.info("Mirrored %s", key)
            else:
                stats.failed += 1
                failures[key] = str(result.error)
                logger.warning("Failed %s: %s", key, result.error)

        manifest = build_manifest(
            next_state,
            stats,
            index.get('generatedAt'),
            isoformat_utc(self._clock()),
        )
        write_mirror(
            self._config.manifest_path,
            self._config.state_path,
            manifest,
            build_state(manifest),
        )
        return MirrorReport(stats, len(manifest['artifacts']), failures)
