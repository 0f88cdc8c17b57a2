# -*- coding: utf-8 -*-
"""
Errors - Exception taxonomy for the sync and mirror pipelines.

Two families are kept apart on purpose. ``FetchError`` reports that one
network request failed; callers decide whether that is fatal. Everything
derived from ``FatalSyncError`` aborts the whole run and no partial
output is written. Expected per-item outcomes are never signalled with
exceptions (see ``xodindex.catalog.models.ItemOutcome``).

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
from typing import Iterable, Optional


class FetchError(RuntimeError):
    """A single request failed after the retry policy gave up.

    Parameters
    ----------
    url : str
        Requested URL.
    attempts : int
        Number of attempts made.
    last_error : Optional[BaseException]
        Failure observed on the final attempt.
    message : Optional[str]
        Overrides the default message.
    """

    def __init__(
        self,
        url: str,
        attempts: int,
        last_error: Optional[BaseException] = None,
        message: Optional[str] = None,
    ) -> None:
        self.url = url
        self.attempts = attempts
        self.last_error = last_error
        if message is None:
            reason = str(last_error) if last_error is not None else "unknown error"
            message = f"Failed to fetch {url} after {attempts} attempts: {reason}"
        super().__init__(message)


class HttpStatusError(FetchError):
    """The server answered with a status that is not worth retrying."""

    def __init__(self, url: str, status: int, attempts: int = 1) -> None:
        self.status = status
        super().__init__(url, attempts, message=f"HTTP {status} for {url}")


class FatalSyncError(RuntimeError):
    """Base class for conditions that abort a whole run."""


class DiscoveryError(FatalSyncError):
    """The registry listing could not be crawled or yielded nothing."""


class OverlayError(FatalSyncError):
    """The curated overlay document is malformed."""


class CatalogInvariantError(FatalSyncError):
    """A normalized catalog violates a schema invariant."""


class DuplicateIdError(CatalogInvariantError):
    """Two or more catalog records share an id.

    Parameters
    ----------
    duplicate_ids : Iterable[str]
        Every id that occurs more than once.
    """

    def __init__(self, duplicate_ids: Iterable[str]) -> None:
        self.duplicate_ids = sorted(set(duplicate_ids))
        super().__init__(
            f"Duplicate ids detected: {', '.join(self.duplicate_ids)}"
        )


class ServiceDescriptionError(FatalSyncError):
    """The package-manager API description is unusable."""


class MirrorInputError(FatalSyncError):
    """The catalog or state document given to the mirror is invalid."""
