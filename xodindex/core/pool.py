# -*- coding: utf-8 -*-
"""
WorkerPool - Failure-isolated fan-out over a bounded thread pool.

Runs one callable per work item and collects an ``ItemResult`` per item
in input order. An exception raised for one item is captured in that
item's result and never cancels its siblings. With ``max_workers == 1``
items run inline, one after another, on the calling thread.

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
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Generic, List, Optional, Sequence, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


class ItemResult(Generic[T, R]):
    """Outcome of running the pool callable on one item.

    Parameters
    ----------
    item : T
        The work item.
    value : Optional[R]
        Return value when the call succeeded.
    error : Optional[Exception]
        Exception raised by the call, if any.
    """

    def __init__(
        self,
        item: T,
        value: Optional[R] = None,
        error: Optional[Exception] = None,
    ) -> None:
        self.item = item
        self.value = value
        self.error = error

    @property
    def ok(self) -> bool:
        return self.error is None

    def __repr__(self) -> str:
        if self.ok:
            return f"ItemResult({self.item!r}: ok)"
        return f"ItemResult({self.item!r}: {self.error!r})"


class WorkerPool:
    """Runs per-item work sequentially or across worker threads.

    Parameters
    ----------
    max_workers : int
        Maximum number of concurrent threads. Default 1 (sequential).
    """

    def __init__(self, max_workers: int = 1) -> None:
        if max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {max_workers}")
        self._max_workers = max_workers

    @property
    def max_workers(self) -> int:
        return self._max_workers

    def map(
        self,
        func: Callable[[T], R],
        items: Sequence[T],
    ) -> List[ItemResult[T, R]]:
        """Apply ``func`` to every item, isolating failures per item.

        Parameters
        ----------
        func : Callable[[T], R]
            Work function.
        items : Sequence[T]
            Work items.

        Returns
        -------
        List[ItemResult]
            One result per item, in the order of ``items``. All work has
            finished when this returns.
        """
        if self._max_workers == 1 or len(items) <= 1:
            return [self._run_one(func, item) for item in items]

        with ThreadPoolExecutor(max_workers=self._max_workers) as executor:
            futures = [executor.submit(self._run_one, func, item) for item in items]
            return [future.result() for future in futures]

    @staticmethod
    def _run_one(func: Callable[[T], R], item: T) -> ItemResult[T, R]:
        try:
            return ItemResult(item, value=func(item))
        except Exception as e:
            logger.debug("Work item %r failed: %s", item, e)
            return ItemResult(item, error=e)
