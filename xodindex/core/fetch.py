# -*- coding: utf-8 -*-
"""
Resilient Fetch - Bounded-timeout HTTP GETs with classified retries.

Wraps a ``requests.Session`` in a Tenacity retry loop. Timeouts,
connection failures, undecodable JSON bodies and the configured
retryable statuses are retried with a linear backoff
(``attempt * retry_base_delay``); any other non-success status fails
immediately. This is the only module that sleeps or retries on the
network.

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
import logging
import time
from typing import Any, Callable, Optional

# Third-party
import requests
from tenacity import (
    RetryCallState,
    RetryError,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_incrementing,
)

logger = logging.getLogger(__name__)

# xodindex internal
from xodindex.core.config import IndexConfig
from xodindex.core.errors import FetchError, HttpStatusError


class TransientFetchError(Exception):
    """One attempt failed in a way that is worth retrying."""


class ResilientFetcher:
    """HTTP GET client owning the timeout and retry policy.

    Parameters
    ----------
    config : IndexConfig
        Supplies timeout, retry counts, backoff and user agent.
    session : Optional[requests.Session]
        Session to issue requests with. A new one is created if None.
    sleep : Callable[[float], None]
        Sleep function used between attempts.
    """

    def __init__(
        self,
        config: IndexConfig,
        session: Optional[requests.Session] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._config = config
        self._session = session or requests.Session()
        self._sleep = sleep

    @property
    def max_attempts(self) -> int:
        return self._config.max_fetch_retries + 1

    def get_text(self, url: str) -> str:
        """Fetch ``url`` and return the body as text.

        Raises
        ------
        HttpStatusError
            On a non-retryable, non-success status.
        FetchError
            When every attempt failed.
        """
        return self._fetch(url, self._read_text)

    def get_json(self, url: str) -> Any:
        """Fetch ``url`` and return the decoded JSON body.

        Raises
        ------
        HttpStatusError
            On a non-retryable, non-success status.
        FetchError
            When every attempt failed.
        """
        return self._fetch(url, self._read_json)

    def close(self) -> None:
        self._session.close()

    def _fetch(self, url: str, reader: Callable[[requests.Response], Any]) -> Any:
        base = self._config.retry_base_delay
        retrying = Retrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_incrementing(start=base, increment=base),
            retry=retry_if_exception_type(TransientFetchError),
            before_sleep=self._log_retry,
            sleep=self._sleep,
        )
        try:
            return retrying(self._attempt, url, reader)
        except RetryError as exc:
            last_error = exc.last_attempt.exception()
            raise FetchError(
                url, exc.last_attempt.attempt_number, last_error
            ) from last_error

    def _attempt(
        self,
        url: str,
        reader: Callable[[requests.Response], Any],
    ) -> Any:
        timeout = self._config.request_timeout
        try:
            response = self._session.get(
                url,
                timeout=timeout,
                headers={"User-Agent": self._config.user_agent},
            )
        except requests.Timeout as e:
            raise TransientFetchError(f"timed out after {timeout}s") from e
        except requests.RequestException as e:
            raise TransientFetchError(str(e)) from e

        status = response.status_code
        if not 200 <= status < 300:
            if status in self._config.retryable_statuses:
                raise TransientFetchError(f"HTTP {status}")
            raise HttpStatusError(url, status)
        return reader(response)

    @staticmethod
    def _read_text(response: requests.Response) -> str:
        return response.text

    @staticmethod
    def _read_json(response: requests.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise TransientFetchError(f"invalid JSON body: {e}") from e

    def _log_retry(self, retry_state: RetryCallState) -> None:
        url = retry_state.args[0] if retry_state.args else "<unknown>"
        error = retry_state.outcome.exception() if retry_state.outcome else None
        delay = retry_state.next_action.sleep if retry_state.next_action else 0.0
        logger.warning(
            "Retrying %s (attempt %d/%d) after %.1fs due to %s",
            url,
            retry_state.attempt_number,
            self._config.max_fetch_retries,
            delay,
            error,
        )
