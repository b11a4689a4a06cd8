"""
app/connectors/base.py

HTTP mechanics shared by the dataset connectors: one session, a
per-request timeout and a bounded exponential backoff.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import requests

from app.config import DatasetSourceSettings

logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = frozenset({429, 500, 502, 503, 504})


class ConnectorRequestError(RuntimeError):
    """
    Raised when an endpoint cannot be read, after any retries.
    """

    def __init__(self, source: str, url: str, reason: str, status_code: int | None = None) -> None:
        self.source = source
        self.url = url
        self.status_code = status_code
        super().__init__(f"{source}: {reason} ({url})")


class _RetryableFailure(Exception):
    def __init__(self, reason: str, status_code: int | None = None) -> None:
        self.reason = reason
        self.status_code = status_code
        super().__init__(reason)


@dataclass(frozen=True)
class RetryPolicy:
    """
    ``max_retries`` extra attempts, waiting ``initial * multiplier**n``
    seconds before retry ``n`` (zero-based).
    """

    max_retries: int = 0
    initial_delay_seconds: float = 0.5
    multiplier: float = 2.0

    @classmethod
    def from_settings(cls, settings: DatasetSourceSettings) -> "RetryPolicy":
        return cls(
            max_retries=settings.max_retries,
            initial_delay_seconds=settings.backoff_initial_seconds,
            multiplier=settings.backoff_multiplier,
        )

    def delay_for(self, retry_index: int) -> float:
        return self.initial_delay_seconds * (self.multiplier**retry_index)


class BaseConnector:
    """
    Base class for connectors that read JSON from HTTP endpoints.
    """

    source: str

    def __init__(
        self,
        *,
        source: str,
        settings: DatasetSourceSettings,
        session: requests.Session | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.source = source
        self._session = session or requests.Session()
        self._timeout_seconds = settings.timeout_seconds
        self._retry_policy = RetryPolicy.from_settings(settings)
        self._sleep = sleep

    def _get_json(
        self,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """
        GET *url* and decode the body as JSON.
        """

        response = self._send_with_retry("GET", url, params=params, headers=headers)
        try:
            return response.json()
        except ValueError as exc:
            raise ConnectorRequestError(self.source, url, "body is not valid JSON") from exc

    def _send_with_retry(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, Any] | None,
        headers: dict[str, str] | None,
    ) -> requests.Response:
        policy = self._retry_policy
        attempt = 0
        while True:
            try:
                return self._send_once(method, url, params=params, headers=headers)
            except _RetryableFailure as failure:
                if attempt >= policy.max_retries:
                    logger.error(
                        "Connector gave up source=%s url=%s attempts=%s reason=%s",
                        self.source,
                        url,
                        attempt + 1,
                        failure.reason,
                    )
                    raise ConnectorRequestError(
                        self.source, url, failure.reason, failure.status_code
                    ) from failure
                delay = policy.delay_for(attempt)
                attempt += 1
                logger.warning(
                    "Connector retry source=%s attempt=%s/%s wait_seconds=%.2f reason=%s",
                    self.source,
                    attempt,
                    policy.max_retries,
                    delay,
                    failure.reason,
                )
                self._sleep(delay)

    def _send_once(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, Any] | None,
        headers: dict[str, str] | None,
    ) -> requests.Response:
        """
        One attempt. Transport errors and retryable statuses raise
        ``_RetryableFailure``; any other error status is final.
        """

        try:
            response = self._session.request(
                method=method,
                url=url,
                params=params,
                headers=headers,
                timeout=self._timeout_seconds,
            )
        except (requests.Timeout, requests.ConnectionError) as exc:
            raise _RetryableFailure(f"transport error: {exc}") from exc

        if response.status_code in RETRYABLE_STATUS_CODES:
            raise _RetryableFailure(f"status {response.status_code}", response.status_code)
        try:
            response.raise_for_status()
        except requests.HTTPError as exc:
            logger.error(
                "Connector request rejected source=%s status=%s url=%s",
                self.source,
                response.status_code,
                url,
            )
            raise ConnectorRequestError(
                self.source, url, f"status {response.status_code}", response.status_code
            ) from exc
        return response
