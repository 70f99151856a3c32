"""
app/connectors/base.py

Shared HTTP mechanics for outbound API clients.
"""

from __future__ import annotations

import logging
import time
from datetime import datetime
from typing import Any

import requests

from app.config import ExternalHTTPSettings

logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}


class ConnectorRequestError(RuntimeError):
    """
    Raised when a connector cannot complete a request after retries.
    """


class ConnectorTimeoutError(ConnectorRequestError):
    """
    Raised when a request cannot finish before its caller's deadline.
    """


class BaseConnector:
    """
    Base class for HTTP clients: retries with exponential backoff, a
    minimum interval between requests, and JSON decoding.
    """

    source: str

    def __init__(
        self,
        *,
        source: str,
        http_settings: ExternalHTTPSettings,
        session: requests.Session | None = None,
    ) -> None:
        self.source = source
        self._session = session or requests.Session()
        self._timeout_seconds = http_settings.timeout_seconds
        self._max_retries = http_settings.max_retries
        self._backoff_initial_seconds = http_settings.backoff_initial_seconds
        self._backoff_multiplier = http_settings.backoff_multiplier
        self._min_request_interval_seconds = (
            1.0 / http_settings.rate_limit_per_second if http_settings.rate_limit_per_second > 0 else 0.0
        )
        self._last_request_monotonic: float = 0.0

    def _request_json(
        self,
        *,
        method: str,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        json_body: Any = None,
        deadline: float | None = None,
    ) -> Any:
        """
        Execute an HTTP request and return parsed JSON with retry support.
        """

        response = self._request(
            method=method,
            url=url,
            params=params,
            headers=headers,
            json_body=json_body,
            deadline=deadline,
        )
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise ConnectorRequestError(f"{self.source}: response was not valid JSON.") from exc

    def _request(
        self,
        *,
        method: str,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        json_body: Any = None,
        data: Any = None,
        auth: tuple[str, str] | None = None,
        deadline: float | None = None,
    ) -> requests.Response:
        """
        Execute an HTTP request with rate limiting and exponential backoff.

        ``deadline`` is a ``time.monotonic()`` value. When given, every
        attempt's timeout and every wait is capped by the time remaining,
        and ConnectorTimeoutError is raised once it has passed.
        """

        last_error: Exception | None = None
        for attempt in range(self._max_retries + 1):
            self._apply_rate_limit(deadline)
            timeout_seconds = self._capped(self._timeout_seconds, deadline, url)
            try:
                response = self._session.request(
                    method=method,
                    url=url,
                    params=params,
                    headers=headers,
                    json=json_body,
                    data=data,
                    auth=auth,
                    timeout=timeout_seconds,
                )
                if response.status_code in RETRYABLE_STATUS_CODES:
                    raise requests.HTTPError(
                        f"Retryable HTTP status code: {response.status_code}",
                        response=response,
                    )
                response.raise_for_status()
                return response
            except requests.HTTPError as exc:
                last_error = exc
                status_code = exc.response.status_code if exc.response is not None else None
                is_retryable = status_code in RETRYABLE_STATUS_CODES
                if not is_retryable:
                    logger.error(
                        "Connector request failed source=%s status=%s url=%s error=%s",
                        self.source,
                        status_code,
                        url,
                        exc,
                    )
                    raise ConnectorRequestError(f"{self.source}: non-retryable request failure.") from exc
            except (requests.Timeout, requests.ConnectionError) as exc:
                last_error = exc

            if attempt >= self._max_retries:
                break

            backoff_seconds = self._capped(
                self._backoff_initial_seconds * (self._backoff_multiplier**attempt),
                deadline,
                url,
            )
            logger.warning(
                "Connector request retry source=%s attempt=%s/%s wait_seconds=%.2f url=%s",
                self.source,
                attempt + 1,
                self._max_retries,
                backoff_seconds,
                url,
            )
            time.sleep(backoff_seconds)

        if deadline is not None and time.monotonic() >= deadline:
            logger.warning("Connector request deadline exceeded source=%s url=%s", self.source, url)
            raise ConnectorTimeoutError(f"{self.source}: request deadline exceeded.") from last_error
        logger.error(
            "Connector request exhausted retries source=%s url=%s error=%s",
            self.source,
            url,
            last_error,
        )
        raise ConnectorRequestError(f"{self.source}: request failed after retries.") from last_error

    def _capped(self, seconds: float, deadline: float | None, url: str) -> float:
        """
        Cap ``seconds`` by the time left before ``deadline``.

        Raises ConnectorTimeoutError when no time is left.
        """

        if deadline is None:
            return seconds
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            logger.warning("Connector request deadline exceeded source=%s url=%s", self.source, url)
            raise ConnectorTimeoutError(f"{self.source}: request deadline exceeded.")
        return min(seconds, remaining)

    def _apply_rate_limit(self, deadline: float | None = None) -> None:
        """
        Enforce minimum interval between outbound requests.
        """

        if self._min_request_interval_seconds <= 0:
            return

        now = time.monotonic()
        elapsed = now - self._last_request_monotonic
        remaining = self._min_request_interval_seconds - elapsed
        if remaining > 0:
            if deadline is not None:
                remaining = min(remaining, max(0.0, deadline - now))
            time.sleep(remaining)
        self._last_request_monotonic = time.monotonic()

    @staticmethod
    def parse_iso_datetime(value: str) -> datetime:
        """
        Parse an ISO datetime string. A trailing ``Z`` is read as UTC;
        values without an offset stay naive.
        """

        normalized = value[:-1] + "+00:00" if value.endswith("Z") else value
        return datetime.fromisoformat(normalized)
