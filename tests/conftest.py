"""
Shared pytest fixtures: an in-process HTTP session double and fast
connector settings.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

import pytest
import requests

from app.config import ExternalHTTPSettings


def json_response(payload: Any = None, status_code: int = 200, url: str = "") -> requests.Response:
    response = requests.Response()
    response.status_code = status_code
    response.url = url
    response._content = b"" if payload is None else json.dumps(payload).encode("utf-8")
    return response


@dataclass
class RecordedCall:
    method: str
    url: str
    params: dict[str, Any] | None
    json: Any
    data: Any
    auth: Any
    headers: dict[str, str] | None
    timeout: Any = None


@dataclass
class _Route:
    method: str
    fragment: str
    payload: Any
    status_code: int
    error: Exception | None


@dataclass
class FakeSession:
    """
    Stands in for ``requests.Session``. Routes match on method and a URL
    substring; the most recently added matching route wins.
    """

    calls: list[RecordedCall] = field(default_factory=list)
    routes: list[_Route] = field(default_factory=list)

    def add(
        self,
        method: str,
        fragment: str,
        payload: Any = None,
        *,
        status_code: int = 200,
        error: Exception | None = None,
    ) -> None:
        self.routes.append(_Route(method.upper(), fragment, payload, status_code, error))

    def request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        self.calls.append(
            RecordedCall(
                method=method.upper(),
                url=url,
                params=kwargs.get("params"),
                json=kwargs.get("json"),
                data=kwargs.get("data"),
                auth=kwargs.get("auth"),
                headers=kwargs.get("headers"),
                timeout=kwargs.get("timeout"),
            )
        )
        for route in reversed(self.routes):
            if route.method == method.upper() and route.fragment in url:
                if route.error is not None:
                    raise route.error
                return json_response(route.payload, route.status_code, url)
        return json_response({"error": "not found"}, 404, url)

    def calls_to(self, method: str, fragment: str) -> list[RecordedCall]:
        return [call for call in self.calls if call.method == method.upper() and fragment in call.url]


@pytest.fixture()
def fake_session() -> FakeSession:
    return FakeSession()


@pytest.fixture()
def http_settings() -> ExternalHTTPSettings:
    """No retries and no rate limiting, so tests never sleep."""
    return ExternalHTTPSettings(
        timeout_seconds=1.0,
        max_retries=0,
        backoff_initial_seconds=0.0,
        backoff_multiplier=1.0,
        rate_limit_per_second=0.0,
    )
