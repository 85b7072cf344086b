"""HttpSourceClient against a stubbed requests session."""

from __future__ import annotations

from typing import Any, Dict, List

import pytest
import requests

from siteintel.adapters import build_query
from siteintel.connectors import HttpSourceClient
from siteintel.errors import SourceFailure
from siteintel.jurisdictions import JURISDICTIONS
from siteintel.normalize import normalize_address

PARCELS = JURISDICTIONS["davidson"].resource("parcels")
LEGISTAR = JURISDICTIONS["davidson"].resource("legistar")
ADDR = normalize_address("1200 Main Street, Nashville, TN 37203")


class StubResponse:
    def __init__(self, status_code: int = 200, payload: Any = None, reason: str = "OK", bad_json: bool = False):
        self.status_code = status_code
        self.reason = reason
        self._payload = payload
        self._bad_json = bad_json

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def json(self) -> Any:
        if self._bad_json:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self._payload


class StubSession:
    def __init__(self, result: Any):
        self.result = result
        self.requests: List[Dict[str, Any]] = []
        self.closed = False

    def close(self) -> None:
        self.closed = True

    def get(self, url: str, **kwargs: Any) -> Any:
        self.requests.append({"url": url, **kwargs})
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


def _client(result: Any) -> HttpSourceClient:
    return HttpSourceClient(session=StubSession(result), timeout=20)


def test_returns_parsed_json() -> None:
    body = {"features": [{"attributes": {"PropAddr": "1200 MAIN ST"}}]}
    client = _client(StubResponse(payload=body))
    assert client.fetch_parsed(build_query(PARCELS, ADDR)) == body


def test_sends_dialect_params_and_headers() -> None:
    client = _client(StubResponse(payload=[]))
    d = build_query(LEGISTAR, ADDR)
    client.fetch_parsed(d)

    sent = client.s.requests[0]
    assert sent["url"] == d.endpoint
    assert sent["params"] == d.params()
    assert sent["timeout"] == 20
    assert sent["headers"]["Accept"] == "application/json"
    assert sent["headers"]["User-Agent"].startswith("HavenSiteIntel")


def test_http_error_status() -> None:
    client = _client(StubResponse(500, reason="Internal Server Error"))
    d = build_query(PARCELS, ADDR)
    with pytest.raises(SourceFailure) as exc:
        client.fetch_parsed(d)
    assert exc.value.reason == "HTTP 500: Internal Server Error"
    assert exc.value.url == d.url()


def test_timeout() -> None:
    client = _client(requests.Timeout("read timed out"))
    with pytest.raises(SourceFailure) as exc:
        client.fetch_parsed(build_query(PARCELS, ADDR))
    assert exc.value.reason == "Timed out after 20s"


def test_connection_error() -> None:
    client = _client(requests.ConnectionError("Name or service not known"))
    with pytest.raises(SourceFailure) as exc:
        client.fetch_parsed(build_query(PARCELS, ADDR))
    assert exc.value.reason == "ConnectionError: Name or service not known"


def test_invalid_json() -> None:
    client = _client(StubResponse(bad_json=True))
    with pytest.raises(SourceFailure) as exc:
        client.fetch_parsed(build_query(PARCELS, ADDR))
    assert exc.value.reason == "Response was not valid JSON"


def test_arcgis_error_envelope_is_a_failure() -> None:
    client = _client(StubResponse(payload={"error": {"code": 400, "message": "Invalid query parameters"}}))
    with pytest.raises(SourceFailure) as exc:
        client.fetch_parsed(build_query(PARCELS, ADDR))
    assert exc.value.reason == "ArcGIS error 400: Invalid query parameters"


def test_error_key_outside_arcgis_is_data() -> None:
    body = [{"error": {"code": 1}}]
    client = _client(StubResponse(payload=body))
    assert client.fetch_parsed(build_query(LEGISTAR, ADDR)) == body


def test_close_releases_the_session() -> None:
    client = _client(StubResponse(payload=[]))
    client.close()
    assert client.s.closed
