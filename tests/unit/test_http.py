from __future__ import annotations

import pytest
import requests

from postcode_lookup.common.config_loader import TimeoutConfig
from postcode_lookup.common.errors import TransportError
from postcode_lookup.common.http import HttpClient
from postcode_lookup.common.locator import build_locator
from postcode_lookup.common.models import Country

LOCATOR = build_locator(Country.GERMANY, "22880")


class FakeResponse:
    def __init__(self, status_code: int, content: bytes = b"{}"):
        self.status_code = status_code
        self.content = content
        self.closed = False

    def close(self):
        self.closed = True


def test_http_get_success_sends_headers_and_timeouts(monkeypatch):
    client = HttpClient(user_agent="tests/1.0", timeout=TimeoutConfig(connect=1.5, read=4.0))
    seen = {}

    def fake_request(**kwargs):
        seen.update(kwargs)
        return FakeResponse(200, b'{"ok": true}')

    monkeypatch.setattr(client.session, "request", fake_request)
    response = client.get(LOCATOR)

    assert response.content == b'{"ok": true}'
    assert seen["method"] == "GET"
    assert seen["url"] == "http://api.zippopotam.us/de/22880"
    assert seen["headers"] == {"User-Agent": "tests/1.0", "Accept": "application/json"}
    assert seen["timeout"] == (1.5, 4.0)
    assert seen["stream"] is False
    assert seen["allow_redirects"] is False


def test_http_non_success_status_raises_transport_error(monkeypatch):
    client = HttpClient()
    response = FakeResponse(404)
    monkeypatch.setattr(client.session, "request", lambda **_kwargs: response)

    with pytest.raises(TransportError) as excinfo:
        client.get(LOCATOR)

    assert excinfo.value.status_code == 404
    assert excinfo.value.zip_code == "22880"
    assert excinfo.value.kind == "dispatch"
    assert response.closed


def test_http_connection_failure_raises_transport_error(monkeypatch):
    client = HttpClient()

    def refuse(**_kwargs):
        raise requests.ConnectionError("connection refused")

    monkeypatch.setattr(client.session, "request", refuse)

    with pytest.raises(TransportError) as excinfo:
        client.get(LOCATOR)

    assert excinfo.value.status_code is None
    assert isinstance(excinfo.value.__cause__, requests.ConnectionError)


def test_http_client_closes_session(monkeypatch):
    closed = []
    with HttpClient() as client:
        monkeypatch.setattr(client.session, "close", lambda: closed.append(True))
    assert closed == [True]
