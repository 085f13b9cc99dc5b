from __future__ import annotations

from pathlib import Path
from urllib.parse import unquote, urlparse

import httpx
import pytest
import requests

from postcode_lookup.common.config_loader import LookupSettings
from postcode_lookup.transforms.base import ResponseTransform
from postcode_lookup.transforms.future import FutureTransform

FIXTURE_DIR = Path(__file__).parent / "fixtures" / "zippopotam"


class FakeResponse:
    def __init__(self, status_code: int, content: bytes, stream_error: Exception | None = None):
        self.status_code = status_code
        self.content = content
        self._stream_error = stream_error
        self.closed = False

    def iter_content(self, chunk_size: int = 1):
        for start in range(0, len(self.content), chunk_size):
            yield self.content[start : start + chunk_size]
            if self._stream_error is not None:
                raise self._stream_error

    def close(self):
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, *_exc):
        self.close()


class FakeZippoService:
    """Serves the recorded zippopotam.us bodies to both requests and httpx."""

    def __init__(self):
        self.bodies = {path.stem: path.read_bytes() for path in FIXTURE_DIR.glob("*.json")}
        self.statuses: dict[str, int] = {}
        self.transport_failures: set[str] = set()
        self.stream_failures: set[str] = set()
        self.redirects: dict[str, str] = {}
        self.requested: list[str] = []
        self.urls: list[str] = []
        self.headers: list[dict[str, str]] = []

    def _key(self, url: str) -> str:
        country, zip_code = urlparse(url).path.strip("/").split("/")
        return f"{country}_{unquote(zip_code)}"

    def _redirect_target(self, url: str) -> str:
        parsed = urlparse(url)
        return f"{parsed.scheme}://{parsed.netloc}{self.redirects[self._key(url)]}"

    def _lookup(self, url: str) -> tuple[int, bytes]:
        key = self._key(url)
        self.requested.append(key)
        self.urls.append(url)
        if key in self.redirects:
            return 301, b""
        if key in self.statuses:
            return self.statuses[key], b"{}"
        if key in self.bodies:
            return 200, self.bodies[key]
        return 404, b"{}"

    def request(self, **kwargs):
        self.headers.append(dict(kwargs["headers"]))
        status, body = self._lookup(kwargs["url"])
        if status == 301 and kwargs.get("allow_redirects", True):
            return self.request(**dict(kwargs, url=self._redirect_target(kwargs["url"])))
        if self._key(kwargs["url"]) in self.transport_failures:
            raise requests.ConnectionError("connection refused")
        stream_error = None
        if self._key(kwargs["url"]) in self.stream_failures:
            stream_error = requests.exceptions.ChunkedEncodingError("connection reset mid-body")
        return FakeResponse(status, body, stream_error=stream_error)

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.headers.append(dict(request.headers))
        status, body = self._lookup(str(request.url))
        if self._key(str(request.url)) in self.transport_failures:
            raise httpx.ConnectError("connection refused", request=request)
        if status == 301:
            return httpx.Response(301, headers={"Location": self._redirect_target(str(request.url))})
        return httpx.Response(status, content=body)


@pytest.fixture
def fake_service() -> FakeZippoService:
    return FakeZippoService()


@pytest.fixture
def lookup_settings() -> LookupSettings:
    # Seven-byte chunks split the multi-byte characters in the Danish fixture.
    return LookupSettings(stream_chunk_size=7)


@pytest.fixture
def wire(monkeypatch, fake_service):
    def _wire(transform: ResponseTransform) -> ResponseTransform:
        if isinstance(transform, FutureTransform):
            transform.transport = httpx.MockTransport(fake_service.handle)
        else:
            monkeypatch.setattr(transform.http.session, "request", fake_service.request)
        return transform

    return _wire
