"""Decode the body inline while it streams off the socket."""

from __future__ import annotations

from typing import Iterator

import requests

from postcode_lookup.common.config_loader import LookupSettings
from postcode_lookup.common.errors import TransportError
from postcode_lookup.common.http import HttpClient
from postcode_lookup.common.locator import Locator
from postcode_lookup.common.models import PostcodeRecord
from postcode_lookup.transforms.base import ResponseTransform
from postcode_lookup.transforms.decode import decode_postcode_chunks


class StreamingTransform(ResponseTransform):
    """Maps the response byte stream straight onto a ``PostcodeRecord``.

    The body is requested with ``stream=True`` and handed to the decoder chunk
    by chunk; any buffering needed for JSON parsing happens inside the decoder.
    """

    kind = "streaming"

    def __init__(self, settings: LookupSettings | None = None, *, http_client: HttpClient | None = None) -> None:
        super().__init__(settings)
        self.http = http_client or HttpClient(user_agent=self.settings.user_agent, timeout=self.settings.timeout)

    def _chunks(self, response: requests.Response, locator: Locator) -> Iterator[bytes]:
        try:
            yield from response.iter_content(chunk_size=self.settings.stream_chunk_size)
        except requests.RequestException as exc:
            raise TransportError(f"Response stream from {locator.url} broke off: {exc}", locator=locator) from exc

    def transform(self, locator: Locator) -> PostcodeRecord:
        response = self.http.get(locator, stream=True)
        with response:
            return decode_postcode_chunks(self._chunks(response, locator), locator=locator)

    def close(self) -> None:
        self.http.close()
