"""Blocking dispatch, then a single decode of the in-memory body."""

from __future__ import annotations

from postcode_lookup.common.config_loader import LookupSettings
from postcode_lookup.common.http import HttpClient
from postcode_lookup.common.locator import Locator
from postcode_lookup.common.models import PostcodeRecord
from postcode_lookup.transforms.base import ResponseTransform
from postcode_lookup.transforms.decode import decode_postcode_record


class BufferedTransform(ResponseTransform):
    kind = "buffered"

    def __init__(self, settings: LookupSettings | None = None, *, http_client: HttpClient | None = None) -> None:
        super().__init__(settings)
        self.http = http_client or HttpClient(user_agent=self.settings.user_agent, timeout=self.settings.timeout)

    def transform(self, locator: Locator) -> PostcodeRecord:
        response = self.http.get(locator)
        return decode_postcode_record(response.content, locator=locator)

    def close(self) -> None:
        self.http.close()
