"""Non-blocking dispatch with decoding chained as a continuation."""

from __future__ import annotations

import asyncio

import httpx

from postcode_lookup.common.config_loader import LookupSettings
from postcode_lookup.common.errors import TransportError
from postcode_lookup.common.http import raise_for_status
from postcode_lookup.common.locator import Locator
from postcode_lookup.common.models import PostcodeRecord
from postcode_lookup.transforms.base import ResponseTransform
from postcode_lookup.transforms.decode import decode_postcode_record


class FutureTransform(ResponseTransform):
    """Dispatches through ``httpx.AsyncClient`` and decodes on a worker thread.

    ``transform`` waits for the combined dispatch and decode, so callers see the
    same behaviour as the buffered variant. It drives its own event loop and
    must not be called while one is running; async code awaits
    ``transform_async`` instead.
    """

    kind = "future"

    def __init__(
        self,
        settings: LookupSettings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(settings)
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        timeout = httpx.Timeout(self.settings.timeout.read, connect=self.settings.timeout.connect)
        return httpx.AsyncClient(
            headers=self._headers(),
            timeout=timeout,
            transport=self.transport,
            follow_redirects=False,
        )

    async def _dispatch(self, locator: Locator) -> bytes:
        async with self._client() as client:
            try:
                response = await client.get(locator.url)
            except httpx.HTTPError as exc:
                raise TransportError(f"Request to {locator.url} failed: {exc}", locator=locator) from exc
        raise_for_status(response.status_code, locator)
        return response.content

    async def transform_async(self, locator: Locator) -> PostcodeRecord:
        body = await self._dispatch(locator)
        return await asyncio.to_thread(decode_postcode_record, body, locator=locator)

    def transform(self, locator: Locator) -> PostcodeRecord:
        return asyncio.run(self.transform_async(locator))
