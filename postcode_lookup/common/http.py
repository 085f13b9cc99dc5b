"""Blocking HTTP client shared by the requests-based transforms."""

from __future__ import annotations

from types import TracebackType

import requests

from postcode_lookup.common.config_loader import TimeoutConfig
from postcode_lookup.common.constants import USER_AGENT
from postcode_lookup.common.errors import TransportError
from postcode_lookup.common.locator import Locator


def default_headers(user_agent: str) -> dict[str, str]:
    return {"User-Agent": user_agent, "Accept": "application/json"}


def raise_for_status(status_code: int, locator: Locator) -> None:
    if not 200 <= status_code < 300:
        raise TransportError(
            f"HTTP status {status_code} from {locator.url}",
            locator=locator,
            status_code=status_code,
        )


class HttpClient:
    def __init__(
        self,
        *,
        user_agent: str = USER_AGENT,
        timeout: TimeoutConfig | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.user_agent = user_agent
        self.timeout = timeout or TimeoutConfig()
        self.session = session or requests.Session()

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "HttpClient":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def _raise_for_status(self, response: requests.Response, locator: Locator) -> None:
        if not 200 <= response.status_code < 300:
            response.close()
            raise_for_status(response.status_code, locator)

    def get(
        self,
        locator: Locator,
        *,
        stream: bool = False,
    ) -> requests.Response:
        """GET the locator's URL; with ``stream=True`` the body is left unread.

        Redirects are not followed; a 3xx answer is a ``TransportError``.
        """
        try:
            response = self.session.request(
                method="GET",
                url=locator.url,
                headers=default_headers(self.user_agent),
                timeout=(self.timeout.connect, self.timeout.read),
                stream=stream,
                allow_redirects=False,
            )
        except requests.RequestException as exc:
            raise TransportError(f"Request to {locator.url} failed: {exc}", locator=locator) from exc
        self._raise_for_status(response, locator)
        return response
