"""Shared contract for the response transform variants."""

from __future__ import annotations

from abc import ABC, abstractmethod
from types import TracebackType

from postcode_lookup.common.config_loader import LookupSettings
from postcode_lookup.common.http import default_headers
from postcode_lookup.common.locator import Locator
from postcode_lookup.common.models import PostcodeRecord


class ResponseTransform(ABC):
    """Turns the response for one locator into a ``PostcodeRecord``.

    Failures surface as ``TransportError`` (no usable body) or ``DecodeError``
    (body received but not a postcode document). Nothing is retried.
    """

    kind = "abstract"

    def __init__(self, settings: LookupSettings | None = None) -> None:
        self.settings = settings or LookupSettings()

    @abstractmethod
    def transform(self, locator: Locator) -> PostcodeRecord:
        raise NotImplementedError

    def close(self) -> None:
        return None

    def __enter__(self) -> "ResponseTransform":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def _headers(self) -> dict[str, str]:
        return default_headers(self.settings.user_agent)
