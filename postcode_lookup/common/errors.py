"""Domain errors and failure typing."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from postcode_lookup.common.locator import Locator


class PostcodeLookupError(Exception):
    """Base class for lookup failures."""

    error_code = "POSTCODE_LOOKUP_ERROR"


class ConfigError(PostcodeLookupError):
    """Raised for invalid or missing configuration."""

    error_code = "CONFIG_ERROR"


class MalformedRequestError(PostcodeLookupError):
    """Raised when a resource locator cannot be built for a zip."""

    error_code = "MALFORMED_REQUEST"

    def __init__(self, message: str, *, zip_code: str | None = None) -> None:
        super().__init__(message)
        self.zip_code = zip_code


class TransformError(PostcodeLookupError):
    """Raised when a response cannot be turned into a postcode record.

    ``kind`` is ``"dispatch"`` when the transport never produced a usable body
    and ``"decode"`` when a body arrived but did not have the expected shape.
    """

    error_code = "TRANSFORM_ERROR"
    kind = "transform"

    def __init__(self, message: str, *, locator: Locator | None = None) -> None:
        super().__init__(message)
        self.locator = locator

    @property
    def zip_code(self) -> str | None:
        return self.locator.zip_code if self.locator is not None else None

    @property
    def url(self) -> str | None:
        return self.locator.url if self.locator is not None else None


class TransportError(TransformError):
    """Connection, timeout, protocol or non-success status failure."""

    error_code = "TRANSPORT_ERROR"
    kind = "dispatch"

    def __init__(
        self,
        message: str,
        *,
        locator: Locator | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message, locator=locator)
        self.status_code = status_code


class DecodeError(TransformError):
    """A body was received but is not a valid postcode document."""

    error_code = "DECODE_ERROR"
    kind = "decode"
