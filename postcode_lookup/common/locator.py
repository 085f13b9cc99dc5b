"""Resource locators for the zippopotam.us lookup service."""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import quote, urlparse

from postcode_lookup.common.constants import DEFAULT_SERVICE_BASE
from postcode_lookup.common.errors import MalformedRequestError
from postcode_lookup.common.models import Country


@dataclass(frozen=True)
class Locator:
    url: str
    country: Country
    zip_code: str


def encode_zip(zip_code: str) -> str:
    """Percent-encode a zip token so it occupies exactly one path segment."""
    try:
        return quote(zip_code, safe="")
    except UnicodeEncodeError as exc:
        raise MalformedRequestError(f"Zip {zip_code!r} cannot be percent-encoded", zip_code=zip_code) from exc


def _service_base(base_url: str) -> str:
    parsed = urlparse(base_url)
    if parsed.scheme not in {"http", "https"} or not parsed.netloc:
        raise MalformedRequestError(f"Invalid service base URL: {base_url!r}")
    return base_url.rstrip("/")


def build_locator(country: Country, zip_code: str, *, base_url: str = DEFAULT_SERVICE_BASE) -> Locator:
    if not zip_code or not zip_code.strip():
        raise MalformedRequestError("Zip must be a non-empty token", zip_code=zip_code)
    url = f"{_service_base(base_url)}/{country.code}/{encode_zip(zip_code)}"
    return Locator(url=url, country=country, zip_code=zip_code)
