"""Decoding of zippopotam.us JSON documents into postcode records.

The service uses keys with embedded spaces (``"post code"``, ``"place name"``,
...). Those are mapped onto the snake_case attributes of the domain model here
and nowhere else. Bodies are always read as UTF-8.
"""

from __future__ import annotations

import codecs
import json
from typing import TYPE_CHECKING, Any, Iterable

from postcode_lookup.common.errors import DecodeError
from postcode_lookup.common.models import Place, PostcodeRecord

if TYPE_CHECKING:
    from postcode_lookup.common.locator import Locator

BODY_ENCODING = "utf-8"

PLACE_FIELDS = (
    ("place name", "name"),
    ("latitude", "latitude"),
    ("longitude", "longitude"),
    ("state", "state"),
    ("state abbreviation", "state_abbreviation"),
)


def _text(obj: dict, key: str, ctx: str, locator: Locator | None) -> str:
    value = obj.get(key)
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    raise DecodeError(f"Expected text for {ctx}.{key!r}, got {type(value).__name__}", locator=locator)


def _place(entry: Any, index: int, locator: Locator | None) -> Place:
    ctx = f"places[{index}]"
    if not isinstance(entry, dict):
        raise DecodeError(f"Expected an object for {ctx}", locator=locator)
    return Place(**{attr: _text(entry, key, ctx, locator) for key, attr in PLACE_FIELDS})


def postcode_record_from_payload(payload: Any, *, locator: Locator | None = None) -> PostcodeRecord:
    if not isinstance(payload, dict):
        raise DecodeError("Expected a JSON object at the top level", locator=locator)

    postcode = _text(payload, "post code", "body", locator)
    country = _text(payload, "country", "body", locator)
    if not postcode or not country:
        raise DecodeError("Response is missing 'post code' or 'country'", locator=locator)

    raw_places = payload.get("places")
    if raw_places is None:
        raw_places = []
    if not isinstance(raw_places, list):
        raise DecodeError("Expected 'places' to be a list", locator=locator)

    return PostcodeRecord(
        postcode=postcode,
        country=country,
        country_abbreviation=_text(payload, "country abbreviation", "body", locator),
        places=tuple(_place(entry, idx, locator) for idx, entry in enumerate(raw_places)),
    )


def decode_postcode_record(body: bytes | str, *, locator: Locator | None = None) -> PostcodeRecord:
    if isinstance(body, bytes):
        try:
            text = body.decode(BODY_ENCODING)
        except UnicodeDecodeError as exc:
            raise DecodeError("Response body is not valid UTF-8", locator=locator) from exc
    else:
        text = body

    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise DecodeError(f"Response body is not valid JSON: {exc.msg}", locator=locator) from exc

    return postcode_record_from_payload(payload, locator=locator)


def decode_postcode_chunks(chunks: Iterable[bytes], *, locator: Locator | None = None) -> PostcodeRecord:
    """Decode a body delivered as byte chunks.

    Bytes are turned into text as each chunk arrives, so multi-byte characters
    split across chunk boundaries are handled. JSON parsing needs the complete
    document and runs once the stream is exhausted.
    """
    decoder = codecs.getincrementaldecoder(BODY_ENCODING)()
    parts: list[str] = []
    try:
        for chunk in chunks:
            if chunk:
                parts.append(decoder.decode(chunk))
        parts.append(decoder.decode(b"", final=True))
    except UnicodeDecodeError as exc:
        raise DecodeError("Response body is not valid UTF-8", locator=locator) from exc
    return decode_postcode_record("".join(parts), locator=locator)
