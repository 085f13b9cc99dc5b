"""Data models for postcode lookups."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any


class Country(Enum):
    GERMANY = ("de", "Germany")
    DENMARK = ("dk", "Denmark")
    NETHERLANDS = ("nl", "Netherlands")

    def __init__(self, code: str, display_name: str) -> None:
        if not code or not display_name:
            raise ValueError("country code and name must be non-empty")
        self.code = code
        self.display_name = display_name

    @classmethod
    def from_code(cls, code: str) -> "Country":
        wanted = code.strip().lower()
        for country in cls:
            if country.code == wanted:
                return country
        raise ValueError(f"Unsupported country code: {code!r}")

    def __str__(self) -> str:
        return self.display_name


@dataclass(frozen=True)
class Place:
    name: str = ""
    # Coordinates stay as the service's text, no float round-tripping.
    latitude: str = ""
    longitude: str = ""
    state: str = ""
    state_abbreviation: str = ""

    def __str__(self) -> str:
        return f"{self.name} ({self.state}, {self.state_abbreviation}) {self.latitude}/{self.longitude}"

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class PostcodeRecord:
    postcode: str
    country: str
    country_abbreviation: str = ""
    places: tuple[Place, ...] = field(default_factory=tuple)

    def __str__(self) -> str:
        places = ",".join(str(place) for place in self.places)
        return (
            f"Country  : {self.country}\n"
            f"Postcode : {self.postcode}\n"
            f"Places   : [{places}]\n"
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "postcode": self.postcode,
            "country": self.country,
            "country_abbreviation": self.country_abbreviation,
            "places": [place.to_dict() for place in self.places],
        }
