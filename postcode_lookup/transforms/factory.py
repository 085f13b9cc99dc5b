"""Selects the transform variant when a client is constructed."""

from __future__ import annotations

from postcode_lookup.common.config_loader import LookupSettings
from postcode_lookup.common.constants import TRANSFORM_KINDS
from postcode_lookup.common.errors import ConfigError
from postcode_lookup.transforms.base import ResponseTransform
from postcode_lookup.transforms.buffered import BufferedTransform
from postcode_lookup.transforms.future import FutureTransform
from postcode_lookup.transforms.streaming import StreamingTransform

TRANSFORMS: dict[str, type[ResponseTransform]] = {
    "buffered": BufferedTransform,
    "future": FutureTransform,
    "streaming": StreamingTransform,
}


def build_transform(kind: str | None = None, settings: LookupSettings | None = None) -> ResponseTransform:
    settings = settings or LookupSettings()
    selected = kind or settings.default_transform
    if selected not in TRANSFORMS:
        raise ConfigError(f"Unknown transform {selected!r}; expected one of: {', '.join(TRANSFORM_KINDS)}")
    return TRANSFORMS[selected](settings)
