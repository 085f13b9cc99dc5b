"""Configuration loading and validation."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from yaml import YAMLError

from postcode_lookup.common.constants import (
    DEFAULT_SERVICE_BASE,
    DEFAULT_STREAM_CHUNK_SIZE,
    DEFAULT_TRANSFORM,
    USER_AGENT,
)
from postcode_lookup.common.errors import ConfigError
from postcode_lookup.common.fs import read_yaml
from postcode_lookup.common.schema import validate_lookup_config


@dataclass(frozen=True)
class TimeoutConfig:
    connect: float = 10.0
    read: float = 30.0


@dataclass(frozen=True)
class LookupSettings:
    base_url: str = DEFAULT_SERVICE_BASE
    user_agent: str = USER_AGENT
    timeout: TimeoutConfig = field(default_factory=TimeoutConfig)
    default_transform: str = DEFAULT_TRANSFORM
    stream_chunk_size: int = DEFAULT_STREAM_CHUNK_SIZE


def _deep_merge(base: Any, overlay: Any) -> Any:
    if isinstance(base, dict) and isinstance(overlay, dict):
        merged = dict(base)
        for key, value in overlay.items():
            if key in merged:
                merged[key] = _deep_merge(merged[key], value)
            else:
                merged[key] = value
        return merged
    return overlay


def _read_config(path: Path) -> dict:
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")
    try:
        payload = read_yaml(path)
    except YAMLError as exc:
        raise ConfigError(f"Config file is not valid YAML: {path}") from exc
    return payload if payload is not None else {}


def _load_yaml_with_overlay(path: Path, overlay_path: Path | None) -> dict:
    base = _read_config(path)
    if overlay_path is None or not overlay_path.exists():
        return base
    overlay = _read_config(overlay_path)
    return _deep_merge(base, overlay)


def settings_from_config(cfg: dict) -> LookupSettings:
    service = cfg["service"]
    transform = cfg["transform"]
    return LookupSettings(
        base_url=service["base_url"],
        user_agent=service["user_agent"],
        timeout=TimeoutConfig(
            connect=float(service["timeout"]["connect"]),
            read=float(service["timeout"]["read"]),
        ),
        default_transform=transform["default"],
        stream_chunk_size=int(transform["stream_chunk_size"]),
    )


def load_settings(
    config_path: Path | None,
    *,
    overlay_path: Path | None = None,
    allow_unknown: bool = False,
) -> LookupSettings:
    if config_path is None:
        return LookupSettings()
    cfg = _load_yaml_with_overlay(config_path, overlay_path)
    return settings_from_config(validate_lookup_config(cfg, allow_unknown=allow_unknown))
