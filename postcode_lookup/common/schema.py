"""Minimal strict schema for YAML config validation."""

from __future__ import annotations

from postcode_lookup.common.constants import TRANSFORM_KINDS
from postcode_lookup.common.errors import ConfigError


def _assert_required_keys(obj: dict, required: set[str], ctx: str) -> None:
    if not isinstance(obj, dict):
        raise ConfigError(f"{ctx} must be a mapping")
    missing = required - set(obj)
    if missing:
        missing_str = ", ".join(sorted(missing))
        raise ConfigError(f"Missing keys in {ctx}: {missing_str}")


def _assert_no_unknown_keys(obj: dict, known: set[str], ctx: str, allow_unknown: bool) -> None:
    if allow_unknown:
        return
    unknown = set(obj) - known
    if unknown:
        unknown_str = ", ".join(sorted(unknown))
        raise ConfigError(f"Unknown keys in {ctx}: {unknown_str}")


def _assert_positive_number(value: object, ctx: str) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ConfigError(f"{ctx} must be a positive number")


def validate_lookup_config(cfg: dict, *, allow_unknown: bool = False) -> dict:
    _assert_required_keys(cfg, {"service", "transform"}, "lookup config")
    _assert_no_unknown_keys(cfg, {"service", "transform"}, "lookup config", allow_unknown)

    service = cfg["service"]
    _assert_required_keys(service, {"base_url", "user_agent", "timeout"}, "service")
    _assert_no_unknown_keys(service, {"base_url", "user_agent", "timeout"}, "service", allow_unknown)
    if not isinstance(service["base_url"], str) or not service["base_url"].strip():
        raise ConfigError("service.base_url must be a non-empty string")
    if not isinstance(service["user_agent"], str) or not service["user_agent"].strip():
        raise ConfigError("service.user_agent must be a non-empty string")

    timeout = service["timeout"]
    _assert_required_keys(timeout, {"connect", "read"}, "service.timeout")
    _assert_no_unknown_keys(timeout, {"connect", "read"}, "service.timeout", allow_unknown)
    _assert_positive_number(timeout["connect"], "service.timeout.connect")
    _assert_positive_number(timeout["read"], "service.timeout.read")

    transform = cfg["transform"]
    _assert_required_keys(transform, {"default", "stream_chunk_size"}, "transform")
    _assert_no_unknown_keys(transform, {"default", "stream_chunk_size"}, "transform", allow_unknown)
    if transform["default"] not in TRANSFORM_KINDS:
        kinds = ", ".join(TRANSFORM_KINDS)
        raise ConfigError(f"transform.default must be one of: {kinds}")
    chunk_size = transform["stream_chunk_size"]
    if isinstance(chunk_size, bool) or not isinstance(chunk_size, int) or chunk_size <= 0:
        raise ConfigError("transform.stream_chunk_size must be a positive integer")

    return cfg
