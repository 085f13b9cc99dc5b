"""JSON logging with stable schema."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from postcode_lookup.common.constants import JSON_LOG_FIELDS
from postcode_lookup.common.fs import ensure_dir
from postcode_lookup.common.time_utils import utc_timestamp_iso

LOGGER_NAME = "postcode_lookup"


class JsonLineFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": utc_timestamp_iso(),
            "level": record.levelname,
            "run_id": getattr(record, "run_id", None),
            "country": getattr(record, "country", None),
            "zip_code": getattr(record, "zip_code", None),
            "transform": getattr(record, "transform", None),
            "event": getattr(record, "event", None),
            "status": getattr(record, "status", None),
            "duration_ms": getattr(record, "duration_ms", None),
            "records_out": getattr(record, "records_out", None),
            "error_code": getattr(record, "error_code", None),
            "message": record.getMessage(),
        }
        for field in JSON_LOG_FIELDS:
            payload.setdefault(field, None)
        return json.dumps(payload, ensure_ascii=False)


def build_logger(run_id: str, level: str = "INFO", log_dir: Path | None = None) -> logging.Logger:
    logger = logging.getLogger(f"{LOGGER_NAME}.{run_id}")
    logger.setLevel(level.upper())
    logger.handlers.clear()
    logger.propagate = False

    stream = logging.StreamHandler()
    stream.setFormatter(JsonLineFormatter())
    logger.addHandler(stream)

    if log_dir is not None:
        log_path = log_dir / f"{run_id}.log.jsonl"
        ensure_dir(log_path.parent)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(JsonLineFormatter())
        logger.addHandler(file_handler)

    return logger


def get_logger() -> logging.Logger:
    return logging.getLogger(LOGGER_NAME)


def log_event(logger: logging.Logger, message: str, level: int = logging.INFO, **event_fields: Any) -> None:
    logger.log(level, message, extra=event_fields)
