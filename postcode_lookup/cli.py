"""CLI entrypoint for zippopotam.us postcode lookups."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from postcode_lookup.common.config_loader import load_settings
from postcode_lookup.common.constants import (
    EXIT_HARD_FAIL,
    EXIT_LOOKUP_FAILED,
    EXIT_SUCCESS,
    TRANSFORM_KINDS,
)
from postcode_lookup.common.errors import PostcodeLookupError, TransformError
from postcode_lookup.common.ids import generate_run_id
from postcode_lookup.common.logging import build_logger, log_event
from postcode_lookup.common.models import Country, PostcodeRecord
from postcode_lookup.fetch.orchestrator import fetch_country_data, fetch_country_data_concurrently
from postcode_lookup.transforms.factory import build_transform
from postcode_lookup.transforms.future import FutureTransform


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="postcode-lookup", description=__doc__)
    parser.add_argument("zips", nargs="+", metavar="ZIP")
    parser.add_argument("--country", required=True, choices=[country.code for country in Country])
    parser.add_argument("--transform", default=None, choices=TRANSFORM_KINDS)
    parser.add_argument("--concurrent", action="store_true")
    parser.add_argument("--format", default="text", choices=["text", "json"])
    parser.add_argument("--config", default=None)
    parser.add_argument("--overlay-config", default=None)
    parser.add_argument("--run-id", default=None)
    parser.add_argument("--log-dir", default=None)
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARN", "ERROR"])
    return parser.parse_args(argv)


def render_records(records: list[PostcodeRecord], output_format: str) -> str:
    if output_format == "json":
        return json.dumps([record.to_dict() for record in records], ensure_ascii=False, indent=2)
    return "\n".join(str(record) for record in records)


def run_command(args: argparse.Namespace) -> int:
    run_id = args.run_id or generate_run_id()
    logger = build_logger(
        run_id,
        level=args.log_level,
        log_dir=Path(args.log_dir) if args.log_dir else None,
    )
    country = Country.from_code(args.country)

    try:
        settings = load_settings(
            Path(args.config) if args.config else None,
            overlay_path=Path(args.overlay_config) if args.overlay_config else None,
        )
        with build_transform(args.transform, settings) as transform:
            if args.concurrent:
                if not isinstance(transform, FutureTransform):
                    log_event(
                        logger,
                        "--concurrent requires the future transform",
                        run_id=run_id,
                        transform=transform.kind,
                        event="RUN_FAIL",
                        status="error",
                        error_code="CONFIG_ERROR",
                    )
                    return EXIT_HARD_FAIL
                records = fetch_country_data_concurrently(
                    country,
                    args.zips,
                    transform,
                    base_url=settings.base_url,
                    logger=logger,
                    run_id=run_id,
                )
            else:
                records = fetch_country_data(
                    country,
                    args.zips,
                    transform,
                    base_url=settings.base_url,
                    logger=logger,
                    run_id=run_id,
                )
    except TransformError:
        return EXIT_LOOKUP_FAILED
    except PostcodeLookupError as exc:
        log_event(
            logger,
            f"lookup aborted: {exc}",
            run_id=run_id,
            country=country.code,
            event="RUN_FAIL",
            status="error",
            error_code=exc.error_code,
        )
        return EXIT_HARD_FAIL

    print(render_records(records, args.format))
    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv if argv is not None else sys.argv[1:])
    try:
        return run_command(args)
    except Exception:
        return EXIT_HARD_FAIL


if __name__ == "__main__":
    raise SystemExit(main())
