"""Fetch orchestration with fail-fast semantics."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Sequence

from postcode_lookup.common.errors import MalformedRequestError, PostcodeLookupError, TransformError
from postcode_lookup.common.locator import Locator, build_locator
from postcode_lookup.common.logging import get_logger, log_event
from postcode_lookup.common.models import Country, PostcodeRecord
from postcode_lookup.common.time_utils import elapsed_ms
from postcode_lookup.transforms.base import ResponseTransform
from postcode_lookup.transforms.future import FutureTransform


def _log_failure(
    logger: logging.Logger,
    exc: PostcodeLookupError,
    *,
    country: Country,
    transform: ResponseTransform,
    run_id: str | None,
) -> None:
    zip_code = getattr(exc, "zip_code", None)
    log_event(
        logger,
        f"fetch failed for zip {zip_code!r}: {exc}",
        level=logging.ERROR,
        run_id=run_id,
        country=country.code,
        zip_code=zip_code,
        transform=transform.kind,
        event="FETCH_FAIL",
        status="error",
        error_code=exc.error_code,
    )


def _build_locators(
    country: Country,
    zips: Sequence[str],
    *,
    base_url: str,
    logger: logging.Logger,
    transform: ResponseTransform,
    run_id: str | None,
) -> list[Locator]:
    locators = []
    for zip_code in zips:
        try:
            locators.append(build_locator(country, zip_code, base_url=base_url))
        except MalformedRequestError as exc:
            _log_failure(logger, exc, country=country, transform=transform, run_id=run_id)
            raise
    return locators


def fetch_country_data(
    country: Country,
    zips: Sequence[str],
    transform: ResponseTransform,
    *,
    base_url: str | None = None,
    logger: logging.Logger | None = None,
    run_id: str | None = None,
) -> list[PostcodeRecord]:
    """Fetch one record per zip, in input order, stopping at the first failure.

    Each zip is dispatched only after the previous one completed, so a failure
    means no later zip is ever requested. The raised error carries the failing
    zip as ``zip_code``.
    Without ``base_url`` the service configured on the transform is used.
    """
    logger = logger or get_logger()
    base_url = base_url or transform.settings.base_url
    started_at = time.monotonic()
    log_event(
        logger,
        f"fetching {len(zips)} zip(s) for {country.display_name}",
        run_id=run_id,
        country=country.code,
        transform=transform.kind,
        event="FETCH_START",
        status="ok",
    )

    records: list[PostcodeRecord] = []
    for zip_code in zips:
        zip_started_at = time.monotonic()
        try:
            locator = build_locator(country, zip_code, base_url=base_url)
            record = transform.transform(locator)
        except (MalformedRequestError, TransformError) as exc:
            _log_failure(logger, exc, country=country, transform=transform, run_id=run_id)
            raise
        log_event(
            logger,
            f"fetched {locator.url}",
            level=logging.DEBUG,
            run_id=run_id,
            country=country.code,
            zip_code=zip_code,
            transform=transform.kind,
            event="ZIP_FETCHED",
            status="ok",
            duration_ms=elapsed_ms(zip_started_at),
        )
        records.append(record)

    log_event(
        logger,
        f"fetched {len(records)} record(s) for {country.display_name}",
        run_id=run_id,
        country=country.code,
        transform=transform.kind,
        event="FETCH_END",
        status="ok",
        duration_ms=elapsed_ms(started_at),
        records_out=len(records),
    )
    return records


async def fetch_country_data_async(
    country: Country,
    zips: Sequence[str],
    transform: FutureTransform,
    *,
    base_url: str | None = None,
    logger: logging.Logger | None = None,
    run_id: str | None = None,
) -> list[PostcodeRecord]:
    """Fan out every zip at once and reassemble the results in input order.

    All locators are built before anything is dispatched. When several zips
    fail, the error of the lowest input index is raised, independent of which
    request finished first.
    """
    logger = logger or get_logger()
    base_url = base_url or transform.settings.base_url
    started_at = time.monotonic()
    locators = _build_locators(
        country,
        zips,
        base_url=base_url,
        logger=logger,
        transform=transform,
        run_id=run_id,
    )
    log_event(
        logger,
        f"dispatching {len(locators)} zip(s) for {country.display_name} concurrently",
        run_id=run_id,
        country=country.code,
        transform=transform.kind,
        event="FETCH_START",
        status="ok",
    )

    outcomes = await asyncio.gather(
        *(transform.transform_async(locator) for locator in locators),
        return_exceptions=True,
    )

    records: list[PostcodeRecord] = []
    for outcome in outcomes:
        if isinstance(outcome, BaseException):
            if isinstance(outcome, TransformError):
                _log_failure(logger, outcome, country=country, transform=transform, run_id=run_id)
            raise outcome
        records.append(outcome)

    log_event(
        logger,
        f"fetched {len(records)} record(s) for {country.display_name}",
        run_id=run_id,
        country=country.code,
        transform=transform.kind,
        event="FETCH_END",
        status="ok",
        duration_ms=elapsed_ms(started_at),
        records_out=len(records),
    )
    return records


def fetch_country_data_concurrently(
    country: Country,
    zips: Sequence[str],
    transform: FutureTransform,
    *,
    base_url: str | None = None,
    logger: logging.Logger | None = None,
    run_id: str | None = None,
) -> list[PostcodeRecord]:
    return asyncio.run(
        fetch_country_data_async(
            country,
            zips,
            transform,
            base_url=base_url,
            logger=logger,
            run_id=run_id,
        )
    )
