from __future__ import annotations

import json
import logging
import math
from datetime import datetime, timezone
from typing import Any

import httpx

from directions.exceptions import DirectionsRequestError
from directions.services.errors import (
    DirectionsError,
    InvalidInput,
    InvalidResponse,
    NoData,
    NoMatches,
    ProfileNotFound,
    RateLimited,
    RequestTooLarge,
    TooManyCoordinates,
    UnableToLocate,
    UnableToRoute,
    Unknown,
)

logger = logging.getLogger(__name__)

RATE_LIMIT_INTERVAL_HEADER = "X-Rate-Limit-Interval"
RATE_LIMIT_LIMIT_HEADER = "X-Rate-Limit-Limit"
RATE_LIMIT_RESET_HEADER = "X-Rate-Limit-Reset"

SERVICE_CODE_ERRORS: dict[str, DirectionsError] = {
    "NoRoute": UnableToRoute(),
    "NoSegment": UnableToLocate(),
    "NoMatch": NoMatches(),
    "TooManyCoordinates": TooManyCoordinates(),
    "ProfileNotFound": ProfileNotFound(),
}


def classify_failure(
    response: httpx.Response | None = None,
    *,
    cause: BaseException | None = None,
) -> DirectionsError:
    """Turn a failed exchange with the directions service into an error value.

    The service's ``code`` field wins over the HTTP status, which only decides
    between a size limit, a rate limit and an unclassified failure.
    """
    if response is None:
        return Unknown(underlying=cause)

    if not response.content.strip():
        return NoData()

    try:
        payload = response.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        logger.debug("Directions response is not JSON (status %s)", response.status_code)
        return InvalidResponse()
    if not isinstance(payload, dict):
        return InvalidResponse()

    code = _optional_str(payload.get("code"))
    message = _optional_str(payload.get("message"))

    if code == "InvalidInput":
        return InvalidInput(message=message)
    if code in SERVICE_CODE_ERRORS:
        return SERVICE_CODE_ERRORS[code]

    if response.status_code == httpx.codes.REQUEST_ENTITY_TOO_LARGE:
        return RequestTooLarge()
    if response.status_code == httpx.codes.TOO_MANY_REQUESTS:
        return _rate_limited(response.headers)

    logger.debug("Unclassified directions failure: status=%s code=%s", response.status_code, code)
    return Unknown(response=response, underlying=cause, code=code, message=message)


def ensure_success(response: httpx.Response) -> dict[str, Any]:
    """Return the parsed body of a successful response, raising otherwise."""
    if response.is_success:
        try:
            payload = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            payload = None
        if isinstance(payload, dict) and payload.get("code") == "Ok":
            return payload

    error = classify_failure(response)
    logger.info("Directions request failed: %s", error.kind.value)
    raise DirectionsRequestError(error)


def _rate_limited(headers: httpx.Headers) -> RateLimited:
    interval = _parse_number(headers.get(RATE_LIMIT_INTERVAL_HEADER), float)
    limit = _parse_number(headers.get(RATE_LIMIT_LIMIT_HEADER), int)
    reset_seconds = _parse_number(headers.get(RATE_LIMIT_RESET_HEADER), float)
    reset_time = None
    if reset_seconds is not None:
        try:
            reset_time = datetime.fromtimestamp(reset_seconds, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            logger.debug("Ignoring out of range rate limit reset %r", reset_seconds)
    return RateLimited(interval=interval, limit=limit, reset_time=reset_time)


def _parse_number(value: str | None, kind: type) -> Any:
    if value is None:
        return None
    try:
        number = kind(value.strip())
    except ValueError:
        logger.debug("Ignoring malformed rate limit header value %r", value)
        return None
    if not math.isfinite(number) or number < 0:
        return None
    return number


def _optional_str(value: Any) -> str | None:
    return value if isinstance(value, str) else None
