from __future__ import annotations

from datetime import datetime, timezone as dt_timezone
from zoneinfo import ZoneInfo

import httpx
import pytest
from django.utils import formats, timezone, translation

from directions.services.errors import (
    ERROR_TYPES,
    InvalidInput,
    InvalidResponse,
    NoData,
    NoMatches,
    RateLimited,
    RequestTooLarge,
    TooManyCoordinates,
    UnableToRoute,
    Unknown,
)
from directions.services.explainer import (
    ErrorExplanation,
    FormattingContext,
    describe_status_code,
    explain,
    failure_reason,
    format_interval,
    recovery_suggestion,
)

RESET = datetime(2026, 10, 19, 15, 0, tzinfo=dt_timezone.utc)
ENGLISH = FormattingContext(language="en-us", time_zone=dt_timezone.utc)


class ExplainedFailure(Exception):
    failure_reason = "The tile server is down."
    recovery_suggestion = "Try again in a few minutes."


@pytest.mark.parametrize("error_type", list(ERROR_TYPES.values()))
def test_every_kind_has_a_failure_reason(error_type: type) -> None:
    explanation = explain(error_type(), ENGLISH)

    assert isinstance(explanation.reason, str)


def test_fixed_reasons() -> None:
    assert failure_reason(NoData()) == "The server returned an empty response."
    assert failure_reason(UnableToRoute()) == (
        "No route could be found between the specified locations."
    )
    assert failure_reason(RequestTooLarge()) == "The request is too large."


@pytest.mark.parametrize("error", [NoData(), InvalidInput("bad"), InvalidResponse()])
def test_kinds_without_suggestions(error) -> None:
    assert recovery_suggestion(error) is None


def test_fixed_suggestions() -> None:
    assert recovery_suggestion(NoMatches()) == (
        "Try again making sure that your tracepoints lie in close proximity to a road or path."
    )
    assert "ferry connection" in recovery_suggestion(UnableToRoute())


def test_coordinate_limit_comes_from_settings(settings) -> None:
    settings.DIRECTIONS_MAX_COORDINATES = 25

    assert recovery_suggestion(TooManyCoordinates()) == "Try again with 25 coordinates or fewer."


def test_invalid_input_echoes_message() -> None:
    assert failure_reason(InvalidInput("Waypoint 3 is malformed")) == "Waypoint 3 is malformed"


def test_rate_limited_reason_and_suggestion() -> None:
    error = RateLimited(interval=3600, limit=300, reset_time=RESET)

    explanation = explain(error, ENGLISH)

    assert "300" in explanation.reason
    assert "1 hour" in explanation.reason
    assert explanation.reason == (
        "More than 300 requests have been made with this access token "
        "within a period of 1 hour."
    )
    with translation.override("en-us"), timezone.override(dt_timezone.utc):
        expected_date = formats.date_format(RESET, "DATETIME_FORMAT")
    assert explanation.suggestion is not None
    assert explanation.suggestion.startswith("Wait until ")
    assert expected_date in explanation.suggestion
    assert explanation.suggestion.endswith(" UTC before retrying.")


def test_rate_limited_without_details() -> None:
    error = RateLimited(interval=None, limit=None, reset_time=None)

    assert failure_reason(error) == "Too many requests."
    assert recovery_suggestion(error) is None


def test_rate_limited_needs_interval_and_limit() -> None:
    assert failure_reason(RateLimited(interval=60)) == "Too many requests."
    assert failure_reason(RateLimited(limit=60)) == "Too many requests."


def test_rate_limited_count_uses_locale_grouping() -> None:
    error = RateLimited(interval=60, limit=3000)

    assert "3,000" in failure_reason(error, ENGLISH)
    assert "3.000" in failure_reason(error, FormattingContext(language="de"))


def test_reset_time_uses_context_time_zone() -> None:
    berlin = ZoneInfo("Europe/Berlin")
    context = FormattingContext(language="en-us", time_zone=berlin)

    suggestion = recovery_suggestion(RateLimited(reset_time=RESET), context)

    with translation.override("en-us"), timezone.override(berlin):
        expected_date = formats.date_format(timezone.localtime(RESET), "DATETIME_FORMAT")
    assert suggestion == f"Wait until {expected_date} CEST before retrying."


def test_naive_reset_time_is_read_as_utc() -> None:
    naive = RESET.replace(tzinfo=None)

    assert recovery_suggestion(RateLimited(reset_time=naive), ENGLISH) == recovery_suggestion(
        RateLimited(reset_time=RESET), ENGLISH
    )


@pytest.mark.parametrize(
    ("seconds", "expected"),
    [
        (3600, "1 hour"),
        (5400, "1 hour, 30 minutes"),
        (60, "1 minute"),
        (45, "45 seconds"),
        (172800, "2 days"),
        (0, "0 seconds"),
    ],
)
def test_format_interval(seconds: float, expected: str) -> None:
    with translation.override("en-us"):
        assert format_interval(seconds) == expected


def test_unknown_prefers_explicit_message() -> None:
    error = Unknown(underlying=ExplainedFailure("x"), message="Server said no.")

    assert failure_reason(error) == "Server said no."


def test_unknown_falls_back_to_cause_reason_and_suggestion() -> None:
    error = Unknown(underlying=ExplainedFailure("x"))

    assert explain(error) == ErrorExplanation(
        reason="The tile server is down.",
        suggestion="Try again in a few minutes.",
    )


def test_unknown_falls_back_to_status_code_of_cause() -> None:
    request = httpx.Request("GET", "https://example.com/directions")
    response = httpx.Response(404, request=request)
    cause = httpx.HTTPStatusError("not found", request=request, response=response)

    assert failure_reason(Unknown(underlying=cause)) == "not found"
    assert recovery_suggestion(Unknown(underlying=cause)) is None


def test_unknown_without_any_detail_renders_unknown_status() -> None:
    assert failure_reason(Unknown()) == "unknown"
    assert failure_reason(Unknown(underlying=ValueError("bad"))) == "unknown"


def test_describe_status_code() -> None:
    assert describe_status_code(503) == "service unavailable"
    assert describe_status_code(599) == "server error"
    assert describe_status_code(-1) == "unknown"


def test_explanation_text_joins_parts() -> None:
    assert str(ErrorExplanation("Too many requests.", None)) == "Too many requests."
    assert str(ErrorExplanation("A.", "B.")) == "A. B."


@pytest.mark.parametrize(
    ("error", "expected"),
    [
        (Unknown(), "[de] unknown"),
        (Unknown(response=httpx.Response(599)), "[de] server error"),
        (Unknown(response=httpx.Response(503)), "[de] service unavailable"),
    ],
)
def test_status_code_text_is_translated(mocker, error: Unknown, expected: str) -> None:
    mocker.patch(
        "directions.services.explainer._",
        side_effect=lambda text: f"[{translation.get_language()}] {text}",
    )

    assert failure_reason(error, FormattingContext(language="de")) == expected
