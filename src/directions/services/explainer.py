"""User-facing explanations of directions errors.

Counts, intervals and dates are localized with Django's translation and format
machinery. The language and time zone come from a ``FormattingContext`` passed
on each call and are applied with ``translation.override`` and
``timezone.override``, which only touch the calling thread.
"""

from __future__ import annotations

import math
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timezone as dt_timezone, tzinfo
from http import HTTPStatus
from typing import NoReturn

import httpx
from django.conf import settings
from django.utils import dateformat, formats, timezone, translation
from django.utils.translation import gettext as _
from django.utils.translation import gettext_noop, ngettext_lazy

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

INTERVAL_UNITS = (
    (86400, ngettext_lazy("%(num)d day", "%(num)d days", "num")),
    (3600, ngettext_lazy("%(num)d hour", "%(num)d hours", "num")),
    (60, ngettext_lazy("%(num)d minute", "%(num)d minutes", "num")),
    (1, ngettext_lazy("%(num)d second", "%(num)d seconds", "num")),
)

STATUS_CLASS_NAMES = {
    1: gettext_noop("informational"),
    2: gettext_noop("success"),
    3: gettext_noop("redirected"),
    4: gettext_noop("client error"),
    5: gettext_noop("server error"),
}
UNKNOWN_STATUS = gettext_noop("unknown")


@dataclass(slots=True, frozen=True)
class FormattingContext:
    language: str | None = None
    time_zone: tzinfo | None = None


@dataclass(slots=True, frozen=True)
class ErrorExplanation:
    reason: str
    suggestion: str | None

    def __str__(self) -> str:
        if self.suggestion:
            return f"{self.reason} {self.suggestion}"
        return self.reason


def explain(error: DirectionsError, context: FormattingContext | None = None) -> ErrorExplanation:
    return ErrorExplanation(
        reason=failure_reason(error, context),
        suggestion=recovery_suggestion(error, context),
    )


def failure_reason(error: DirectionsError, context: FormattingContext | None = None) -> str:
    """Say what went wrong, in the language of ``context``."""
    with _formatting(context):
        if isinstance(error, NoData):
            return _("The server returned an empty response.")
        if isinstance(error, InvalidInput):
            return error.message or ""
        if isinstance(error, InvalidResponse):
            return _("The server returned a response that isn’t correctly formatted.")
        if isinstance(error, UnableToRoute):
            return _("No route could be found between the specified locations.")
        if isinstance(error, NoMatches):
            return _("The specified coordinates could not be matched to the road network.")
        if isinstance(error, TooManyCoordinates):
            return _("The request specifies too many coordinates.")
        if isinstance(error, UnableToLocate):
            return _("A specified location could not be associated with a roadway or pathway.")
        if isinstance(error, ProfileNotFound):
            return _("Unrecognized profile identifier.")
        if isinstance(error, RequestTooLarge):
            return _("The request is too large.")
        if isinstance(error, RateLimited):
            if error.interval is None or error.limit is None:
                return _("Too many requests.")
            return _(
                "More than %(count)s requests have been made with this access token "
                "within a period of %(interval)s."
            ) % {
                "count": formats.number_format(error.limit, force_grouping=True),
                "interval": format_interval(error.interval),
            }
        if isinstance(error, Unknown):
            if error.message is not None:
                return error.message
            cause_reason = getattr(error.underlying, "failure_reason", None)
            if isinstance(cause_reason, str):
                return cause_reason
            return describe_status_code(_status_code(error))
        _assert_never(error)


def recovery_suggestion(
    error: DirectionsError, context: FormattingContext | None = None
) -> str | None:
    with _formatting(context):
        if isinstance(error, (NoData, InvalidInput, InvalidResponse)):
            return None
        if isinstance(error, UnableToRoute):
            return _(
                "Make sure it is possible to travel between the locations with the mode of "
                "transportation implied by the profile identifier. For example, it is "
                "impossible to travel by car from one continent to another without either "
                "a land bridge or a ferry connection."
            )
        if isinstance(error, NoMatches):
            return _(
                "Try again making sure that your tracepoints lie in close proximity to a "
                "road or path."
            )
        if isinstance(error, TooManyCoordinates):
            return _("Try again with %(limit)s coordinates or fewer.") % {
                "limit": formats.number_format(
                    settings.DIRECTIONS_MAX_COORDINATES, force_grouping=True
                ),
            }
        if isinstance(error, UnableToLocate):
            return _(
                "Make sure the locations are close enough to a roadway or pathway. Try "
                "clearing the coordinate accuracy of all the waypoints."
            )
        if isinstance(error, ProfileNotFound):
            return _(
                "Make sure the profile identifier is set to one of the supported profiles, "
                "such as driving."
            )
        if isinstance(error, RequestTooLarge):
            return _("Try specifying fewer waypoints or giving the waypoints shorter names.")
        if isinstance(error, RateLimited):
            if error.reset_time is None:
                return None
            return _("Wait until %(reset_time)s before retrying.") % {
                "reset_time": format_long_datetime(error.reset_time),
            }
        if isinstance(error, Unknown):
            suggestion = getattr(error.underlying, "recovery_suggestion", None)
            return suggestion if isinstance(suggestion, str) else None
        _assert_never(error)


def format_interval(seconds: float) -> str:
    """Spell out a duration in full units, e.g. ``1 hour, 30 minutes``.

    Must be called with the target language active.
    """
    remaining = max(0, math.floor(seconds))
    parts = []
    for unit_seconds, unit_name in INTERVAL_UNITS:
        count, remaining = divmod(remaining, unit_seconds)
        if count:
            parts.append(unit_name % {"num": count})
    if not parts:
        return INTERVAL_UNITS[-1][1] % {"num": 0}
    return _(", ").join(parts)


def format_long_datetime(value: datetime) -> str:
    if timezone.is_naive(value):
        value = timezone.make_aware(value, dt_timezone.utc)
    local = timezone.localtime(value)
    return f"{formats.date_format(local, 'DATETIME_FORMAT')} {dateformat.format(local, 'T')}"


def describe_status_code(code: int) -> str:
    """Name a status code in the active language, e.g. ``not found``."""
    try:
        return _(HTTPStatus(code).phrase.lower())
    except ValueError:
        if code < 0:
            return _(UNKNOWN_STATUS)
        return _(STATUS_CLASS_NAMES.get(code // 100, UNKNOWN_STATUS))


@contextmanager
def _formatting(context: FormattingContext | None) -> Iterator[None]:
    context = context or FormattingContext()
    language = context.language or settings.LANGUAGE_CODE
    time_zone = context.time_zone or timezone.get_default_timezone()
    with translation.override(language), timezone.override(time_zone):
        yield


def _status_code(error: Unknown) -> int:
    cause = error.underlying
    if isinstance(cause, httpx.HTTPStatusError):
        return cause.response.status_code
    code = getattr(cause, "status_code", None)
    if isinstance(code, int):
        return code
    if error.response is not None:
        return error.response.status_code
    return -1


def _assert_never(error: NoReturn) -> NoReturn:
    raise TypeError(f"Unhandled directions error kind: {type(error).__name__}")
