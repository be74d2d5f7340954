"""The closed set of failures that can happen while obtaining directions.

Every kind is its own frozen dataclass and ``DirectionsError`` is the union of
them. Values are plain data: compare them, hash them, hand them to
``directions.services.explainer`` for user-facing text, but do not raise them.
Wrap one in ``directions.exceptions.DirectionsRequestError`` when an exception
is needed.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import ClassVar, Union

import httpx


class ErrorKind(str, Enum):
    NO_DATA = "no_data"
    INVALID_INPUT = "invalid_input"
    INVALID_RESPONSE = "invalid_response"
    UNABLE_TO_ROUTE = "unable_to_route"
    NO_MATCHES = "no_matches"
    TOO_MANY_COORDINATES = "too_many_coordinates"
    UNABLE_TO_LOCATE = "unable_to_locate"
    PROFILE_NOT_FOUND = "profile_not_found"
    REQUEST_TOO_LARGE = "request_too_large"
    RATE_LIMITED = "rate_limited"
    UNKNOWN = "unknown"


@dataclass(slots=True, frozen=True)
class NoData:
    """The server returned an empty response."""

    kind: ClassVar[ErrorKind] = ErrorKind.NO_DATA


@dataclass(slots=True, frozen=True)
class InvalidInput:
    """The request parameters were rejected by the server."""

    message: str | None = None

    kind: ClassVar[ErrorKind] = ErrorKind.INVALID_INPUT


@dataclass(slots=True, frozen=True)
class InvalidResponse:
    """The server returned a response that isn't correctly formatted."""

    kind: ClassVar[ErrorKind] = ErrorKind.INVALID_RESPONSE


@dataclass(slots=True, frozen=True)
class UnableToRoute:
    """No route could be found between the specified locations."""

    kind: ClassVar[ErrorKind] = ErrorKind.UNABLE_TO_ROUTE


@dataclass(slots=True, frozen=True)
class NoMatches:
    """The specified coordinates could not be matched to the road network."""

    kind: ClassVar[ErrorKind] = ErrorKind.NO_MATCHES


@dataclass(slots=True, frozen=True)
class TooManyCoordinates:
    kind: ClassVar[ErrorKind] = ErrorKind.TOO_MANY_COORDINATES


@dataclass(slots=True, frozen=True)
class UnableToLocate:
    """A specified location could not be associated with a roadway or pathway."""

    kind: ClassVar[ErrorKind] = ErrorKind.UNABLE_TO_LOCATE


@dataclass(slots=True, frozen=True)
class ProfileNotFound:
    kind: ClassVar[ErrorKind] = ErrorKind.PROFILE_NOT_FOUND


@dataclass(slots=True, frozen=True)
class RequestTooLarge:
    kind: ClassVar[ErrorKind] = ErrorKind.REQUEST_TOO_LARGE


@dataclass(slots=True, frozen=True)
class RateLimited:
    """Too many requests were made with the same access token.

    ``interval`` is the length of the rate-limit window in seconds, ``limit`` the
    number of requests allowed per window and ``reset_time`` the instant the
    window rolls over. Any of them may be unknown.
    """

    interval: float | None = None
    limit: int | None = None
    reset_time: datetime | None = None

    kind: ClassVar[ErrorKind] = ErrorKind.RATE_LIMITED


@dataclass(slots=True, frozen=True, eq=False)
class Unknown:
    """A server or transport failure that fits no other kind.

    Two ``Unknown`` errors are equal when their responses, codes and messages are
    equal and their underlying causes have the same type and the same ``str()``.
    Causes come from arbitrary code, so this stands in for structural equality.
    """

    response: httpx.Response | None = None
    underlying: BaseException | None = None
    code: str | None = None
    message: str | None = None

    kind: ClassVar[ErrorKind] = ErrorKind.UNKNOWN

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Unknown):
            return NotImplemented
        return (
            self.response == other.response
            and _describe_cause(self.underlying) == _describe_cause(other.underlying)
            and self.code == other.code
            and self.message == other.message
        )

    def __hash__(self) -> int:
        return hash((_describe_cause(self.underlying), self.code, self.message))


DirectionsError = Union[
    NoData,
    InvalidInput,
    InvalidResponse,
    UnableToRoute,
    NoMatches,
    TooManyCoordinates,
    UnableToLocate,
    ProfileNotFound,
    RequestTooLarge,
    RateLimited,
    Unknown,
]

ERROR_TYPES: dict[ErrorKind, type[DirectionsError]] = {
    error_type.kind: error_type
    for error_type in (
        NoData,
        InvalidInput,
        InvalidResponse,
        UnableToRoute,
        NoMatches,
        TooManyCoordinates,
        UnableToLocate,
        ProfileNotFound,
        RequestTooLarge,
        RateLimited,
        Unknown,
    )
}


def _describe_cause(cause: BaseException | None) -> tuple[type, str] | None:
    if cause is None:
        return None
    return type(cause), str(cause)
