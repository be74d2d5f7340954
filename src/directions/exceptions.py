from __future__ import annotations

from directions.services.errors import DirectionsError
from directions.services.explainer import failure_reason


class DirectionsClientError(Exception):
    """Base exception for directions client errors."""


class IntersectionDecodingError(DirectionsClientError):
    """Raised when an intersection record is missing fields or violates its invariants."""


class DirectionsRequestError(DirectionsClientError):
    """Raised at the request boundary to carry a classified directions error."""

    def __init__(self, error: DirectionsError) -> None:
        super().__init__(failure_reason(error))
        self.error = error
