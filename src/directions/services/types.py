from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class LaneIndication(str, Enum):
    STRAIGHT_AHEAD = "straight"
    SLIGHT_LEFT = "slight left"
    LEFT = "left"
    SHARP_LEFT = "sharp left"
    U_TURN = "uturn"
    SHARP_RIGHT = "sharp right"
    RIGHT = "right"
    SLIGHT_RIGHT = "slight right"


@dataclass(slots=True, frozen=True)
class GeoPoint:
    latitude: float
    longitude: float


@dataclass(slots=True, frozen=True, eq=False)
class Lane:
    """One traffic lane. Lanes compare and hash by identity, so a road with
    several identical lanes keeps every one of them in a set."""

    indications: frozenset[LaneIndication]
    valid: bool


@dataclass(slots=True, frozen=True)
class Intersection:
    """A point on a route where several roads meet.

    ``approach_index`` and ``outlet_index`` index into ``headings`` and give the
    bearing just before and just after the maneuver. ``entry`` pairs 1:1 with
    ``headings`` and tells whether each road may legally be entered.

    ``usable_lanes`` is derived from ``lanes`` when the intersection is built and
    holds the very same ``Lane`` objects. An intersection restored from an archive
    record has ``lanes`` set to ``None`` but keeps its ``usable_lanes``.
    """

    approach_index: int | None
    outlet_index: int | None
    entry: tuple[bool, ...]
    location: GeoPoint
    headings: tuple[float, ...]
    lanes: tuple[Lane, ...] | None = None
    usable_lanes: frozenset[Lane] = field(default_factory=frozenset)

    @property
    def approach_heading(self) -> float | None:
        if self.approach_index is None:
            return None
        return self.headings[self.approach_index]

    @property
    def outlet_heading(self) -> float | None:
        if self.outlet_index is None:
            return None
        return self.headings[self.outlet_index]
