from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from pydantic import ValidationError

from directions.exceptions import IntersectionDecodingError
from directions.schemas import RawIntersection
from directions.services.types import GeoPoint, Intersection, Lane

logger = logging.getLogger(__name__)


def decode_intersection(raw: Mapping[str, Any]) -> Intersection:
    try:
        record = RawIntersection.model_validate(raw)
    except ValidationError as exc:
        logger.debug("Rejected intersection record: %s", exc)
        raise IntersectionDecodingError("Malformed intersection record") from exc

    lanes: list[Lane] | None = None
    usable_lanes: set[Lane] = set()
    if record.lanes is not None:
        lanes = []
        for lane_record in record.lanes:
            lane = Lane(indications=frozenset(lane_record.indications), valid=lane_record.valid)
            lanes.append(lane)
            if lane_record.valid:
                usable_lanes.add(lane)

    latitude, longitude = record.location
    return build_intersection(
        approach_index=record.approach_index,
        outlet_index=record.outlet_index,
        entry=record.entry,
        location=GeoPoint(latitude=latitude, longitude=longitude),
        headings=record.bearings,
        lanes=lanes,
        usable_lanes=usable_lanes,
    )


def decode_intersections(records: Iterable[Mapping[str, Any]]) -> list[Intersection]:
    return [decode_intersection(record) for record in records]


def build_intersection(
    *,
    approach_index: int | None,
    outlet_index: int | None,
    entry: Sequence[bool],
    location: GeoPoint,
    headings: Sequence[float],
    lanes: Sequence[Lane] | None,
    usable_lanes: Iterable[Lane],
) -> Intersection:
    """Check the structural invariants shared by every way of building an intersection."""
    if len(entry) != len(headings):
        logger.debug("Entry/heading mismatch: %d entries, %d headings", len(entry), len(headings))
        raise IntersectionDecodingError(
            f"Expected {len(headings)} entry flags to match the headings, got {len(entry)}"
        )

    for name, index in (("approach", approach_index), ("outlet", outlet_index)):
        if index is not None and not 0 <= index < len(headings):
            logger.debug("%s index %d outside %d headings", name, index, len(headings))
            raise IntersectionDecodingError(
                f"The {name} index {index} is out of range for {len(headings)} headings"
            )

    usable = frozenset(usable_lanes)
    if lanes is not None and not usable.issubset(lanes):
        raise IntersectionDecodingError("Usable lanes must be drawn from the intersection lanes")

    return Intersection(
        approach_index=approach_index,
        outlet_index=outlet_index,
        entry=tuple(entry),
        location=location,
        headings=tuple(float(heading) for heading in headings),
        lanes=tuple(lanes) if lanes is not None else None,
        usable_lanes=usable,
    )
