"""Archive records for intersections.

The archive keeps the usable lanes but not the full ``lanes`` sequence, so an
intersection read back from an archive always has ``lanes`` set to ``None``.
Callers that need per-lane detail beyond validity must keep the raw record.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from directions.exceptions import IntersectionDecodingError
from directions.schemas import ArchivedCoordinate, ArchivedIntersection, ArchivedLane
from directions.services.intersections import build_intersection
from directions.services.types import GeoPoint, Intersection, Lane, LaneIndication

logger = logging.getLogger(__name__)

_INDICATION_ORDER = {indication: position for position, indication in enumerate(LaneIndication)}


def encode_intersection(intersection: Intersection) -> dict[str, Any]:
    return _to_archive(intersection).model_dump(mode="json", by_alias=True)


def dumps_intersection(intersection: Intersection) -> str:
    return _to_archive(intersection).model_dump_json(by_alias=True)


def decode_archived_intersection(record: Mapping[str, Any]) -> Intersection:
    try:
        archive = ArchivedIntersection.model_validate(record)
    except ValidationError as exc:
        logger.debug("Rejected archived intersection: %s", exc)
        raise IntersectionDecodingError("Malformed archived intersection") from exc
    return _from_archive(archive)


def loads_intersection(payload: str | bytes) -> Intersection:
    try:
        archive = ArchivedIntersection.model_validate_json(payload)
    except ValidationError as exc:
        logger.debug("Rejected archived intersection: %s", exc)
        raise IntersectionDecodingError("Malformed archived intersection") from exc
    return _from_archive(archive)


def _to_archive(intersection: Intersection) -> ArchivedIntersection:
    usable_lanes = sorted(intersection.usable_lanes, key=_lane_sort_key)
    return ArchivedIntersection(
        approach_index=intersection.approach_index,
        outlet_index=intersection.outlet_index,
        entry=list(intersection.entry),
        headings=list(intersection.headings),
        usable_lanes=[
            ArchivedLane(
                indications=sorted(lane.indications, key=_INDICATION_ORDER.__getitem__),
                valid=lane.valid,
            )
            for lane in usable_lanes
        ],
        location=ArchivedCoordinate(
            latitude=intersection.location.latitude,
            longitude=intersection.location.longitude,
        ),
    )


def _from_archive(archive: ArchivedIntersection) -> Intersection:
    return build_intersection(
        approach_index=archive.approach_index,
        outlet_index=archive.outlet_index,
        entry=archive.entry,
        location=GeoPoint(latitude=archive.location.latitude, longitude=archive.location.longitude),
        headings=archive.headings,
        lanes=None,
        usable_lanes=[
            Lane(indications=frozenset(lane.indications), valid=lane.valid)
            for lane in archive.usable_lanes
        ],
    )


def _lane_sort_key(lane: Lane) -> tuple[bool, list[int]]:
    return (not lane.valid, sorted(_INDICATION_ORDER[indication] for indication in lane.indications))
