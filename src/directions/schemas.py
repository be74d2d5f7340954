from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt

from directions.services.types import LaneIndication

Number = Annotated[float, Field(strict=True)]
Bearing = Annotated[float, Field(strict=True, ge=0.0, lt=360.0)]


class RawLane(BaseModel):
    model_config = ConfigDict(extra="ignore")

    valid: StrictBool
    indications: list[LaneIndication] = Field(default_factory=list)


class RawIntersection(BaseModel):
    model_config = ConfigDict(extra="ignore")

    approach_index: StrictInt | None = Field(default=None, alias="in")
    outlet_index: StrictInt | None = Field(default=None, alias="out")
    entry: list[StrictBool]
    location: tuple[Number, Number]
    bearings: list[Bearing]
    lanes: list[RawLane] | None = None


class ArchivedCoordinate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    latitude: Number
    longitude: Number


class ArchivedLane(BaseModel):
    model_config = ConfigDict(extra="forbid")

    indications: list[LaneIndication]
    valid: StrictBool


class ArchivedIntersection(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    approach_index: StrictInt | None = Field(default=None, alias="approachIndex")
    outlet_index: StrictInt | None = Field(default=None, alias="outletIndex")
    entry: list[StrictBool]
    headings: list[Bearing]
    usable_lanes: list[ArchivedLane] = Field(alias="usableLanes")
    location: ArchivedCoordinate
