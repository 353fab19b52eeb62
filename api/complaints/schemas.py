"""
Pydantic models for upstream payloads and persisted records.

The structured feed is loosely typed: any field can be missing, null, or a
different primitive than usual. Text fields take numbers as text, counters
fall back to 0 on null, and the free-form ones accept any JSON value.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

# A JSON value of unknown shape (rating, notes, reporter text, ...).
LooseValue = Union[str, int, float, bool, list[Any], dict[str, Any], None]


def _optional_text(value: Any) -> Any:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


def _text(value: Any) -> Any:
    return "" if value is None else _optional_text(value)


def _count(value: Any) -> Any:
    if value is None or value == "":
        return 0
    if isinstance(value, float):
        return int(value)
    return value


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _null_to_empty(empty: Any):
    return lambda value: empty() if value is None else value


OptionalText = Annotated[Union[str, None], BeforeValidator(_optional_text)]
Text = Annotated[str, BeforeValidator(_text)]
Count = Annotated[int, BeforeValidator(_count)]
# Unparseable timestamps are kept as the raw text.
Timestamp = Annotated[
    Union[datetime, str, None],
    Field(union_mode="left_to_right"),
    BeforeValidator(_blank_to_none),
]


class SumState(BaseModel):
    model_config = ConfigDict(extra="ignore")

    finish: Count = 0
    follow: Count = 0
    forward: Count = 0
    inprogress: Count = 0
    irrelevant: Count = 0
    start: Count = 0


class Geometry(BaseModel):
    model_config = ConfigDict(extra="allow")

    type: Text = ""
    # A point is [lon, lat]; lines and polygons come as nested paths.
    coordinates: LooseValue = None


class Properties(BaseModel):
    model_config = ConfigDict(extra="allow")

    problem_type_fondue: LooseValue = None
    org: LooseValue = None
    description: OptionalText = None
    ticket_id: OptionalText = None
    photo_url: OptionalText = None
    after_photo: OptionalText = None
    address: OptionalText = None
    subdistrict: OptionalText = None
    district: OptionalText = None
    province: OptionalText = None
    timestamp: OptionalText = None
    problem_type_abdul: LooseValue = None
    star: LooseValue = None
    count_reopen: LooseValue = None
    note: LooseValue = None
    description_reporter: LooseValue = None
    state: OptionalText = None
    state_type_latest: OptionalText = None
    last_activity: OptionalText = None
    type: OptionalText = None
    see_info: LooseValue = None


class Feature(BaseModel):
    model_config = ConfigDict(extra="ignore")

    type: Text = "Feature"
    geometry: Geometry | None = None
    properties: Annotated[Properties, BeforeValidator(_null_to_empty(dict))] = Field(default_factory=Properties)
    created_at: Timestamp = None

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


class RecordBatch(BaseModel):
    """
    One page of the structured feed: envelope, counters, and features.
    """

    model_config = ConfigDict(extra="ignore")

    status: Text = ""
    message: Text = ""
    exec_time: Text = ""
    source: Text = ""
    total: Count = 0
    sum_state: Annotated[SumState, BeforeValidator(_null_to_empty(dict))] = Field(default_factory=SumState)
    count_total: Count = 0
    count: Count = 0
    type: Text = ""
    features: Annotated[list[Feature], BeforeValidator(_null_to_empty(list))] = Field(default_factory=list)


class ComplaintRecord(BaseModel):
    """
    Flat complaint row from the CSV export. Every field stays text.
    """

    model_config = ConfigDict(extra="ignore", strict=True)

    address: str = ""
    comment: str = ""
    coords: str = ""
    count_reopen: str = ""
    district: str = ""
    last_activity: str = ""
    organization: str = ""
    organization_action: str = ""
    photo: str = ""
    photo_after: str = ""
    province: str = ""
    star: str = ""
    state: str = ""
    subdistrict: str = ""
    timestamp: str = ""
    type: str = ""
    ticket_id: str = ""

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


class LoadResponse(BaseModel):
    status: str
    pages: int
    inserted: int
    next_offset: int
