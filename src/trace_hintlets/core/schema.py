"""Wire models for recorded trace messages."""

from __future__ import annotations

import json
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from .models import EventRecord


class RawRecord(BaseModel):
    model_config = ConfigDict(extra="ignore")

    type: int
    time: float = Field(description="Absolute start time in seconds.")
    sequence: int | None = Field(default=None, description="Arrival order; children inherit it.")
    data: dict[str, Any] = Field(default_factory=dict)
    children: list[RawRecord] = Field(default_factory=list)
    duration: float | None = None

    def to_event_record(self, parent_sequence: int | None = None) -> EventRecord:
        sequence = self.sequence if self.sequence is not None else parent_sequence
        if sequence is None:
            raise ValueError("timeline record is missing a sequence number")
        return EventRecord(
            type=self.type,
            time=self.time,
            sequence=sequence,
            data=dict(self.data),
            children=tuple(c.to_event_record(sequence) for c in self.children),
            duration=self.duration,
        )


class TimelineMessage(BaseModel):
    method: Literal["addRecordToTimeline"]
    record: RawRecord


class UpdateResourceMessage(BaseModel):
    method: Literal["updateResource"]
    identifier: int
    resource: dict[str, Any]


TraceMessage = Annotated[
    TimelineMessage | UpdateResourceMessage,
    Field(discriminator="method"),
]
_TRACE_MESSAGE = TypeAdapter(TraceMessage)


def parse_trace_line(line: str) -> TimelineMessage | UpdateResourceMessage:
    """Parse one JSON line; bare record objects are treated as timeline records."""
    try:
        obj = json.loads(line)
    except json.JSONDecodeError as exc:
        raise ValueError(f"invalid JSON: {exc.msg}") from exc
    if not isinstance(obj, dict):
        raise ValueError("trace line must be a JSON object")
    if "method" not in obj:
        obj = {"method": "addRecordToTimeline", "record": obj}

    try:
        return _TRACE_MESSAGE.validate_python(obj)
    except ValidationError as exc:
        raise ValueError(str(exc)) from exc
