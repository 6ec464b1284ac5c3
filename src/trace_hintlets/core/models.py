"""Core data models for trace normalization and hints."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import IntEnum
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, Field


class EventRecordType(IntEnum):
    """Known timeline record kinds.

    Records may carry kinds outside this set; those pass through untouched.
    """

    DOM_EVENT = 0
    LAYOUT = 1
    RECALC_STYLE = 2
    PAINT = 3
    PARSE_HTML = 4
    TIMER_INSTALLED = 5
    TIMER_CLEARED = 6
    TIMER_FIRED = 7
    XHR_READY_STATE_CHANGE = 8
    XHR_LOAD = 9
    EVAL_SCRIPT = 10
    MARK_TIMELINE = 11
    RESOURCE_SEND_REQUEST = 12
    RESOURCE_RECEIVE_RESPONSE = 13
    RESOURCE_FINISH = 14
    NETWORK_RESPONSE_RECEIVED = 32
    NETWORK_DATA_RECEIVED = 33
    RESOURCE_UPDATE = 0x7FFFFFFE
    TAB_CHANGE = 0x7FFFFFFF

    # Page transition detection reads the same records under these names.
    RESOURCE_WILL_SEND = 12
    RESOURCE_RESPONSE = 13


def type_name(kind: int) -> str:
    """Return the enum name for a kind, or UNKNOWN(<n>)."""
    try:
        return EventRecordType(kind).name
    except ValueError:
        return f"UNKNOWN({kind})"


def freeze(value: Any) -> Any:
    """Return a read-only deep copy of a JSON-like payload."""
    if isinstance(value, Mapping):
        return MappingProxyType({k: freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(freeze(v) for v in value)
    return value


def thaw(value: Any) -> Any:
    """Inverse of freeze: plain dicts and lists, e.g. for JSON output."""
    if isinstance(value, Mapping):
        return {k: thaw(v) for k, v in value.items()}
    if isinstance(value, tuple):
        return [thaw(v) for v in value]
    return value


@dataclass(frozen=True, slots=True)
class EventRecord:
    """A single timeline record.

    ``time`` is absolute seconds until the record is normalized, then
    milliseconds relative to the session base time.
    """

    type: int
    time: float
    sequence: int
    data: Mapping[str, Any] = field(default_factory=dict)
    children: tuple[EventRecord, ...] = ()
    duration: float | None = None
    normalized: bool = False
    synthetic: bool = False  # produced by the pipeline, not the data source

    def __post_init__(self) -> None:
        # Payloads are read-only and detached from the caller's objects.
        object.__setattr__(self, "data", freeze(self.data))
        object.__setattr__(self, "children", tuple(self.children))

    @property
    def identifier(self) -> int | None:
        value = self.data.get("identifier")
        return value if isinstance(value, int) else None

    @property
    def url(self) -> str | None:
        value = self.data.get("url")
        return value if isinstance(value, str) else None

    @property
    def is_main_resource(self) -> bool:
        return bool(self.data.get("isMainResource", False))


class HintSeverity(IntEnum):
    """Hint severity; lower values are more urgent."""

    VALIDATION = 0
    CRITICAL = 1
    WARNING = 2
    INFO = 3


class Hint(BaseModel):
    hintlet_rule: str = Field(description="Name of the rule that produced the hint.")
    timestamp: float = Field(description="Normalized time (ms) the hint refers to.")
    description: str = Field(description="Human readable explanation.")
    ref_record: int = Field(description="Sequence number of the record that triggered it.")
    severity: HintSeverity = Field(description="0=validation, 1=critical, 2=warning, 3=info.")
