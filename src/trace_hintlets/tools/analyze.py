"""MCP tool implementations.

This module contains the *implementation* behind the exposed MCP tools.
Keep this layer thin: validate inputs, translate them into core calls, and
return JSON-serializable data structures.
"""

from __future__ import annotations

from typing import Any

from trace_hintlets.core.models import EventRecord, Hint, HintSeverity, thaw, type_name
from trace_hintlets.core.trace_service import analyze_trace

DEFAULT_LIMIT = 500
HARD_LIMIT = 10000
ALL_SEVERITIES = ["VALIDATION", "CRITICAL", "WARNING", "INFO"]


def _parse_severity(name: str | None) -> HintSeverity | None:
    """Parse a user-supplied severity name into a HintSeverity."""
    if name is None or not name.strip():
        return None
    try:
        return HintSeverity[name.strip().upper()]
    except KeyError as e:
        valid = ", ".join(ALL_SEVERITIES)
        raise ValueError(f"Unknown severity '{name}'. Valid values: {valid}.") from e


def _record_to_dict(record: EventRecord) -> dict[str, Any]:
    """Convert a normalized EventRecord into a JSON-serializable dict."""
    d: dict[str, Any] = {
        "sequence": record.sequence,
        "type": int(record.type),
        "type_name": type_name(record.type),
        "time": record.time,
        "data": thaw(record.data),
    }
    if record.duration is not None:
        d["duration"] = record.duration
    if record.children:
        d["children"] = [_record_to_dict(c) for c in record.children]
    if record.synthetic:
        d["synthetic"] = True
    return d


def _hint_to_dict(hint: Hint) -> dict[str, Any]:
    d = hint.model_dump(mode="json")
    d["severity_name"] = hint.severity.name.lower()
    return d


async def analyze_trace_impl(
    *,
    trace_path: str,
    include_records: bool = False,
    limit: int | None = None,
    min_severity: str | None = None,
) -> dict[str, Any]:
    """Implementation for the `analyze_trace` MCP tool.

    Notes
    -----
    - min_severity keeps hints at least that urgent (CRITICAL keeps
      VALIDATION and CRITICAL).
    - limit only caps the returned records; hints are never truncated.
    """
    if limit is None:
        limit = DEFAULT_LIMIT
    if limit <= 0:
        raise ValueError("limit must be > 0")
    if limit > HARD_LIMIT:
        limit = HARD_LIMIT

    threshold = _parse_severity(min_severity)

    result = await analyze_trace(trace_path)

    hints = result.hints
    if threshold is not None:
        hints = [h for h in hints if h.severity <= threshold]

    out: dict[str, Any] = {
        "base_time": result.base_time,
        "record_count": len(result.records),
        "hint_count": len(hints),
        "hints": [_hint_to_dict(h) for h in hints],
    }
    if include_records:
        out["records"] = [_record_to_dict(r) for r in result.records[:limit]]
    return out
