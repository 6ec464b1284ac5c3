"""Trace file loading and analysis.

This module is the main integration point that reads recorded traces and runs
them through a monitoring session.
"""

from __future__ import annotations

import gzip
import logging
from collections.abc import AsyncIterator, Iterable
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path

import aiofiles
from aiofiles.threadpool import wrap

from .hintlets import HintletRule
from .models import EventRecord, Hint
from .schema import TimelineMessage, UpdateResourceMessage, parse_trace_line
from .session import MonitoringSession

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TraceAnalysis:
    """Normalized stream and hints produced from one trace."""

    base_time: float | None
    records: list[EventRecord]
    hints: list[Hint]


@asynccontextmanager
async def _open_text(path: Path, *, encoding: str):
    """Open a trace file for async text reading (plain or gzip)."""
    if path.suffix.lower() == ".gz":
        f = gzip.open(path, mode="rt", encoding=encoding)
        af = wrap(f)
        try:
            yield af
        finally:
            await af.close()
    else:
        async with aiofiles.open(path, encoding=encoding) as f:
            yield f


async def iter_messages(
    trace_path: str | Path,
    *,
    encoding: str = "utf-8",
) -> AsyncIterator[tuple[int, TimelineMessage | UpdateResourceMessage]]:
    """Yield (line_no, message) for every non-blank line of a trace file."""
    path = Path(trace_path)
    if not path.is_file():
        raise FileNotFoundError(f"Trace file not found: {path}")

    async with _open_text(path, encoding=encoding) as f:
        async for line_no, line in _enumerate_async(f, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                msg = parse_trace_line(line)
            except ValueError as exc:
                raise ValueError(f"{path}:{line_no}: {exc}") from exc
            yield line_no, msg


async def analyze_trace(
    trace_path: str | Path,
    *,
    rules: Iterable[HintletRule] | None = None,
    encoding: str = "utf-8",
) -> TraceAnalysis:
    """Feed a trace file through a fresh session and collect the results."""
    session = MonitoringSession(rules=rules)

    count = 0
    async for line_no, msg in iter_messages(trace_path, encoding=encoding):
        if isinstance(msg, UpdateResourceMessage):
            session.update_resource(msg.identifier, msg.resource)
        else:
            try:
                record = msg.record.to_event_record()
            except ValueError as exc:
                raise ValueError(f"{trace_path}:{line_no}: {exc}") from exc
            session.add_record_to_timeline(record)
        count += 1

    session.flush()
    logger.info(
        "Analyzed %d messages from %s: %d records, %d hints",
        count,
        trace_path,
        len(session.records),
        len(session.hints),
    )
    return TraceAnalysis(
        base_time=session.base_time,
        records=session.records,
        hints=session.hints,
    )


async def _enumerate_async(iterable, start: int = 0):
    """Async enumerate helper for async iterators."""
    index = start
    async for item in iterable:
        yield index, item
        index += 1
