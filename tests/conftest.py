from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from trace_hintlets.core.models import EventRecord, EventRecordType


def _record(kind: int, sequence: int, data: dict[str, Any]) -> EventRecord:
    # Rule-level fixtures use the sequence number as the normalized time.
    return EventRecord(
        type=kind,
        time=float(sequence),
        sequence=sequence,
        data=data,
        normalized=True,
    )


@pytest.fixture
def resource_records() -> Callable[..., list[EventRecord]]:
    """Build the normalized record sequence for one resource load."""

    def _build(
        url: str,
        mime_type: str,
        content_encoding: str | None,
        total_data_length: int,
        *,
        identifier: int = 1,
        first_sequence: int = 1,
    ) -> list[EventRecord]:
        headers: dict[str, str] = {"Content-Type": mime_type}
        if content_encoding is not None:
            headers["Content-Encoding"] = content_encoding

        seq = first_sequence
        out = [
            _record(
                EventRecordType.RESOURCE_SEND_REQUEST,
                seq,
                {"identifier": identifier, "url": url, "requestMethod": "GET"},
            ),
            _record(
                EventRecordType.RESOURCE_RECEIVE_RESPONSE,
                seq + 1,
                {"identifier": identifier, "statusCode": 200, "mimeType": mime_type},
            ),
            _record(
                EventRecordType.NETWORK_RESPONSE_RECEIVED,
                seq + 2,
                {
                    "identifier": identifier,
                    "response": {"status": 200, "statusText": "OK", "headers": headers},
                },
            ),
            # Delivered in two chunks.
            _record(
                EventRecordType.NETWORK_DATA_RECEIVED,
                seq + 3,
                {"identifier": identifier, "dataLength": total_data_length // 2},
            ),
            _record(
                EventRecordType.NETWORK_DATA_RECEIVED,
                seq + 4,
                {
                    "identifier": identifier,
                    "dataLength": total_data_length - total_data_length // 2,
                },
            ),
            _record(
                EventRecordType.RESOURCE_FINISH,
                seq + 5,
                {"identifier": identifier, "didFail": False},
            ),
        ]
        return out

    return _build


@pytest.fixture
def raw_record() -> Callable[..., EventRecord]:
    """Build an un-normalized record with an absolute time in seconds."""

    def _build(kind: int, sequence: int, time: float, **data: Any) -> EventRecord:
        return EventRecord(type=kind, time=time, sequence=sequence, data=data)

    return _build


@pytest.fixture
def write_trace() -> Callable[[Path, list[dict[str, Any]]], None]:
    def _write(path: Path, messages: list[dict[str, Any]]) -> None:
        path.write_text(
            "\n".join(json.dumps(m) for m in messages) + "\n",
            encoding="utf-8",
        )

    return _write


@pytest.fixture
def uncompressed_page_trace() -> list[dict[str, Any]]:
    """A page load whose main document is served without compression."""
    url = "http://example.org/index.html"
    return [
        {
            "method": "addRecordToTimeline",
            "record": {
                "type": 12,
                "time": 100.0,
                "sequence": 1,
                "data": {"identifier": 7, "url": url, "isMainResource": True},
            },
        },
        {
            "type": 13,
            "time": 100.25,
            "sequence": 2,
            "data": {"identifier": 7, "statusCode": 200, "mimeType": "text/html"},
        },
        {
            "type": 32,
            "time": 100.26,
            "sequence": 3,
            "data": {
                "identifier": 7,
                "response": {"headers": {"Content-Type": "text/html; charset=utf-8"}},
            },
        },
        {"type": 33, "time": 100.3, "sequence": 4, "data": {"identifier": 7, "dataLength": 4096}},
        {
            "method": "updateResource",
            "identifier": 7,
            "resource": {"didTimingChange": True, "startTime": 100.0, "endTime": 100.5},
        },
        {"type": 14, "time": 100.5, "sequence": 5, "data": {"identifier": 7, "didFail": False}},
    ]
