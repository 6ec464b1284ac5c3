"""Rule that flags text resources served without compression."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace

from ..models import EventRecord, EventRecordType, Hint, HintSeverity

RULE_NAME = "Uncompressed Resource"
COMPRESSED_ENCODINGS = frozenset({"gzip", "bzip2"})


@dataclass(frozen=True, slots=True)
class NotGzConfig:
    # Resources smaller than this are exempt.
    min_size: int = 150
    compressible_types: frozenset[str] = frozenset(
        {
            "text/html",
            "text/plain",
            "text/css",
            "text/javascript",
            "text/xml",
            "application/javascript",
            "application/x-javascript",
            "application/json",
            "application/xml",
            "application/xhtml+xml",
            "image/svg+xml",
        }
    )
    severity: HintSeverity = HintSeverity.INFO


def resolve_not_gz_config(cfg: NotGzConfig | None) -> NotGzConfig:
    """Return config with optional env overrides applied."""
    if cfg is None:
        cfg = NotGzConfig()

    env = os.getenv("TRACE_HINTLETS_NOT_GZ_MIN_SIZE")
    if env is None or env == "":
        return cfg

    try:
        value = int(env)
    except ValueError as exc:
        raise ValueError("TRACE_HINTLETS_NOT_GZ_MIN_SIZE must be an integer") from exc
    if value < 0:
        raise ValueError("TRACE_HINTLETS_NOT_GZ_MIN_SIZE must be >= 0")

    if value == cfg.min_size:
        return cfg
    return replace(cfg, min_size=value)


def _media_type(value: str | None) -> str | None:
    """Strip parameters from a mime type (``text/html; charset=utf-8``)."""
    if not value:
        return None
    return value.split(";", 1)[0].strip().lower() or None


@dataclass(slots=True)
class _ResourceState:
    url: str | None
    mime_type: str | None = None
    content_encoding: str | None = None
    total_bytes: int = 0
    response_time: float | None = None


@dataclass
class HintletNotGz:
    """Flags compressible resources that arrived without gzip/bzip2 encoding."""

    config: NotGzConfig = field(default_factory=lambda: resolve_not_gz_config(None))
    name: str = RULE_NAME
    _resources: dict[int, _ResourceState] = field(default_factory=dict, repr=False)

    def on_record(self, record: EventRecord) -> list[Hint]:
        identifier = record.identifier
        if identifier is None:
            return []

        if record.type == EventRecordType.RESOURCE_SEND_REQUEST:
            # Identifiers are recycled across redirects and page loads.
            self._resources[identifier] = _ResourceState(url=record.url)
            return []

        state = self._resources.get(identifier)
        if state is None:
            return []

        if record.type == EventRecordType.RESOURCE_RECEIVE_RESPONSE:
            state.mime_type = _media_type(record.data.get("mimeType"))
            state.response_time = record.time
        elif record.type == EventRecordType.NETWORK_RESPONSE_RECEIVED:
            headers = (record.data.get("response") or {}).get("headers") or {}
            if "Content-Encoding" in headers:
                state.content_encoding = headers["Content-Encoding"]
            content_type = _media_type(headers.get("Content-Type"))
            if content_type is not None:
                state.mime_type = content_type
        elif record.type == EventRecordType.NETWORK_DATA_RECEIVED:
            state.total_bytes += int(record.data.get("dataLength") or 0)
        elif record.type == EventRecordType.RESOURCE_FINISH:
            del self._resources[identifier]
            return self._verdict(state, record)
        return []

    def pending_identifiers(self) -> set[int]:
        """Identifiers whose resources have not finished yet."""
        return set(self._resources)

    def _verdict(self, state: _ResourceState, finish: EventRecord) -> list[Hint]:
        cfg = self.config
        if state.mime_type not in cfg.compressible_types:
            return []
        if state.content_encoding in COMPRESSED_ENCODINGS:
            return []
        if state.total_bytes < cfg.min_size:
            return []

        timestamp = state.response_time if state.response_time is not None else finish.time
        return [
            Hint(
                hintlet_rule=self.name,
                timestamp=timestamp,
                description=f"URL {state.url} was not compressed with gzip or bzip2",
                ref_record=finish.sequence,
                severity=cfg.severity,
            )
        ]
