"""Monitoring session: wires normalization, page transitions and hintlets.

A session corresponds to one monitored tab. It owns all mutable pipeline
state, so independent sessions never interfere with each other.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator, Mapping
from contextlib import contextmanager
from typing import Any

from .errors import ContractViolation
from .hintlets import HintletEngine, HintletRule, default_rules
from .models import EventRecord, Hint
from .normalizer import TimeNormalizer
from .resource_update import ResourceUpdateMerger

logger = logging.getLogger(__name__)

RecordSink = Callable[[EventRecord], None]
HintSink = Callable[[Hint], None]


class MonitoringSession:
    """Accepts raw records and emits normalized records plus hints."""

    def __init__(
        self,
        *,
        rules: Iterable[HintletRule] | None = None,
        on_record: RecordSink | None = None,
        on_hint: HintSink | None = None,
    ) -> None:
        self.engine = HintletEngine(default_rules() if rules is None else rules)
        self.normalizer = TimeNormalizer(self._deliver)
        self.merger = ResourceUpdateMerger(self.normalizer)
        self._on_record = on_record
        self._on_hint = on_hint
        self.records: list[EventRecord] = []
        self.hints: list[Hint] = []
        self._busy = False

    @property
    def base_time(self) -> float | None:
        return self.normalizer.base_time

    def dispatch(self, method: str, payload: Any) -> None:
        """Route a data-source message by method name."""
        if method == "addRecordToTimeline":
            self.add_record_to_timeline(payload)
        elif method == "updateResource":
            identifier, update = payload
            self.update_resource(identifier, update)
        else:
            raise ValueError(f"Unknown method '{method}'")

    def add_record_to_timeline(self, record: EventRecord) -> None:
        with self._exclusive("add_record_to_timeline"):
            self.normalizer.feed(record)

    def update_resource(self, identifier: int, update: Mapping[str, Any]) -> None:
        with self._exclusive("update_resource"):
            merged = self.merger.merge(identifier, update)
            if merged is not None:
                self.normalizer.forward(merged)

    def flush(self) -> None:
        """Force a base time when only resource starts were received."""
        with self._exclusive("flush"):
            if self.normalizer.base_time is None and self.normalizer.has_pending:
                logger.debug("Flushing buffered records without a trigger record")
                self.normalizer.establish_base_time()

    @contextmanager
    def _exclusive(self, operation: str) -> Iterator[None]:
        # A record and everything it triggers completes before the next one.
        if self._busy:
            raise ContractViolation(
                f"{operation} called while the session is still processing a record"
            )
        self._busy = True
        try:
            yield
        finally:
            self._busy = False

    def _deliver(self, record: EventRecord) -> None:
        self.records.append(record)
        if self._on_record is not None:
            self._on_record(record)

        for hint in self.engine.dispatch(record):
            self.hints.append(hint)
            if self._on_hint is not None:
                self._on_hint(hint)
