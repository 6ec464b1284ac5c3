"""Time normalization for raw timeline records.

Raw records carry absolute timestamps in seconds. Downstream consumers want
milliseconds relative to one base time per monitoring session. The base time
is chosen lazily: resource starts may belong to an earlier traced operation,
so they are buffered until a record of another kind arrives, and the base time
becomes the earliest start time seen so far.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import replace

from .errors import ContractViolation
from .models import EventRecord, EventRecordType, type_name
from .page_transition import PageTransitionDetector

logger = logging.getLogger(__name__)


class TimeNormalizer:
    """Buffers early records, fixes a base time and forwards relative-time records."""

    def __init__(
        self,
        downstream: Callable[[EventRecord], None],
        *,
        detector: PageTransitionDetector | None = None,
    ) -> None:
        self._downstream = downstream
        self.detector = detector or PageTransitionDetector()
        self.base_time: float | None = None  # milliseconds
        self.pending: list[EventRecord] | None = []
        self.last_sequence: int | None = None
        self.last_time: float = 0.0

    @property
    def has_pending(self) -> bool:
        return bool(self.pending)

    def feed(self, record: EventRecord) -> None:
        """Accept one raw record in arrival order."""
        if self.last_sequence is not None and record.sequence <= self.last_sequence:
            raise ContractViolation(
                f"sequence {record.sequence} does not follow {self.last_sequence}"
            )
        self.last_sequence = record.sequence

        if self.base_time is None:
            if record.type == EventRecordType.RESOURCE_SEND_REQUEST:
                self._buffer(record)
                return
            self.establish_base_time(record)

        self._route(record)

    def establish_base_time(self, trigger: EventRecord | None = None) -> float:
        """Fix the base time and replay buffered records.

        Without a trigger the base time is forced from the buffer alone.
        """
        if self.base_time is not None:
            raise ContractViolation("base time is already established")

        pending = self.pending or []
        starts = [r.time for r in pending]
        if trigger is not None:
            starts.append(trigger.time)
        if not starts:
            raise ContractViolation("no record available to establish a base time")

        self.base_time = min(starts) * 1000
        self.pending = None
        logger.debug(
            "Base time established at %.3fms (replaying %d buffered records)",
            self.base_time,
            len(pending),
        )

        for r in pending:
            self._route(r)
        return self.base_time

    def normalize_time(self, seconds: float) -> float:
        """Convert absolute seconds into milliseconds relative to the base time."""
        if self.base_time is None:
            raise ContractViolation("normalize_time called before a base time was established")
        return seconds * 1000 - self.base_time

    def normalize_record(self, record: EventRecord) -> EventRecord:
        """Return a normalized copy of ``record`` and its child tree."""
        if record.normalized:
            raise ContractViolation(
                f"record {record.sequence} ({type_name(record.type)}) is already normalized"
            )
        return replace(
            record,
            time=self.normalize_time(record.time),
            children=tuple(self.normalize_record(c) for c in record.children),
            normalized=True,
        )

    def forward(self, record: EventRecord) -> None:
        """Hand a normalized record to the downstream consumer."""
        if not record.normalized:
            raise ContractViolation(
                f"record {record.sequence} ({type_name(record.type)}) reached a consumer "
                "with an absolute time"
            )
        self.last_time = record.time
        self._downstream(record)

    def _buffer(self, record: EventRecord) -> None:
        if self.pending is None:
            raise ContractViolation("record buffer was already drained")
        logger.debug("Buffering resource start %s until a base time exists", record.sequence)
        self.pending.append(record)

    def _route(self, record: EventRecord) -> None:
        for out in self.detector.observe(record):
            self.forward(self.normalize_record(out))
