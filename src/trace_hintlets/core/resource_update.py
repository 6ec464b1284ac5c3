"""Normalization of batched resource update payloads."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from .models import EventRecord, EventRecordType
from .normalizer import TimeNormalizer

logger = logging.getLogger(__name__)

# Later milestones win the representative time.
TIMING_FIELDS: tuple[str, ...] = (
    "startTime",
    "responseReceivedTime",
    "loadEventTime",
    "domContentEventTime",
    "endTime",
)


class ResourceUpdateMerger:
    """Turns an ``updateResource`` payload into a RESOURCE_UPDATE record."""

    def __init__(self, normalizer: TimeNormalizer) -> None:
        self._normalizer = normalizer

    def merge(self, identifier: int, update: Mapping[str, Any]) -> EventRecord | None:
        """Return the normalized update record, or None when it must be dropped.

        Updates never establish a base time. One that arrives first means
        monitoring started after the resource did, so it is ignored.
        """
        normalizer = self._normalizer
        if normalizer.base_time is None:
            logger.debug("Dropping update for resource %s: no base time yet", identifier)
            return None

        data: dict[str, Any] = {**update, "identifier": identifier}
        time: float | None = None

        if update.get("didTimingChange"):
            for name in TIMING_FIELDS:
                value = update.get(name)
                if not isinstance(value, (int, float)):
                    continue
                relative = normalizer.normalize_time(value)
                if relative > 0:
                    data[name] = relative
                    time = relative

        if time is None:
            time = normalizer.last_time

        return EventRecord(
            type=EventRecordType.RESOURCE_UPDATE,
            time=time,
            sequence=normalizer.last_sequence or 0,
            data=data,
            normalized=True,
            synthetic=True,
        )
