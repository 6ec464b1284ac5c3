"""Synthesizes TAB_CHANGE records from main resource requests."""

from __future__ import annotations

import logging

from .models import EventRecord, EventRecordType

logger = logging.getLogger(__name__)


class PageTransitionDetector:
    """Tracks the current main resource of a monitored tab.

    Redirects recycle the identifier of the main resource, so a second start
    for the tracked identifier ends the redirect instead of starting a page.
    """

    def __init__(self) -> None:
        self.current_main_resource: int | None = None

    def observe(self, record: EventRecord) -> list[EventRecord]:
        """Return the records to forward for ``record``, in order."""
        if record.type == EventRecordType.RESOURCE_WILL_SEND and record.is_main_resource:
            identifier = record.identifier
            if self.current_main_resource is None or self.current_main_resource != identifier:
                self.current_main_resource = identifier
                logger.debug("Page transition to %s (identifier=%s)", record.url, identifier)
                return [self._tab_change(record), record]
            # Same identifier again: the redirect has completed.
            self.current_main_resource = None
        elif record.type == EventRecordType.RESOURCE_RESPONSE:
            self.current_main_resource = None
        return [record]

    @staticmethod
    def _tab_change(start: EventRecord) -> EventRecord:
        return EventRecord(
            type=EventRecordType.TAB_CHANGE,
            time=start.time,
            sequence=start.sequence,
            data={"url": start.url},
            synthetic=True,
        )
