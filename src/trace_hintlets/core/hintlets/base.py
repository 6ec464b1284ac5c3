"""Hintlet rule interface."""

from __future__ import annotations

from typing import Protocol

from ..models import EventRecord, Hint


class HintletRule(Protocol):
    """Rule interface: inspect a normalized record, return zero or more hints.

    Rules are long lived and keep whatever private state they need between
    records.
    """

    name: str

    def on_record(self, record: EventRecord) -> list[Hint]:
        """Process one normalized record."""
        ...
