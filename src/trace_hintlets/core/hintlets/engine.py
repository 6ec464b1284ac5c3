"""Fan-out of normalized records to the registered hintlet rules."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from ..errors import ContractViolation
from ..models import EventRecord, Hint, type_name
from .base import HintletRule

logger = logging.getLogger(__name__)


class HintletEngine:
    """Delivers each record to every rule once, in registration order."""

    def __init__(self, rules: Iterable[HintletRule] = ()) -> None:
        self._rules: list[HintletRule] = []
        for rule in rules:
            self.register(rule)

    @property
    def rules(self) -> tuple[HintletRule, ...]:
        return tuple(self._rules)

    def register(self, rule: HintletRule) -> None:
        self._rules.append(rule)
        logger.debug("Registered hintlet rule %r", rule.name)

    def dispatch(self, record: EventRecord) -> list[Hint]:
        """Run every rule on ``record`` and return their hints in rule order."""
        if not record.normalized:
            raise ContractViolation(f"record {record.sequence} was dispatched before normalization")

        hints: list[Hint] = []
        for rule in self._rules:
            try:
                hints.extend(rule.on_record(record))
            except ContractViolation:
                raise
            except Exception:
                # One broken rule must not starve the others.
                logger.exception(
                    "Hintlet rule %r failed on record %s (%s)",
                    rule.name,
                    record.sequence,
                    type_name(record.type),
                )
        return hints
