"""Event normalization and hintlet analysis core."""

from __future__ import annotations

from .errors import ContractViolation
from .models import EventRecord, EventRecordType, Hint, HintSeverity
from .normalizer import TimeNormalizer
from .page_transition import PageTransitionDetector
from .resource_update import ResourceUpdateMerger
from .session import MonitoringSession

__all__ = [
    "ContractViolation",
    "EventRecord",
    "EventRecordType",
    "Hint",
    "HintSeverity",
    "MonitoringSession",
    "PageTransitionDetector",
    "ResourceUpdateMerger",
    "TimeNormalizer",
]
