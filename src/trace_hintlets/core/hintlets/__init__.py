"""Hintlet rules and the engine that runs them."""

from __future__ import annotations

from .base import HintletRule
from .engine import HintletEngine
from .not_gz import HintletNotGz, NotGzConfig, resolve_not_gz_config


def default_rules() -> list[HintletRule]:
    """Stock rule set for a new monitoring session."""
    return [HintletNotGz()]


__all__ = [
    "HintletEngine",
    "HintletNotGz",
    "HintletRule",
    "NotGzConfig",
    "default_rules",
    "resolve_not_gz_config",
]
