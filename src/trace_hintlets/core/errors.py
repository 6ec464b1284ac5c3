"""Pipeline error types."""

from __future__ import annotations


class ContractViolation(RuntimeError):
    """A sequencing bug in the caller or the pipeline itself.

    Raised for things like normalizing before a base time exists. These are
    never recovered from inside the core.
    """
