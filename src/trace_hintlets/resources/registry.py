"""MCP resource registry.

Resources are addressable by URI and can be fetched by the MCP client on demand.
"""

from __future__ import annotations

import asyncio
import gzip
import os
from pathlib import Path
from typing import Any

from mcp.server.fastmcp import FastMCP

from trace_hintlets.core.hintlets import default_rules
from trace_hintlets.core.hintlets.not_gz import HintletNotGz
from trace_hintlets.core.models import Hint

ALLOWED_FILE_SUFFIXES = {".jsonl", ".json", ".trace"}
BASE_DIR_ENV = "TRACE_HINTLETS_BASE_DIR"
TEXT_ENCODING = "utf-8"
TEXT_ERRORS = "replace"


def _base_dir() -> Path:
    """Return the resolved base directory for file resources."""
    raw = os.getenv(BASE_DIR_ENV, os.getcwd())
    return Path(raw).resolve()


def _safe_resolve(path: str) -> Path:
    """Resolve a path under the configured base directory."""
    base = _base_dir()
    p = Path(path).expanduser()
    if not p.is_absolute():
        p = base / p
    p = p.resolve()
    if base not in p.parents and p != base:
        raise ValueError("Path escapes base dir")
    return p


def _allowed_suffix(path: Path) -> str:
    """Return the effective suffix for allowlist checks."""
    suffix = path.suffix.lower()
    if suffix == ".gz":
        suffix = path.with_suffix("").suffix.lower()
    return suffix


def _resolve_resource_path(path: str) -> Path:
    """Resolve and validate a trace file path."""
    resolved = _safe_resolve(path)
    if not resolved.is_file():
        raise FileNotFoundError(f"File not found: {resolved}")
    if _allowed_suffix(resolved) not in ALLOWED_FILE_SUFFIXES:
        allowed = ", ".join(sorted(ALLOWED_FILE_SUFFIXES))
        raise ValueError(f"File type not allowed. Allowed: {allowed}.")
    return resolved


def _open_text(path: Path) -> str:
    """Read text from a file, supporting optional gzip compression."""
    if path.suffix.lower() == ".gz":
        with gzip.open(path, mode="rt", encoding=TEXT_ENCODING, errors=TEXT_ERRORS) as f:
            return f.read()
    return path.read_text(encoding=TEXT_ENCODING, errors=TEXT_ERRORS)


def describe_rules() -> list[dict[str, Any]]:
    """Describe the stock hintlet rules and their configuration."""
    out: list[dict[str, Any]] = []
    for rule in default_rules():
        entry: dict[str, Any] = {"name": rule.name}
        if isinstance(rule, HintletNotGz):
            entry["min_size"] = rule.config.min_size
            entry["compressible_types"] = sorted(rule.config.compressible_types)
            entry["severity"] = rule.config.severity.name.lower()
        out.append(entry)
    return out


def register_resources(mcp: FastMCP) -> None:
    """Register resource handlers on the MCP server."""

    @mcp.resource("app://trace-hintlets/help")
    def help_resource() -> str:
        """Return a short list of available resource URIs."""
        allowed = ", ".join(sorted(ALLOWED_FILE_SUFFIXES))
        base = _base_dir()
        return (
            "Resources:\n"
            "- app://trace-hintlets/help\n"
            "- app://trace-hintlets/rules\n"
            "- app://trace-hintlets/schemas/hint\n"
            f"- trace://{{path}} (restricted to {BASE_DIR_ENV}; allowed: {allowed}, .gz)\n"
            f"\nBase directory: {base}\n"
        )

    @mcp.resource("app://trace-hintlets/rules")
    def rules_resource() -> list[dict[str, Any]]:
        """Return the active hintlet rules."""
        return describe_rules()

    @mcp.resource("app://trace-hintlets/schemas/hint")
    def hint_schema() -> dict[str, Any]:
        """Return the JSON schema for hints."""
        return Hint.model_json_schema()

    @mcp.resource("trace://{path}")
    async def read_trace(path: str) -> str:
        """Return the raw contents of a recorded trace."""
        p = _resolve_resource_path(path)
        return await asyncio.to_thread(_open_text, p)
