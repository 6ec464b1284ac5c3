"""MCP server entrypoint (stdio transport).

This module wires together:
- Tools: callable actions (e.g., analyze a recorded trace)
- Resources: addressable data blobs (e.g., active rules, raw traces via URI)
- Prompts: reusable conversation templates that clients can invoke

Run locally (stdio):
    python -m trace_hintlets.server.trace_server
"""

from __future__ import annotations

import logging
import os
from typing import Any

from mcp.server.fastmcp import FastMCP

from trace_hintlets.prompts.registry import register_prompts
from trace_hintlets.resources.registry import register_resources
from trace_hintlets.tools.analyze import analyze_trace_impl

LOGGER = logging.getLogger(__name__)


def _configure_logging() -> None:
    """Configure a reasonable default logging setup.

    The MCP client typically captures stderr; keeping logs concise makes them easier to consume.
    """
    level_name = os.getenv("TRACE_HINTLETS_LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


mcp = FastMCP("trace-hintlets", json_response=True)

register_resources(mcp)
register_prompts(mcp)


@mcp.tool()
async def analyze_trace(
    trace_path: str,
    include_records: bool = False,
    limit: int | None = None,
    min_severity: str | None = None,
) -> dict[str, Any]:
    """Normalize a recorded trace and return the hints it produced.

    Parameters
    ----------
    trace_path:
        Path to a JSON-lines trace (plain or .gz). Each line is an
        addRecordToTimeline/updateResource message or a bare timeline record.
    include_records:
        When true, also return the normalized record stream.
    limit:
        Maximum number of records returned (hard-capped in the implementation).
    min_severity:
        Keep only hints at least this urgent (validation, critical, warning, info).

    Returns
    -------
    dict:
        {"base_time": float | None, "record_count": int, "hint_count": int,
         "hints": list[dict], "records": list[dict] (optional)}
    """
    return await analyze_trace_impl(
        trace_path=trace_path,
        include_records=include_records,
        limit=limit,
        min_severity=min_severity,
    )


def main() -> None:
    """Start the MCP server over stdio."""
    _configure_logging()
    LOGGER.debug("Starting MCP server (transport=stdio)")
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
