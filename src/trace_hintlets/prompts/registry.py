"""MCP prompt registry.

Prompts are predefined conversation/workflow templates that the client can invoke explicitly.
"""

from __future__ import annotations

from typing import Any

from mcp.server.fastmcp import FastMCP


def register_prompts(mcp: FastMCP) -> None:
    """Register prompt templates on the MCP server."""

    @mcp.prompt()
    def review_trace_hints(
        trace_path: str,
        min_severity: str | None = None,
    ) -> list[dict[str, Any]]:
        """Build a prompt that reviews the performance hints of a trace."""
        call_lines = [f"- trace_path: {trace_path}", "- include_records: false"]
        if min_severity is not None:
            call_lines.append(f"- min_severity: {min_severity}")
        call_block = "\n".join(call_lines)
        return [
            {
                "role": "system",
                "content": (
                    "You are a web performance engineer. Explain page load problems "
                    "using only the hints and records returned by the tools. "
                    "Do not invent resources or timings."
                ),
            },
            {
                "role": "user",
                "content": (
                    "Review the recorded trace using analyze_trace.\n"
                    "- Call analyze_trace first with the parameters below.\n"
                    "- Group hints by rule and list the affected URLs.\n"
                    "- If there are no hints, say so clearly.\n"
                    "- Only call again with include_records=true when a hint needs "
                    "timeline context.\n\n"
                    "Call analyze_trace with:\n"
                    f"{call_block}\n\n"
                    "Return this structure:\n"
                    "1) Summary (1-3 bullets)\n"
                    "2) Hints by rule (URL, timestamp in ms, record sequence)\n"
                    "3) Suggested fixes (2-4 bullets)\n"
                ),
            },
            {
                "role": "user",
                "content": [
                    {
                        "type": "text",
                        "text": "Optional: the raw trace is available via:",
                    },
                    {"type": "resource", "uri": f"trace://{trace_path}"},
                ],
            },
        ]
