from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from trace_hintlets.core.errors import ContractViolation
from trace_hintlets.core.models import HintSeverity, type_name
from trace_hintlets.core.trace_service import analyze_trace


def _parse_severity(s: str) -> HintSeverity:
    try:
        return HintSeverity[s.strip().upper()]
    except KeyError as e:
        raise argparse.ArgumentTypeError(
            "Invalid severity. Allowed: VALIDATION, CRITICAL, WARNING, INFO"
        ) from e


def main() -> None:
    p = argparse.ArgumentParser(description="Normalize a recorded trace and print performance hints.")
    p.add_argument("trace_path")
    p.add_argument(
        "--min-severity",
        type=_parse_severity,
        default=HintSeverity.INFO,
        help="Least urgent severity to print (default: INFO, i.e. everything)",
    )
    p.add_argument("--records", action="store_true", help="Also print the normalized record stream")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    args = p.parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        result = asyncio.run(analyze_trace(Path(args.trace_path)))
    except FileNotFoundError as e:
        print(str(e), file=sys.stderr)
        raise SystemExit(2)
    except (ValueError, ContractViolation) as e:
        print(f"Error: {e}", file=sys.stderr)
        raise SystemExit(2)

    if args.records:
        for r in result.records:
            print(f"{r.sequence:>6} {r.time:>12.3f}ms {type_name(r.type)}")
        print()

    hints = [h for h in result.hints if h.severity <= args.min_severity]
    for h in hints:
        print(
            f"[{h.severity.name}] {h.timestamp:.3f}ms #{h.ref_record} "
            f"{h.hintlet_rule}: {h.description}"
        )

    print(f"\nFound {len(hints)} hints in {len(result.records)} records.")


if __name__ == "__main__":
    main()
