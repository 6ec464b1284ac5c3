"""Module entrypoint.

Allows:
    python -m trace_hintlets
"""

from __future__ import annotations

from trace_hintlets.server.trace_server import main

if __name__ == "__main__":
    main()
