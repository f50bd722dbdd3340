"""Console-script target.

The CLI itself lives in `agent_elicitation.main`.
"""

from __future__ import annotations

from agent_elicitation.main import main

__all__ = ["main"]


if __name__ == "__main__":
    raise SystemExit(main())
