"""FastAPI server adapter for agent-elicitation.

This module exposes a REST API over pending elicitations.

Design intent:
- Keep elicitation logic in `agent_elicitation.elicitation.*`
- Keep server-specific concerns (routing, status codes) here
"""

from __future__ import annotations

__all__ = ["PendingElicitationStore", "create_app"]

from agent_elicitation.server.app import create_app
from agent_elicitation.server.pending_store import PendingElicitationStore
