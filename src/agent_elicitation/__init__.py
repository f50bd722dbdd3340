"""Agent elicitation.

Lets an agent tool pause and ask a human for structured input:
- primitive-only schemas and a three-way result (accepted / declined / cancelled)
- a pluggable callback, configured once per application (console reference)
- a REST server and a Temporal workflow for remote and durable answers
"""

__version__ = "0.1.0"

from agent_elicitation.app import ElicitationApp, ToolContext
from agent_elicitation.config import ElicitationSettings
from agent_elicitation.elicitation import (
    Accepted,
    Cancelled,
    ConsoleElicitationCallback,
    Declined,
    ElicitationResult,
    ElicitationSchema,
    Elicitor,
)

__all__ = [
    "__version__",
    "Accepted",
    "Cancelled",
    "ConsoleElicitationCallback",
    "Declined",
    "ElicitationApp",
    "ElicitationResult",
    "ElicitationSchema",
    "ElicitationSettings",
    "Elicitor",
    "ToolContext",
]
