"""Durable elicitation on Temporal.

- `HumanInputWorkflow`: holds a request until a `respond` signal, a timeout
  or cancellation resolves it
- `TemporalElicitationCallback`: elicitation callback backed by that workflow
- `send_response`: signal helper for whoever answers
- `run_worker`: worker for the task queue
"""

from agent_elicitation.temporal.client import (
    TemporalElicitationCallback,
    connect,
    send_response,
    workflow_id_for,
)
from agent_elicitation.temporal.worker import build_worker, run_worker
from agent_elicitation.temporal.workflows import HumanInputWorkflow, normalize_response

__all__ = [
    "HumanInputWorkflow",
    "TemporalElicitationCallback",
    "build_worker",
    "connect",
    "normalize_response",
    "run_worker",
    "send_response",
    "workflow_id_for",
]
