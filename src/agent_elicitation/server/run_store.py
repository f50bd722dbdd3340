"""In-memory tracking of tool runs started through the REST server.

A run is a tool invocation executing as an asyncio task on the server's event
loop. While it waits on an elicitation, the question shows up in the pending
store; the run record holds the tool's final value or error.
"""

from __future__ import annotations

import threading
import uuid
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel

RunStatus = Literal["running", "succeeded", "failed"]


class RunRecord(BaseModel):
    run_id: str
    tool: str
    status: RunStatus
    created_at: str
    updated_at: str

    result: Any = None
    error: str | None = None


def _utc_iso_now() -> str:
    return datetime.now(tz=UTC).isoformat()


@dataclass
class RunStore:
    def __post_init__(self) -> None:
        self._lock = threading.Lock()
        self._runs: dict[str, RunRecord] = {}

    def list(self) -> list[RunRecord]:
        with self._lock:
            return sorted(self._runs.values(), key=lambda r: r.created_at)

    def get(self, run_id: str) -> RunRecord | None:
        with self._lock:
            return self._runs.get(run_id)

    def create(self, *, tool: str) -> RunRecord:
        with self._lock:
            now = _utc_iso_now()
            record = RunRecord(
                run_id=uuid.uuid4().hex,
                tool=tool,
                status="running",
                created_at=now,
                updated_at=now,
            )
            self._runs[record.run_id] = record
            return record

    def update(self, run_id: str, **updates: object) -> RunRecord:
        with self._lock:
            run = self._runs.get(run_id)
            if run is None:
                raise KeyError(run_id)
            merged = run.model_copy(update={"updated_at": _utc_iso_now(), **updates})
            self._runs[run_id] = merged
            return merged
