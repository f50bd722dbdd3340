"""In-process store of elicitations waiting for a remote answer.

The store is itself an elicitation callback: each call parks a request until
someone resolves it (typically through the REST API). Resolution may happen
from any thread.

This is intentionally in-memory. Requests that must survive a restart belong
in the Temporal-backed callback instead.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from dataclasses import dataclass, field
from datetime import UTC, datetime

from agent_elicitation.elicitation.errors import ElicitationDataError, UnknownElicitationError
from agent_elicitation.elicitation.request import ElicitationRequest
from agent_elicitation.elicitation.result import Accepted, ElicitationResult
from agent_elicitation.elicitation.schema import ElicitationSchema

logger = logging.getLogger(__name__)


def _utc_iso_now() -> str:
    return datetime.now(tz=UTC).isoformat()


@dataclass
class PendingElicitation:
    request: ElicitationRequest
    created_at: str
    future: asyncio.Future[ElicitationResult] = field(repr=False)
    loop: asyncio.AbstractEventLoop = field(repr=False)


@dataclass
class PendingElicitationStore:
    def __post_init__(self) -> None:
        self._lock = threading.Lock()
        self._pending: dict[str, PendingElicitation] = {}

    async def __call__(
        self, source: str, message: str, schema: ElicitationSchema
    ) -> ElicitationResult:
        loop = asyncio.get_running_loop()
        request = ElicitationRequest(message=message, schema=schema, source=source)
        entry = PendingElicitation(
            request=request,
            created_at=_utc_iso_now(),
            future=loop.create_future(),
            loop=loop,
        )
        with self._lock:
            self._pending[request.request_id] = entry
        logger.info(
            "Elicitation pending", extra={"request_id": request.request_id, "source": source}
        )
        try:
            return await entry.future
        finally:
            with self._lock:
                self._pending.pop(request.request_id, None)

    def list_pending(self) -> list[PendingElicitation]:
        with self._lock:
            return sorted(self._pending.values(), key=lambda p: p.created_at)

    def get(self, request_id: str) -> PendingElicitation:
        with self._lock:
            entry = self._pending.get(request_id)
        if entry is None:
            raise UnknownElicitationError(request_id)
        return entry

    def resolve(self, request_id: str, result: ElicitationResult) -> ElicitationResult:
        """Answer a pending request.

        Accepted data is validated against the request schema before the
        waiting tool is woken, so a bad payload leaves the request pending.

        Raises:
            UnknownElicitationError: No such request, or it is already resolved.
            ElicitationDataError: Accepted data does not match the schema.
        """

        with self._lock:
            entry = self._pending.pop(request_id, None)
            if entry is None:
                raise UnknownElicitationError(request_id)
            if isinstance(result, Accepted):
                try:
                    entry.request.schema.validate_data(result.data)
                except ElicitationDataError:
                    self._pending[request_id] = entry
                    raise

        entry.loop.call_soon_threadsafe(_set_result, entry.future, result)
        logger.info(
            "Elicitation answered", extra={"request_id": request_id, "action": result.action}
        )
        return result


def _set_result(future: asyncio.Future[ElicitationResult], result: ElicitationResult) -> None:
    if not future.done():
        future.set_result(result)
