"""The requester side of the elicitation handshake."""

from __future__ import annotations

import asyncio
import logging
import uuid
from typing import Any, Literal

from .errors import ElicitationDataError, ElicitationTimeoutError
from .request import ElicitationCallback
from .result import Accepted, Cancelled, Declined, ElicitationResult
from .schema import ElicitationSchema, SchemaLike

logger = logging.getLogger(__name__)

TimeoutPolicy = Literal["cancel", "raise"]


class Elicitor:
    """Suspends a tool until its question has been answered.

    The elicitor keeps no state between calls: the callback invocation is its
    only side effect, so a replayed tool simply asks again.
    """

    def __init__(
        self,
        callback: ElicitationCallback,
        *,
        timeout: float | None = None,
        timeout_policy: TimeoutPolicy = "cancel",
    ) -> None:
        if timeout is not None and timeout <= 0:
            timeout = None
        self._callback = callback
        self._timeout = timeout
        self._timeout_policy = timeout_policy

    @property
    def callback(self) -> ElicitationCallback:
        return self._callback

    async def elicit(
        self,
        message: str,
        schema: SchemaLike,
        *,
        source: str = "",
        timeout: float | None = None,
        abort: asyncio.Event | None = None,
    ) -> ElicitationResult:
        """Ask the user `message` and wait for exactly one result.

        Args:
            message: Prompt text shown to the user.
            schema: An :class:`ElicitationSchema`, a ``{name: kind}`` mapping or
                a flat pydantic model.
            source: Identifier of the requesting tool, shown by the callback.
            timeout: Per-call override of the configured timeout, in seconds.
            abort: When set while waiting, the request resolves as ``Cancelled``.

        Returns:
            ``Accepted`` with schema-conforming data, ``Declined`` or ``Cancelled``.

        Raises:
            SchemaValidationError: The schema has a non-primitive field. The
                callback is not invoked.
            ElicitationDataError: The callback accepted with data that does
                not conform to the schema.
            ElicitationTimeoutError: The wait expired and the timeout policy
                is ``"raise"``.
        """

        resolved = ElicitationSchema.of(schema)
        request_id = uuid.uuid4().hex
        effective_timeout = timeout if timeout is not None else self._timeout
        if effective_timeout is not None and effective_timeout <= 0:
            effective_timeout = None

        logger.info(
            "Elicitation requested",
            extra={
                "request_id": request_id,
                "source": source,
                "fields": resolved.field_names,
            },
        )

        result = await self._wait(
            request_id=request_id,
            call=self._callback(source, message, resolved),
            timeout=effective_timeout,
            abort=abort,
        )

        if isinstance(result, Accepted):
            result = Accepted(data=resolved.build(result.data))
        elif not isinstance(result, (Declined, Cancelled)):
            raise ElicitationDataError(
                f"Elicitation callback returned {type(result).__name__}, "
                "expected Accepted, Declined or Cancelled"
            )

        logger.info(
            "Elicitation resolved",
            extra={"request_id": request_id, "source": source, "action": result.action},
        )
        return result

    async def _wait(
        self,
        *,
        request_id: str,
        call: Any,
        timeout: float | None,
        abort: asyncio.Event | None,
    ) -> ElicitationResult:
        task: asyncio.Task[ElicitationResult] = asyncio.ensure_future(call)
        waiters: set[asyncio.Future[Any]] = {task}
        abort_task: asyncio.Task[Any] | None = None
        if abort is not None:
            abort_task = asyncio.ensure_future(abort.wait())
            waiters.add(abort_task)

        try:
            done, _ = await asyncio.wait(
                waiters, timeout=timeout, return_when=asyncio.FIRST_COMPLETED
            )
        except asyncio.CancelledError:
            task.cancel()
            raise
        finally:
            if abort_task is not None:
                abort_task.cancel()

        if task in done:
            try:
                return task.result()
            except asyncio.CancelledError:
                logger.info("Elicitation callback was cancelled", extra={"request_id": request_id})
                return Cancelled()

        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

        if abort_task is not None and abort_task in done:
            logger.info("Elicitation aborted", extra={"request_id": request_id})
            return Cancelled()

        assert timeout is not None
        logger.warning(
            "Elicitation timed out",
            extra={"request_id": request_id, "timeout_seconds": timeout},
        )
        if self._timeout_policy == "raise":
            raise ElicitationTimeoutError(request_id, timeout)
        return Cancelled()
