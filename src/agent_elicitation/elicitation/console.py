"""Line-oriented console implementation of the elicitation callback."""

from __future__ import annotations

import asyncio
import logging
import sys
from collections.abc import Callable
from typing import Literal, TextIO

from .coercion import Primitive, coerce_text
from .errors import CoercionError
from .result import Accepted, Cancelled, Declined, ElicitationResult
from .schema import ElicitationSchema, FieldKind, SchemaField

logger = logging.getLogger(__name__)

DECLINE_TOKEN = "/decline"
CANCEL_TOKEN = "/cancel"

ExhaustedPolicy = Literal["decline", "cancel"]

_KIND_HINTS: dict[FieldKind, str] = {
    FieldKind.TEXT: "text",
    FieldKind.INTEGER: "integer",
    FieldKind.DECIMAL: "decimal",
    FieldKind.BOOLEAN: "y/n",
}


class _Stop(Exception):
    def __init__(self, result: ElicitationResult) -> None:
        super().__init__(result.action)
        self.result = result


class ConsoleElicitationCallback:
    """Ask for each field on the terminal, one line per answer.

    Booleans accept ``true/false``, ``yes/no``, ``y/n`` and ``1/0`` in any
    case. Invalid answers re-prompt up to `max_attempts` times per field;
    after that the request resolves according to `on_exhausted`. Typing
    ``/decline`` or ``/cancel`` at any prompt ends the interaction, and so
    does end of input or Ctrl-C (as a cancel).

    Prompts from concurrent requests are serialised so they never interleave,
    and at most one line is being read at any time.
    """

    def __init__(
        self,
        *,
        input_func: Callable[[str], str] | None = None,
        output: TextIO | None = None,
        max_attempts: int = 3,
        on_exhausted: ExhaustedPolicy = "decline",
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self._input = input_func or input
        self._output = output
        self._max_attempts = max_attempts
        self._on_exhausted = on_exhausted
        self._lock = asyncio.Lock()
        self._pending_read: asyncio.Future[str] | None = None

    async def __call__(
        self, source: str, message: str, schema: ElicitationSchema
    ) -> ElicitationResult:
        async with self._lock:
            header = f"[{source}] {message}" if source else message
            self._write("")
            self._write(header)
            self._write(f"(type {DECLINE_TOKEN} to decline or {CANCEL_TOKEN} to cancel)")

            data: dict[str, Primitive] = {}
            try:
                for schema_field in schema:
                    value = await self._ask_field(schema_field)
                    if value is not None:
                        data[schema_field.name] = value
            except _Stop as stop:
                return stop.result
            return Accepted(data=data)

    async def _ask_field(self, schema_field: SchemaField) -> Primitive | None:
        prompt = self._prompt_for(schema_field)
        for attempt in range(1, self._max_attempts + 1):
            raw = await self._read(prompt)
            token = raw.strip().lower()
            if token == DECLINE_TOKEN:
                raise _Stop(Declined())
            if token == CANCEL_TOKEN:
                raise _Stop(Cancelled())

            if not raw.strip():
                if schema_field.default is not None:
                    return schema_field.default
                if schema_field.kind is FieldKind.TEXT:
                    return ""
                if not schema_field.required:
                    return None
                self._write(f"A value for '{schema_field.name}' is required.")
                continue

            try:
                return coerce_text(schema_field.name, raw, schema_field.kind)
            except CoercionError as e:
                logger.debug(
                    "Invalid console answer",
                    extra={"field": schema_field.name, "attempt": attempt},
                )
                self._write(f"Invalid value: {e}")

        logger.info(
            "Console retry budget exhausted",
            extra={"field": schema_field.name, "policy": self._on_exhausted},
        )
        self._write("Too many invalid answers.")
        raise _Stop(Cancelled() if self._on_exhausted == "cancel" else Declined())

    async def _read(self, prompt: str) -> str:
        """Read one line, reusing a read left in flight by a cancelled prompt.

        A thread blocked in `input()` cannot be interrupted, so a prompt that is
        cancelled (timeout, abort) leaves its read running. The next prompt
        takes over that read and receives the next line the user types.
        """

        loop = asyncio.get_running_loop()
        pending = self._pending_read
        if pending is not None and pending.get_loop() is loop:
            self._write_prompt(prompt)
        else:
            pending = asyncio.ensure_future(asyncio.to_thread(self._input, prompt))
            self._pending_read = pending

        try:
            line = await asyncio.shield(pending)
        except (EOFError, KeyboardInterrupt):
            self._pending_read = None
            raise _Stop(Cancelled()) from None
        self._pending_read = None
        return line

    def _write(self, line: str) -> None:
        print(line, file=self._output or sys.stdout, flush=True)

    def _write_prompt(self, prompt: str) -> None:
        print(prompt, end="", file=self._output or sys.stdout, flush=True)

    @staticmethod
    def _prompt_for(schema_field: SchemaField) -> str:
        parts = [schema_field.name]
        if schema_field.description:
            parts.append(f"- {schema_field.description}")
        hint = _KIND_HINTS[schema_field.kind]
        if schema_field.default is not None:
            hint = f"{hint}, default {schema_field.default!r}"
        parts.append(f"[{hint}]")
        return " ".join(parts) + ": "
