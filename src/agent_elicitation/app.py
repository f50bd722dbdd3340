"""Application object: tool registry plus the process-wide elicitation callback."""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, TypeVar

from agent_elicitation.config import ElicitationSettings
from agent_elicitation.elicitation.errors import ElicitationError, ToolNotFoundError
from agent_elicitation.elicitation.request import ElicitationCallback
from agent_elicitation.elicitation.requester import Elicitor
from agent_elicitation.elicitation.result import ElicitationResult
from agent_elicitation.elicitation.schema import SchemaLike

logger = logging.getLogger(__name__)

ToolFunc = TypeVar("ToolFunc", bound=Callable[..., Awaitable[Any]])


@dataclass(frozen=True, slots=True)
class ToolContext:
    """Handed to a running tool as its `ctx` argument."""

    app: ElicitationApp
    tool_name: str

    @property
    def source(self) -> str:
        return f"{self.app.name}/{self.tool_name}"

    async def elicit(
        self,
        message: str,
        schema: SchemaLike,
        *,
        timeout: float | None = None,
        abort: asyncio.Event | None = None,
    ) -> ElicitationResult:
        return await self.app.elicitor.elicit(
            message, schema, source=self.source, timeout=timeout, abort=abort
        )


class ElicitationApp:
    """Hosts tools that may pause to ask the user for input.

    The elicitation callback is chosen once, here, and used for the lifetime
    of the application. There is no implicit default: hosts pass
    :class:`~agent_elicitation.elicitation.console.ConsoleElicitationCallback`
    or their own implementation explicitly.
    """

    def __init__(
        self,
        name: str,
        *,
        elicitation_callback: ElicitationCallback | None = None,
        settings: ElicitationSettings | None = None,
    ) -> None:
        """Initialize the application.

        Args:
            name: Application name, used as the prefix of each request source.
            elicitation_callback: Handler that presents requests to a user.
            settings: Configuration object. If None, loads from environment.
        """
        self.name = name
        self.settings = settings or ElicitationSettings()
        self._callback = elicitation_callback
        self._elicitor: Elicitor | None = None
        if elicitation_callback is not None:
            self._elicitor = Elicitor(
                elicitation_callback,
                timeout=self.settings.timeout,
                timeout_policy=self.settings.timeout_policy,
            )
        self._tools: dict[str, Callable[..., Awaitable[Any]]] = {}

        logger.info(
            "Application initialized",
            extra={
                "app": name,
                "elicitation": (
                    type(elicitation_callback).__name__ if elicitation_callback is not None else None
                ),
            },
        )

    @property
    def elicitation_callback(self) -> ElicitationCallback | None:
        return self._callback

    @property
    def elicitor(self) -> Elicitor:
        if self._elicitor is None:
            raise ElicitationError(
                f"Application '{self.name}' has no elicitation callback configured"
            )
        return self._elicitor

    @property
    def tools(self) -> list[str]:
        return sorted(self._tools)

    def tool(
        self, func: ToolFunc | None = None, *, name: str | None = None
    ) -> ToolFunc | Callable[[ToolFunc], ToolFunc]:
        """Register an async tool. Usable as ``@app.tool`` or ``@app.tool(name=...)``.

        A tool that declares a ``ctx`` parameter receives a :class:`ToolContext`.
        """

        def register(fn: ToolFunc) -> ToolFunc:
            if not inspect.iscoroutinefunction(fn):
                raise TypeError(f"Tool {fn.__name__} must be an async function")
            tool_name = name or fn.__name__
            if tool_name in self._tools:
                raise ValueError(f"Tool already registered: {tool_name}")
            self._tools[tool_name] = fn
            logger.debug("Tool registered", extra={"tool": tool_name})
            return fn

        if func is not None:
            return register(func)
        return register

    async def call_tool(self, tool_name: str, /, **arguments: Any) -> Any:
        """Run a registered tool to completion."""

        fn = self._tools.get(tool_name)
        if fn is None:
            raise ToolNotFoundError(tool_name)
        if "ctx" in inspect.signature(fn).parameters:
            arguments["ctx"] = ToolContext(app=self, tool_name=tool_name)

        logger.info("Calling tool", extra={"tool": tool_name})
        return await fn(**arguments)
