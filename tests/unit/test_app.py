from __future__ import annotations

import asyncio
import logging

import pytest

from agent_elicitation.app import ElicitationApp, ToolContext
from agent_elicitation.config import ElicitationSettings
from agent_elicitation.elicitation.errors import ElicitationError, ToolNotFoundError
from agent_elicitation.elicitation.result import (
    Accepted,
    Cancelled,
    Declined,
    ElicitationResult,
)
from agent_elicitation.elicitation.schema import ElicitationSchema


class RecordingCallback:
    def __init__(self, result: ElicitationResult) -> None:
        self.result = result
        self.sources: list[str] = []

    async def __call__(
        self, source: str, message: str, schema: ElicitationSchema
    ) -> ElicitationResult:
        self.sources.append(source)
        return self.result


def _booking_app(result: ElicitationResult) -> tuple[ElicitationApp, RecordingCallback]:
    callback = RecordingCallback(result)
    app = ElicitationApp(
        "restaurant",
        elicitation_callback=callback,
        settings=ElicitationSettings(_env_file=None),
    )

    @app.tool
    async def book_table(date: str, party_size: int, ctx: ToolContext) -> str:
        result = await ctx.elicit(
            f"Confirm booking for {party_size} people on {date}?",
            {"confirm": "boolean", "notes": ("text", "")},
        )
        match result:
            case Accepted(data={"confirm": True, "notes": notes}):
                return f"Booked for {date}" + (f" ({notes})" if notes else "")
            case Accepted():
                return "Booking not confirmed"
            case Declined():
                return "Booking declined"
            case Cancelled():
                return "Booking cancelled"
        raise AssertionError(result)

    return app, callback


@pytest.mark.parametrize(
    ("outcome", "expected"),
    [
        (Accepted(data={"confirm": True}), "Booked for June 21st"),
        (Accepted(data={"confirm": "yes", "notes": "window"}), "Booked for June 21st (window)"),
        (Accepted(data={"confirm": False}), "Booking not confirmed"),
        (Declined(), "Booking declined"),
        (Cancelled(), "Booking cancelled"),
    ],
)
async def test_booking_tool_branches_on_every_outcome(
    outcome: ElicitationResult, expected: str
) -> None:
    app, callback = _booking_app(outcome)

    assert await app.call_tool("book_table", date="June 21st", party_size=2) == expected
    assert callback.sources == ["restaurant/book_table"]


async def test_tool_without_ctx_is_called_plainly() -> None:
    app = ElicitationApp("calc", settings=ElicitationSettings(_env_file=None))

    @app.tool(name="add")
    async def add_numbers(a: int, b: int) -> int:
        return a + b

    assert app.tools == ["add"]
    assert await app.call_tool("add", a=2, b=3) == 5


async def test_unknown_tool() -> None:
    app = ElicitationApp("calc", settings=ElicitationSettings(_env_file=None))

    with pytest.raises(ToolNotFoundError):
        await app.call_tool("missing")


async def test_eliciting_without_a_callback_fails() -> None:
    app = ElicitationApp("bare", settings=ElicitationSettings(_env_file=None))

    @app.tool
    async def ask(ctx: ToolContext) -> ElicitationResult:
        return await ctx.elicit("Anything?", {"answer": "text"})

    with pytest.raises(ElicitationError):
        await app.call_tool("ask")


def test_tool_registration_rules() -> None:
    app = ElicitationApp("rules", settings=ElicitationSettings(_env_file=None))

    def sync_tool() -> None:
        return None

    with pytest.raises(TypeError):
        app.tool(sync_tool)

    @app.tool
    async def once() -> None:
        return None

    with pytest.raises(ValueError):
        app.tool(name="once")(once)


async def test_settings_timeout_reaches_the_requester() -> None:
    class Never:
        async def __call__(self, source, message, schema):
            await asyncio.sleep(5)

    app = ElicitationApp(
        "slow",
        elicitation_callback=Never(),
        settings=ElicitationSettings(_env_file=None, ELICITATION_TIMEOUT_SECONDS=0.05),
    )

    @app.tool
    async def wait(ctx: ToolContext) -> ElicitationResult:
        return await ctx.elicit("Still there?", {"ok": "boolean"})

    assert await app.call_tool("wait") == Cancelled()


def test_init_log_names_the_callback(caplog: pytest.LogCaptureFixture) -> None:
    settings = ElicitationSettings(_env_file=None)

    with caplog.at_level(logging.INFO, logger="agent_elicitation.app"):
        ElicitationApp("bare", settings=settings)
        ElicitationApp("wired", elicitation_callback=RecordingCallback(Declined()), settings=settings)

    bare, wired = [r for r in caplog.records if r.getMessage() == "Application initialized"]
    assert bare.elicitation is None
    assert wired.elicitation == "RecordingCallback"
    assert wired.app == "wired"
