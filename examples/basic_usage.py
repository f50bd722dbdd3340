#!/usr/bin/env python3
"""Table booking example.

This demonstrates a tool that pauses to ask the user for confirmation:

* load settings from `.env`
* register an async tool on an `ElicitationApp`
* answer the question on the console and branch on the result

Booking details are passed as arguments.
"""

from __future__ import annotations

import argparse
import asyncio
from typing import Sequence

from agent_elicitation import (
    Accepted,
    Cancelled,
    ConsoleElicitationCallback,
    Declined,
    ElicitationApp,
    ElicitationSettings,
    ToolContext,
)
from agent_elicitation.logging import configure_logging


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Book a table (elicitation example).")
    parser.add_argument("--date", default="June 21st", help="Booking date")
    parser.add_argument("--time", default="5pm", help="Booking time")
    parser.add_argument("--party-size", type=int, default=2, help="Number of guests")
    return parser.parse_args(argv)


def build_app(settings: ElicitationSettings) -> ElicitationApp:
    app = ElicitationApp(
        "restaurant",
        elicitation_callback=ConsoleElicitationCallback(
            max_attempts=settings.max_attempts,
            on_exhausted=settings.on_exhausted,
        ),
        settings=settings,
    )

    @app.tool
    async def book_table(date: str, time: str, party_size: int, ctx: ToolContext) -> str:
        result = await ctx.elicit(
            f"Confirm booking for {party_size} people on {date} at {time}?",
            {"confirm": "boolean", "notes": ("text", "")},
        )
        match result:
            case Accepted(data={"confirm": True, "notes": notes}):
                suffix = f" Notes: {notes}" if notes else ""
                return f"Booked a table for {party_size} on {date} at {time}.{suffix}"
            case Accepted():
                return "Booking not confirmed."
            case Declined():
                return "Booking declined."
            case Cancelled():
                return "Booking cancelled."
        raise AssertionError(f"Unexpected result: {result!r}")

    return app


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)

    settings = ElicitationSettings()
    configure_logging(settings.log_level)

    app = build_app(settings)
    summary = asyncio.run(
        app.call_tool("book_table", date=args.date, time=args.time, party_size=args.party_size)
    )
    print(summary)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
