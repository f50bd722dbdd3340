"""CLI entrypoint.

Commands:
- ask:     ask a question on the console and print the result as JSON
- respond: answer a durable (Temporal) elicitation by workflow id
- worker:  run the Temporal worker for human-input workflows
- serve:   serve an application's tools and pending elicitations over REST
"""

from __future__ import annotations

import argparse
import asyncio
import importlib
import json
import logging
import os
import sys

from pydantic import ValidationError

from agent_elicitation import __version__
from agent_elicitation.app import ElicitationApp
from agent_elicitation.config import ElicitationSettings
from agent_elicitation.elicitation.console import ConsoleElicitationCallback
from agent_elicitation.elicitation.errors import ElicitationError, SchemaValidationError
from agent_elicitation.elicitation.requester import Elicitor
from agent_elicitation.elicitation.result import (
    Accepted,
    Cancelled,
    Declined,
    ElicitationResult,
    result_to_json,
)
from agent_elicitation.elicitation.schema import ElicitationSchema, SchemaField
from agent_elicitation.logging import configure_logging

logger = logging.getLogger(__name__)

EXIT_ACCEPTED = 0
EXIT_ERROR = 1
EXIT_CONFIG = 2
EXIT_DECLINED = 4
EXIT_CANCELLED = 5


def _parse_field(value: str) -> SchemaField:
    """Parse ``name:kind`` or ``name:kind=default``."""

    spec, sep, default = value.partition("=")
    name, colon, kind = spec.partition(":")
    if not colon:
        raise SchemaValidationError(f"Field must look like name:kind[=default], got {value!r}")
    return SchemaField(
        name=name.strip(),
        kind=kind.strip(),  # type: ignore[arg-type]
        default=default if sep else None,
    )


def _parse_data(values: list[str] | None) -> dict[str, str]:
    data: dict[str, str] = {}
    for item in values or []:
        key, sep, raw = item.partition("=")
        if not sep or not key.strip():
            raise ValueError(f"--data entries must look like key=value, got {item!r}")
        data[key.strip()] = raw
    return data


def _exit_code_for(result: ElicitationResult) -> int:
    if isinstance(result, Accepted):
        return EXIT_ACCEPTED
    if isinstance(result, Declined):
        return EXIT_DECLINED
    return EXIT_CANCELLED


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="elicitation",
        description="Ask humans for structured input from agent tools",
    )
    parser.add_argument("--version", action="version", version=f"agent-elicitation {__version__}")

    subparsers = parser.add_subparsers(dest="command", required=True)

    ask = subparsers.add_parser("ask", help="Ask a question on the console")
    ask.add_argument("--message", required=True, help="Prompt shown to the user")
    ask.add_argument(
        "--field",
        dest="fields",
        action="append",
        required=True,
        help="Field as name:kind[=default]; kind is text, integer, decimal or boolean. Repeatable.",
    )
    ask.add_argument("--source", default="cli", help="Source identifier shown with the prompt")
    ask.add_argument(
        "--timeout-seconds",
        type=float,
        default=None,
        help="Override ELICITATION_TIMEOUT_SECONDS (0 means no timeout)",
    )

    respond = subparsers.add_parser(
        "respond", help="Answer a pending durable elicitation (signals its workflow)"
    )
    respond.add_argument("--workflow-id", required=True, help="Human-input workflow id")
    action = respond.add_mutually_exclusive_group(required=True)
    action.add_argument("--accept", action="store_true", help="Accept with --data values")
    action.add_argument("--decline", action="store_true", help="Decline to answer")
    action.add_argument("--cancel", action="store_true", help="Cancel the interaction")
    respond.add_argument(
        "--data",
        action="append",
        default=None,
        help="Accepted value as key=value. Repeatable.",
    )

    subparsers.add_parser("worker", help="Run the Temporal worker for human-input workflows")

    serve = subparsers.add_parser(
        "serve", help="Serve an application's tools and pending elicitations over REST"
    )
    serve.add_argument(
        "--app",
        dest="app_ref",
        required=True,
        help="ElicitationApp to serve, as module:attribute. It must elicit through a "
        "PendingElicitationStore.",
    )
    serve.add_argument(
        "--app-dir",
        default=".",
        help="Directory added to the import path before loading --app (default: .)",
    )
    serve.add_argument("--host", default=None, help="Bind host (default ELICITATION_SERVER_HOST)")
    serve.add_argument(
        "--port", type=int, default=None, help="Bind port (default ELICITATION_SERVER_PORT)"
    )

    return parser


def _run_ask(args: argparse.Namespace, settings: ElicitationSettings) -> int:
    schema = ElicitationSchema(fields=tuple(_parse_field(f) for f in args.fields))
    callback = ConsoleElicitationCallback(
        max_attempts=settings.max_attempts,
        on_exhausted=settings.on_exhausted,
    )
    elicitor = Elicitor(
        callback, timeout=settings.timeout, timeout_policy=settings.timeout_policy
    )
    result = asyncio.run(
        elicitor.elicit(
            args.message, schema, source=args.source, timeout=args.timeout_seconds
        )
    )
    print(json.dumps(result_to_json(result), ensure_ascii=False))
    return _exit_code_for(result)


def _run_respond(args: argparse.Namespace, settings: ElicitationSettings) -> int:
    from agent_elicitation.temporal.client import connect, send_response

    result: ElicitationResult
    if args.accept:
        result = Accepted(data=_parse_data(args.data))
    elif args.decline:
        result = Declined()
    else:
        result = Cancelled()

    async def _send() -> None:
        client = await connect(settings)
        await send_response(client, args.workflow_id, result)

    asyncio.run(_send())
    print(f"Sent '{result.action}' to {args.workflow_id}")
    return 0


def _run_worker(settings: ElicitationSettings) -> int:
    from agent_elicitation.temporal.worker import run_worker

    asyncio.run(run_worker(settings))
    return 0


def load_app(ref: str, *, app_dir: str | None = None) -> ElicitationApp:
    """Import an ElicitationApp given as ``module:attribute``."""

    module_name, sep, attr = ref.partition(":")
    if not sep or not module_name or not attr:
        raise ValueError(f"--app must look like module:attribute, got {ref!r}")
    if app_dir is not None:
        path = os.path.abspath(app_dir)
        if path not in sys.path:
            sys.path.insert(0, path)

    module = importlib.import_module(module_name)
    target = module
    for part in attr.split("."):
        target = getattr(target, part)
    if not isinstance(target, ElicitationApp):
        raise ValueError(f"{ref} is a {type(target).__name__}, not an ElicitationApp")
    return target


def _run_serve(args: argparse.Namespace, settings: ElicitationSettings) -> int:
    import uvicorn

    from agent_elicitation.server.app import create_app

    try:
        served = load_app(args.app_ref, app_dir=args.app_dir)
        app = create_app(settings=settings, elicitation_app=served)
    except (ImportError, AttributeError, ValueError) as e:
        print(f"Cannot serve {args.app_ref!r}: {e}", file=sys.stderr)
        return EXIT_CONFIG

    uvicorn.run(
        app,
        host=args.host or settings.server_host,
        port=args.port or settings.server_port,
        log_config=None,
    )
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = ElicitationSettings()
    except ValidationError as e:
        # Logging isn't configured yet; keep it simple and actionable.
        print("Configuration error (check your .env):", file=sys.stderr)
        print(e, file=sys.stderr)
        return EXIT_CONFIG

    configure_logging(settings.log_level)

    try:
        if args.command == "ask":
            return _run_ask(args, settings)
        if args.command == "respond":
            return _run_respond(args, settings)
        if args.command == "worker":
            return _run_worker(settings)
        if args.command == "serve":
            return _run_serve(args, settings)

        logger.error("Unknown command", extra={"command": args.command})
        return EXIT_CONFIG

    except SchemaValidationError as e:
        logger.warning(str(e))
        print(f"Invalid schema: {e}", file=sys.stderr)
        return EXIT_CONFIG

    except (ElicitationError, ValueError) as e:
        logger.warning(str(e))
        print(str(e), file=sys.stderr)
        return EXIT_ERROR

    except Exception:
        logger.exception("Command failed")
        return EXIT_ERROR


if __name__ == "__main__":
    raise SystemExit(main())
