"""FastAPI app factory.

Endpoints are thin wrappers over :class:`PendingElicitationStore`: a remote
party lists the questions tools are waiting on and answers them. When built
around an :class:`~agent_elicitation.app.ElicitationApp`, the server can also
start that application's tools and report their outcome.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from fastapi import FastAPI, HTTPException
from fastapi.encoders import jsonable_encoder

from agent_elicitation import __version__
from agent_elicitation.app import ElicitationApp
from agent_elicitation.config import ElicitationSettings
from agent_elicitation.elicitation.errors import (
    ElicitationDataError,
    ToolNotFoundError,
    UnknownElicitationError,
)
from agent_elicitation.elicitation.result import (
    Accepted,
    Cancelled,
    Declined,
    ElicitationResult,
    result_to_json,
)
from agent_elicitation.server.models import (
    AcceptRequest,
    ApiElicitation,
    ApiResolution,
    ApiToolRun,
    ToolRunRequest,
)
from agent_elicitation.server.pending_store import PendingElicitation, PendingElicitationStore
from agent_elicitation.server.run_store import RunRecord, RunStore

logger = logging.getLogger(__name__)


def _to_api(entry: PendingElicitation) -> ApiElicitation:
    return ApiElicitation.model_validate({**entry.request.to_json(), "created_at": entry.created_at})


def _to_api_run(record: RunRecord) -> ApiToolRun:
    return ApiToolRun.model_validate(record.model_dump())


def _jsonable_tool_value(value: Any) -> Any:
    if isinstance(value, (Accepted, Declined, Cancelled)):
        return result_to_json(value)
    return jsonable_encoder(value)


def create_app(
    store: PendingElicitationStore | None = None,
    settings: ElicitationSettings | None = None,
    *,
    elicitation_app: ElicitationApp | None = None,
) -> FastAPI:
    """Build the REST app.

    Args:
        store: The store the host application uses as its elicitation callback.
            Defaults to the callback of `elicitation_app`, else a fresh store.
        settings: Configuration object. If None, taken from `elicitation_app`
            or loaded from environment.
        elicitation_app: Application whose tools may be started over the API.
            Its elicitation callback must be a PendingElicitationStore.

    Raises:
        ValueError: `elicitation_app` does not elicit through a
            PendingElicitationStore, so its questions could never be answered here.
    """
    if elicitation_app is not None:
        callback = elicitation_app.elicitation_callback
        if store is None and isinstance(callback, PendingElicitationStore):
            store = callback
        if store is None or callback is not store:
            raise ValueError(
                f"Application '{elicitation_app.name}' must use the served "
                "PendingElicitationStore as its elicitation callback"
            )
        settings = settings or elicitation_app.settings

    settings = settings or ElicitationSettings()
    store = store or PendingElicitationStore()
    runs = RunStore()
    # Strong references to running tool tasks.
    tasks: set[asyncio.Task[None]] = set()

    app = FastAPI(
        title="Agent Elicitation",
        version=__version__,
        description="Answer questions that running tools are waiting on.",
        openapi_url="/api/openapi.json",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    # Expose for request handlers and for the host application.
    app.state.settings = settings
    app.state.store = store
    app.state.runs = runs
    app.state.elicitation_app = elicitation_app

    def _resolve(request_id: str, result: ElicitationResult) -> ApiResolution:
        try:
            resolved = store.resolve(request_id, result)
        except UnknownElicitationError as e:
            raise HTTPException(status_code=404, detail=str(e)) from e
        except ElicitationDataError as e:
            raise HTTPException(
                status_code=422, detail={"message": str(e), "errors": e.errors}
            ) from e
        return ApiResolution.model_validate({"request_id": request_id, **result_to_json(resolved)})

    def _require_app() -> ElicitationApp:
        if elicitation_app is None:
            raise HTTPException(status_code=404, detail="No application is being served")
        return elicitation_app

    async def _run_tool(run_id: str, tool_name: str, arguments: dict[str, Any]) -> None:
        assert elicitation_app is not None
        try:
            value = await elicitation_app.call_tool(tool_name, **arguments)
        except Exception as e:
            logger.exception("Tool run failed", extra={"run_id": run_id, "tool": tool_name})
            runs.update(run_id, status="failed", error=f"{type(e).__name__}: {e}")
            return
        runs.update(run_id, status="succeeded", result=_jsonable_tool_value(value))
        logger.info("Tool run finished", extra={"run_id": run_id, "tool": tool_name})

    @app.get("/api/v1/health")
    def health() -> dict[str, object]:
        return {"status": "ok", "version": __version__, "pending": len(store.list_pending())}

    @app.get("/api/v1/elicitations", response_model=list[ApiElicitation])
    def list_elicitations() -> list[ApiElicitation]:
        return [_to_api(entry) for entry in store.list_pending()]

    @app.get("/api/v1/elicitations/{request_id}", response_model=ApiElicitation)
    def get_elicitation(request_id: str) -> ApiElicitation:
        try:
            return _to_api(store.get(request_id))
        except UnknownElicitationError as e:
            raise HTTPException(status_code=404, detail=str(e)) from e

    @app.post("/api/v1/elicitations/{request_id}/accept", response_model=ApiResolution)
    def accept(request_id: str, req: AcceptRequest) -> ApiResolution:
        return _resolve(request_id, Accepted(data=req.content))

    @app.post("/api/v1/elicitations/{request_id}/decline", response_model=ApiResolution)
    def decline(request_id: str) -> ApiResolution:
        return _resolve(request_id, Declined())

    @app.post("/api/v1/elicitations/{request_id}/cancel", response_model=ApiResolution)
    def cancel(request_id: str) -> ApiResolution:
        return _resolve(request_id, Cancelled())

    @app.get("/api/v1/tools")
    def list_tools() -> list[str]:
        return _require_app().tools

    @app.post("/api/v1/tools/{tool_name}/runs", response_model=ApiToolRun, status_code=202)
    async def start_tool_run(tool_name: str, req: ToolRunRequest) -> ApiToolRun:
        served = _require_app()
        if tool_name not in served.tools:
            raise HTTPException(status_code=404, detail=str(ToolNotFoundError(tool_name)))

        record = runs.create(tool=tool_name)
        task = asyncio.create_task(_run_tool(record.run_id, tool_name, dict(req.arguments)))
        tasks.add(task)
        task.add_done_callback(tasks.discard)
        logger.info("Tool run started", extra={"run_id": record.run_id, "tool": tool_name})
        return _to_api_run(record)

    @app.get("/api/v1/runs", response_model=list[ApiToolRun])
    def list_runs() -> list[ApiToolRun]:
        return [_to_api_run(r) for r in runs.list()]

    @app.get("/api/v1/runs/{run_id}", response_model=ApiToolRun)
    def get_run(run_id: str) -> ApiToolRun:
        record = runs.get(run_id)
        if record is None:
            raise HTTPException(status_code=404, detail="Run not found")
        return _to_api_run(record)

    return app
