"""Temporal client adapter.

Provides the durable elicitation callback and the signal helper used to
answer requests from outside the workflow.
"""

from __future__ import annotations

import asyncio
import logging

from temporalio.client import Client

from agent_elicitation.config import ElicitationSettings
from agent_elicitation.elicitation.request import ElicitationRequest
from agent_elicitation.elicitation.result import (
    ElicitationResult,
    result_from_json,
    result_to_json,
)
from agent_elicitation.elicitation.schema import ElicitationSchema
from agent_elicitation.temporal.workflows import HumanInputWorkflow

logger = logging.getLogger(__name__)

WORKFLOW_ID_PREFIX = "elicitation-"


def workflow_id_for(request_id: str) -> str:
    return f"{WORKFLOW_ID_PREFIX}{request_id}"


async def connect(settings: ElicitationSettings) -> Client:
    client = await Client.connect(settings.temporal_address, namespace=settings.temporal_namespace)
    logger.info(
        "Temporal connected",
        extra={"address": settings.temporal_address, "namespace": settings.temporal_namespace},
    )
    return client


class TemporalElicitationCallback:
    """Elicitation callback that parks each request in a HumanInputWorkflow.

    The request survives process restarts: whoever answers it signals the
    workflow (see :func:`send_response`), and the tool picks the result up
    from the workflow's return value.
    """

    def __init__(
        self,
        client: Client,
        *,
        task_queue: str,
        timeout_seconds: float = 0.0,
    ) -> None:
        self._client = client
        self._task_queue = task_queue
        self._timeout_seconds = timeout_seconds

    @classmethod
    def from_settings(cls, client: Client, settings: ElicitationSettings) -> TemporalElicitationCallback:
        return cls(
            client,
            task_queue=settings.temporal_task_queue,
            timeout_seconds=settings.workflow_timeout_seconds,
        )

    async def __call__(
        self, source: str, message: str, schema: ElicitationSchema
    ) -> ElicitationResult:
        request = ElicitationRequest(message=message, schema=schema, source=source)
        workflow_id = workflow_id_for(request.request_id)
        handle = await self._client.start_workflow(
            HumanInputWorkflow.run,
            {"request": request.to_json(), "timeout_seconds": self._timeout_seconds},
            id=workflow_id,
            task_queue=self._task_queue,
        )
        logger.info(
            "Human input workflow started",
            extra={"workflow_id": workflow_id, "source": source},
        )

        try:
            raw = await handle.result()
        except asyncio.CancelledError:
            # A cancelled tool takes its workflow down with it.
            await asyncio.shield(handle.cancel())
            raise

        if isinstance(raw, dict) and raw.get("reason"):
            logger.info(
                "Human input resolved without an answer",
                extra={"workflow_id": workflow_id, "reason": raw["reason"]},
            )
        return result_from_json(raw)


async def send_response(client: Client, workflow_id: str, result: ElicitationResult) -> None:
    """Answer a pending HumanInputWorkflow."""

    handle = client.get_workflow_handle(workflow_id)
    await handle.signal(HumanInputWorkflow.respond, result_to_json(result))
    logger.info(
        "Human input answered", extra={"workflow_id": workflow_id, "action": result.action}
    )
