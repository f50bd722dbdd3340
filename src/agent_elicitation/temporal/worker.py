from __future__ import annotations

import asyncio
import logging

from temporalio.client import Client
from temporalio.worker import Worker
from temporalio.worker.workflow_sandbox import SandboxedWorkflowRunner, SandboxRestrictions

from agent_elicitation.config import ElicitationSettings
from agent_elicitation.logging import configure_logging
from agent_elicitation.temporal.client import connect
from agent_elicitation.temporal.workflows import HumanInputWorkflow

logger = logging.getLogger(__name__)


def build_worker(client: Client, settings: ElicitationSettings) -> Worker:
    return Worker(
        client,
        task_queue=settings.temporal_task_queue,
        workflows=[HumanInputWorkflow],
        # agent_elicitation is deterministic at import time.
        workflow_runner=SandboxedWorkflowRunner(
            restrictions=SandboxRestrictions.default.with_passthrough_modules("agent_elicitation")
        ),
    )


async def run_worker(settings: ElicitationSettings) -> None:
    client = await connect(settings)
    worker = build_worker(client, settings)
    logger.info("Worker polling", extra={"task_queue": settings.temporal_task_queue})
    await worker.run()


if __name__ == "__main__":
    _settings = ElicitationSettings()
    configure_logging(_settings.log_level)
    asyncio.run(run_worker(_settings))
