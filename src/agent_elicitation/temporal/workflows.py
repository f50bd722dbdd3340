"""Temporal workflow that waits durably for a human answer."""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from datetime import timedelta

from temporalio import workflow

with workflow.unsafe.imports_passed_through():
    from agent_elicitation.elicitation.errors import ElicitationError
    from agent_elicitation.elicitation.request import ElicitationRequest
    from agent_elicitation.elicitation.result import result_from_json, result_to_json

TIMEOUT_REASON = "timeout"
CANCELLED_REASON = "cancelled"


def normalize_response(
    request: Mapping[str, object], response: Mapping[str, object]
) -> dict[str, object]:
    """Validate a signalled answer against the request it answers.

    Returns the answer in wire form with accepted content coerced to the
    schema. Raises ElicitationError when the answer is malformed.
    """

    parsed = ElicitationRequest.from_json(request)
    result = result_from_json(response)
    out = result_to_json(result)
    if out["action"] == "accept":
        content = out["content"]
        assert isinstance(content, dict)
        out["content"] = parsed.schema.validate_data(content)
    return out


@workflow.defn
class HumanInputWorkflow:
    """Holds one elicitation request until it is answered, cancelled or times out.

    The workflow is the durable record of the request: a worker restart replays
    it and it keeps waiting. Answers arrive through the `respond` signal; the
    first valid one wins.
    """

    def __init__(self) -> None:
        self._request: dict[str, object] = {}
        self._response: dict[str, object] | None = None

    @workflow.run
    async def run(self, params: dict) -> dict:
        """Wait for the answer.

        Args:
            params: Dict with keys:
                - request: Serialized ElicitationRequest
                - timeout_seconds: How long to wait (0 or missing = forever)
        """
        self._request = dict(params.get("request") or {})
        timeout_seconds = float(params.get("timeout_seconds") or 0)
        timeout = timedelta(seconds=timeout_seconds) if timeout_seconds > 0 else None

        try:
            await workflow.wait_condition(lambda: self._response is not None, timeout=timeout)
        except asyncio.TimeoutError:
            workflow.logger.info("Human input timed out after %ss", timeout_seconds)
            return {"action": "cancel", "content": None, "reason": TIMEOUT_REASON}
        except asyncio.CancelledError:
            workflow.logger.info("Human input workflow cancelled")
            return {"action": "cancel", "content": None, "reason": CANCELLED_REASON}

        assert self._response is not None
        return self._response

    @workflow.signal
    def respond(self, response: dict) -> None:
        if self._response is not None:
            workflow.logger.info("Ignoring answer: request already resolved")
            return
        try:
            self._response = normalize_response(self._request, response)
        except ElicitationError as e:
            workflow.logger.warning("Ignoring malformed answer: %s", e)

    @workflow.query
    def get_request(self) -> dict:
        return self._request

    @workflow.query
    def is_resolved(self) -> bool:
        return self._response is not None


__all__ = ["HumanInputWorkflow", "normalize_response"]
