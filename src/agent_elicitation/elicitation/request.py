from __future__ import annotations

import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Protocol

from .errors import ElicitationDataError
from .result import ElicitationResult
from .schema import ElicitationSchema


@dataclass(frozen=True, slots=True)
class ElicitationRequest:
    """A question a tool asks the user, against a declared schema.

    Requests live only until they are resolved; the core never stores them.
    """

    message: str
    schema: ElicitationSchema
    source: str = ""
    request_id: str = field(default_factory=lambda: uuid.uuid4().hex)

    def to_json(self) -> dict[str, object]:
        return {
            "request_id": self.request_id,
            "source": self.source,
            "message": self.message,
            "requested_schema": self.schema.to_json_schema(),
        }

    @staticmethod
    def from_json(obj: Mapping[str, object]) -> ElicitationRequest:
        message = obj.get("message")
        schema_raw = obj.get("requested_schema")
        if not isinstance(message, str):
            raise ElicitationDataError("Elicitation request is missing 'message'")
        if not isinstance(schema_raw, Mapping):
            raise ElicitationDataError("Elicitation request is missing 'requested_schema'")
        source = obj.get("source")
        request_id = obj.get("request_id")
        return ElicitationRequest(
            message=message,
            schema=ElicitationSchema.from_json_schema(schema_raw),
            source=source if isinstance(source, str) else "",
            request_id=request_id if isinstance(request_id, str) else uuid.uuid4().hex,
        )


class ElicitationCallback(Protocol):
    """Presents a request to a human and collects the answer.

    Supplied once by the hosting application. Implementations must be safe
    to call concurrently and must always return one of the three results.
    """

    async def __call__(
        self, source: str, message: str, schema: ElicitationSchema
    ) -> ElicitationResult: ...
