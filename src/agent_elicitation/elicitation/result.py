"""The three possible outcomes of an elicitation.

Tools branch on the variant with ``match``::

    match result:
        case Accepted(data=data):
            ...
        case Declined():
            ...
        case Cancelled():
            ...
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, ClassVar, Generic, Literal, TypeVar

from pydantic import BaseModel

from .errors import ElicitationDataError

T = TypeVar("T")

Action = Literal["accept", "decline", "cancel"]


@dataclass(frozen=True)
class Accepted(Generic[T]):
    data: T
    action: ClassVar[Action] = "accept"


@dataclass(frozen=True, slots=True)
class Declined:
    action: ClassVar[Action] = "decline"


@dataclass(frozen=True, slots=True)
class Cancelled:
    action: ClassVar[Action] = "cancel"


ElicitationResult = Accepted[Any] | Declined | Cancelled


def result_to_json(result: ElicitationResult) -> dict[str, object]:
    """Serialise a result as ``{"action": ..., "content": ...}``."""

    if isinstance(result, Accepted):
        data = result.data
        if isinstance(data, BaseModel):
            content: object = data.model_dump(mode="json")
        else:
            content = dict(data)
        return {"action": "accept", "content": content}
    if isinstance(result, Declined):
        return {"action": "decline", "content": None}
    if isinstance(result, Cancelled):
        return {"action": "cancel", "content": None}
    raise TypeError(f"Not an elicitation result: {result!r}")


def result_from_json(obj: Mapping[str, object]) -> ElicitationResult:
    """Inverse of :func:`result_to_json`.

    Content is returned as a plain dict; validating it against a schema is
    the requester's job.
    """

    action = obj.get("action")
    if action == "accept":
        content = obj.get("content")
        if content is None:
            content = {}
        if not isinstance(content, Mapping):
            raise ElicitationDataError("Accepted content must be an object")
        return Accepted(data=dict(content))
    if action == "decline":
        return Declined()
    if action == "cancel":
        return Cancelled()
    raise ElicitationDataError(f"Unknown elicitation action: {action!r}")
