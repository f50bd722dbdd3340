from __future__ import annotations


class ElicitationError(Exception):
    """Base class for every error raised by the elicitation package."""


class SchemaValidationError(ElicitationError, ValueError):
    """The declared schema contains something other than primitive fields.

    Raised when the schema is built, before any user interaction happens.
    """


class CoercionError(ElicitationError, ValueError):
    """A raw answer could not be parsed as its field's declared kind."""

    def __init__(self, field: str, kind: str, raw: object) -> None:
        super().__init__(f"Field '{field}' expects {kind}, got {raw!r}")
        self.field = field
        self.kind = kind
        self.raw = raw


class ElicitationDataError(ElicitationError, ValueError):
    """Accepted data does not conform to the request schema."""

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []


class ElicitationTimeoutError(ElicitationError, TimeoutError):
    def __init__(self, request_id: str, timeout: float) -> None:
        super().__init__(f"Elicitation {request_id} timed out after {timeout:g}s")
        self.request_id = request_id
        self.timeout = timeout


class UnknownElicitationError(ElicitationError, KeyError):
    def __init__(self, request_id: str) -> None:
        super().__init__(request_id)
        self.request_id = request_id

    def __str__(self) -> str:
        return f"No pending elicitation with id '{self.request_id}'"


class ToolNotFoundError(ElicitationError, KeyError):
    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"Unknown tool: {self.name}"
