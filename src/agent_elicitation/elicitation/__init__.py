"""Elicitation: pausing a tool to ask a human for structured input.

This package introduces first-class types for:
- Primitive-only schemas (text, integer, decimal, boolean)
- The three-way result (accepted / declined / cancelled)
- The requester that suspends a tool until one result is produced
- The pluggable callback, with a console reference implementation
"""

from .console import ConsoleElicitationCallback
from .errors import (
    CoercionError,
    ElicitationDataError,
    ElicitationError,
    ElicitationTimeoutError,
    SchemaValidationError,
    ToolNotFoundError,
    UnknownElicitationError,
)
from .request import ElicitationCallback, ElicitationRequest
from .requester import Elicitor
from .result import (
    Accepted,
    Cancelled,
    Declined,
    ElicitationResult,
    result_from_json,
    result_to_json,
)
from .schema import ElicitationSchema, FieldKind, SchemaField

__all__ = [
    "Accepted",
    "Cancelled",
    "CoercionError",
    "ConsoleElicitationCallback",
    "Declined",
    "ElicitationCallback",
    "ElicitationDataError",
    "ElicitationError",
    "ElicitationRequest",
    "ElicitationResult",
    "ElicitationSchema",
    "ElicitationTimeoutError",
    "Elicitor",
    "FieldKind",
    "SchemaField",
    "SchemaValidationError",
    "ToolNotFoundError",
    "UnknownElicitationError",
    "result_from_json",
    "result_to_json",
]
