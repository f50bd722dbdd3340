"""Pydantic models for the REST server."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field


class ApiElicitation(BaseModel):
    request_id: str
    source: str
    message: str
    requested_schema: dict[str, Any]
    created_at: str


class AcceptRequest(BaseModel):
    content: dict[str, Any] = Field(default_factory=dict)


class ApiResolution(BaseModel):
    request_id: str
    action: Literal["accept", "decline", "cancel"]
    content: dict[str, Any] | None = None


class ToolRunRequest(BaseModel):
    arguments: dict[str, Any] = Field(default_factory=dict)


class ApiToolRun(BaseModel):
    run_id: str
    tool: str
    status: Literal["running", "succeeded", "failed"]
    created_at: str
    updated_at: str

    result: Any = None
    error: str | None = None
