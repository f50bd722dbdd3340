"""Configuration for elicitation hosts.

Configuration is loaded from:
- environment variables
- and a local `.env` file (if present)

Nothing here is required: an application that only uses the console callback
runs with the defaults. The Temporal and server sections are read only by the
commands that need them.
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ElicitationSettings(BaseSettings):
    """Settings for elicitation hosts.

    Environment variables:
    - LOG_LEVEL                              (optional)
    - ELICITATION_TIMEOUT_SECONDS            (optional, 0 = wait forever)
    - ELICITATION_TIMEOUT_POLICY             (optional, cancel | raise)
    - ELICITATION_MAX_ATTEMPTS               (optional)
    - ELICITATION_ON_EXHAUSTED               (optional, decline | cancel)
    - TEMPORAL_ADDRESS / TEMPORAL_NAMESPACE / TEMPORAL_TASK_QUEUE
    - ELICITATION_WORKFLOW_TIMEOUT_SECONDS   (optional)
    - ELICITATION_SERVER_HOST / ELICITATION_SERVER_PORT

    Notes:
        Pydantic-settings supports overriding the env file in tests via:
        `ElicitationSettings(_env_file=path_to_env)`.
    """

    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Root logging level",
    )

    timeout_seconds: float = Field(
        default=0.0,
        ge=0.0,
        validation_alias="ELICITATION_TIMEOUT_SECONDS",
        description="How long a tool waits for an answer. 0 disables the timeout.",
    )
    timeout_policy: Literal["cancel", "raise"] = Field(
        default="cancel",
        validation_alias="ELICITATION_TIMEOUT_POLICY",
        description=(
            "What an expired wait resolves to: 'cancel' returns Cancelled, "
            "'raise' raises ElicitationTimeoutError in the tool."
        ),
    )
    max_attempts: int = Field(
        default=3,
        ge=1,
        le=20,
        validation_alias="ELICITATION_MAX_ATTEMPTS",
        description="Console re-prompts allowed per field before giving up",
    )
    on_exhausted: Literal["decline", "cancel"] = Field(
        default="decline",
        validation_alias="ELICITATION_ON_EXHAUSTED",
        description="Result used when the console retry budget runs out",
    )

    temporal_address: str = Field(
        default="localhost:7233",
        validation_alias="TEMPORAL_ADDRESS",
        description="Temporal frontend address",
    )
    temporal_namespace: str = Field(
        default="default",
        validation_alias="TEMPORAL_NAMESPACE",
    )
    temporal_task_queue: str = Field(
        default="elicitation",
        validation_alias="TEMPORAL_TASK_QUEUE",
        description="Task queue the human-input workflow worker polls",
    )
    workflow_timeout_seconds: float = Field(
        default=3600.0,
        ge=0.0,
        validation_alias="ELICITATION_WORKFLOW_TIMEOUT_SECONDS",
        description="How long a durable human-input workflow waits for a signal (0 = forever)",
    )

    server_host: str = Field(default="127.0.0.1", validation_alias="ELICITATION_SERVER_HOST")
    server_port: int = Field(
        default=8765, ge=1, le=65535, validation_alias="ELICITATION_SERVER_PORT"
    )

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        extra="ignore",
    )

    @property
    def timeout(self) -> float | None:
        """Timeout for the requester, or None when disabled."""

        return self.timeout_seconds or None
