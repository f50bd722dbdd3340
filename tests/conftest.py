"""Test configuration and fixtures."""

from __future__ import annotations

import io
from collections.abc import Callable, Iterable

import pytest

from agent_elicitation.config import ElicitationSettings
from agent_elicitation.elicitation.console import ConsoleElicitationCallback
from agent_elicitation.elicitation.schema import ElicitationSchema

BOOKING_MESSAGE = "Confirm booking for 2 people on June 21st at 5pm?"

_ENV_VARS = (
    "LOG_LEVEL",
    "ELICITATION_TIMEOUT_SECONDS",
    "ELICITATION_TIMEOUT_POLICY",
    "ELICITATION_MAX_ATTEMPTS",
    "ELICITATION_ON_EXHAUSTED",
    "TEMPORAL_ADDRESS",
    "TEMPORAL_NAMESPACE",
    "TEMPORAL_TASK_QUEUE",
    "ELICITATION_WORKFLOW_TIMEOUT_SECONDS",
    "ELICITATION_SERVER_HOST",
    "ELICITATION_SERVER_PORT",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """Keep the developer's environment and .env out of the tests."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def booking_schema() -> ElicitationSchema:
    """The booking confirmation schema from the docs."""
    return ElicitationSchema.from_mapping({"confirm": "boolean", "notes": ("text", "")})


@pytest.fixture
def settings() -> ElicitationSettings:
    return ElicitationSettings(_env_file=None)


class ScriptedInput:
    """Stands in for `input()`: replays answers, then behaves like end of input."""

    def __init__(self, answers: Iterable[str]) -> None:
        self.answers = list(answers)
        self.prompts: list[str] = []

    def __call__(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self.answers:
            raise EOFError
        return self.answers.pop(0)


@pytest.fixture
def console() -> Callable[..., tuple[ConsoleElicitationCallback, ScriptedInput, io.StringIO]]:
    """Factory for a console callback fed with scripted answers."""

    def make(
        *answers: str, **kwargs: object
    ) -> tuple[ConsoleElicitationCallback, ScriptedInput, io.StringIO]:
        scripted = ScriptedInput(answers)
        output = io.StringIO()
        callback = ConsoleElicitationCallback(input_func=scripted, output=output, **kwargs)
        return callback, scripted, output

    return make
