from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from agent_elicitation.config import ElicitationSettings


def test_defaults(settings: ElicitationSettings) -> None:
    assert settings.log_level == "INFO"
    assert settings.timeout is None
    assert settings.timeout_policy == "cancel"
    assert settings.max_attempts == 3
    assert settings.on_exhausted == "decline"
    assert settings.temporal_address == "localhost:7233"
    assert settings.temporal_task_queue == "elicitation"
    assert settings.server_port == 8765


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ELICITATION_TIMEOUT_SECONDS", "30")
    monkeypatch.setenv("ELICITATION_TIMEOUT_POLICY", "raise")
    monkeypatch.setenv("ELICITATION_ON_EXHAUSTED", "cancel")
    monkeypatch.setenv("TEMPORAL_TASK_QUEUE", "humans")

    settings = ElicitationSettings(_env_file=None)

    assert settings.timeout == 30.0
    assert settings.timeout_policy == "raise"
    assert settings.on_exhausted == "cancel"
    assert settings.temporal_task_queue == "humans"


def test_env_file_is_read(tmp_path: Path) -> None:
    env_file = tmp_path / "custom.env"
    env_file.write_text("ELICITATION_MAX_ATTEMPTS=5\nLOG_LEVEL=DEBUG\n", encoding="utf-8")

    settings = ElicitationSettings(_env_file=env_file)

    assert settings.max_attempts == 5
    assert settings.log_level == "DEBUG"


@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("ELICITATION_TIMEOUT_POLICY", "explode"),
        ("ELICITATION_ON_EXHAUSTED", "accept"),
        ("ELICITATION_MAX_ATTEMPTS", "0"),
        ("ELICITATION_TIMEOUT_SECONDS", "-1"),
    ],
)
def test_invalid_values_are_rejected(monkeypatch: pytest.MonkeyPatch, name: str, value: str) -> None:
    monkeypatch.setenv(name, value)

    with pytest.raises(ValidationError):
        ElicitationSettings(_env_file=None)


def test_dotenv_in_working_directory_is_picked_up(tmp_path: Path) -> None:
    # clean_env has already chdir'd into tmp_path.
    (tmp_path / ".env").write_text("ELICITATION_ON_EXHAUSTED=cancel\n", encoding="utf-8")

    assert ElicitationSettings().on_exhausted == "cancel"
