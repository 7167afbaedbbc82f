"""Tests for the shared settings and runner singletons."""

import pytest

from ping_runner.config import Settings
from ping_runner.services import ProcessRunner, get_runner, get_settings, reset_state, set_settings


def test_settings_loaded_once(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PING_RUNNER_COUNT", "7")

    first = get_settings()
    monkeypatch.setenv("PING_RUNNER_COUNT", "9")

    assert get_settings() is first
    assert first.count == 7


def test_runner_uses_shared_settings() -> None:
    settings = Settings(command="/opt/bin/ping")
    set_settings(settings)

    runner = get_runner()

    assert isinstance(runner, ProcessRunner)
    assert runner is get_runner()
    assert runner.settings is settings
    assert runner.command == "/opt/bin/ping"


def test_reset_closes_runner() -> None:
    set_settings(Settings())
    runner = get_runner()

    reset_state()

    assert get_runner() is not runner
    with pytest.raises(RuntimeError):
        runner.run_task_async(["-c", "1", "localhost"])
