"""Shared fixtures isolating tests from the caller's CI environment."""

from __future__ import annotations

from pathlib import Path

import pytest

from cirunner.config import CONFIG_FILE_ENV, LOCKFILE_ENV, command_env_var
from cirunner.domain.steps import FLAG_NAMES, STEP_NAMES


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Clear gate flags and runner variables and run each test in ``tmp_path``."""
    names = [*FLAG_NAMES, CONFIG_FILE_ENV, LOCKFILE_ENV, "CIRUNNER_CWD"]
    names.extend(command_env_var(step) for step in STEP_NAMES)
    for name in names:
        # Recorded by monkeypatch, so values loaded from .env files are undone too.
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
    return tmp_path


class RecordingExecutor:
    """Executor test double returning scripted exit codes per step command."""

    def __init__(self, exit_codes: dict[tuple[str, ...], int] | None = None) -> None:
        self.exit_codes = exit_codes or {}
        self.calls: list[tuple[str, ...]] = []

    def __call__(self, command, **kwargs) -> int:
        self.calls.append(tuple(command))
        return self.exit_codes.get(tuple(command), 0)


@pytest.fixture
def recording_executor() -> RecordingExecutor:
    """Return an executor that records commands and succeeds by default."""
    return RecordingExecutor()
