"""Tests for external command execution."""

from __future__ import annotations

import io
import subprocess
import sys
from pathlib import Path
from typing import Any

import pytest

from cirunner.runner import executor


def test_run_command_returns_child_exit_code() -> None:
    """Verify the child's exit status is returned unchanged."""
    assert executor.run_command([sys.executable, "-c", "import sys; sys.exit(3)"]) == 3


def test_run_command_returns_zero_on_success() -> None:
    assert executor.run_command([sys.executable, "-c", "pass"]) == 0


def test_run_command_runs_in_requested_directory(tmp_path: Path) -> None:
    """Verify ``cwd`` is forwarded to the child process."""
    work_dir = tmp_path / "work"
    work_dir.mkdir()
    script = "import os, sys; sys.exit(0 if os.path.basename(os.getcwd()) == 'work' else 1)"

    assert executor.run_command([sys.executable, "-c", script], cwd=work_dir) == 0


def test_run_command_missing_executable_reports_not_found() -> None:
    """Verify a missing executable maps to the shell's 127."""
    exit_code = executor.run_command(["cirunner-definitely-missing-binary"])

    assert exit_code == executor.COMMAND_NOT_FOUND == 127


def test_run_command_permission_error_reports_not_executable(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Verify a non-executable command maps to the shell's 126."""

    def _raise(*args: Any, **kwargs: Any) -> None:
        raise PermissionError("denied")

    monkeypatch.setattr(subprocess, "run", _raise)

    assert executor.run_command(["./not-executable"]) == executor.COMMAND_NOT_EXECUTABLE == 126


def test_run_command_maps_signal_termination(monkeypatch: pytest.MonkeyPatch) -> None:
    """Verify a child killed by signal N reports 128 + N."""
    monkeypatch.setattr(
        subprocess,
        "run",
        lambda *args, **kwargs: subprocess.CompletedProcess(args=args, returncode=-9),
    )

    assert executor.run_command(["make", "test"]) == 137


def test_run_command_copies_stdout_to_output_stream(capfd: pytest.CaptureFixture[str]) -> None:
    """Verify captured child stdout goes to the given stream, not to fd 1."""
    output = io.StringIO()

    exit_code = executor.run_command(
        [sys.executable, "-c", "print('child output')"],
        output_stream=output,
    )

    assert exit_code == 0
    assert output.getvalue().splitlines() == ["child output"]
    assert capfd.readouterr().out == ""
