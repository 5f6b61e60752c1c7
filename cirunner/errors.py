"""Domain-specific exceptions raised by cirunner runtime components."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from cirunner.domain.steps import RunSummary, Step


class CIRunnerError(Exception):
    """Base exception for cirunner-specific runtime failures."""


class ConfigError(CIRunnerError):
    """Raised when runner configuration is malformed or references unknown steps."""


class StepFailedError(CIRunnerError):
    """Raised when an external command exits with a non-zero status."""

    def __init__(self, step: Step, exit_code: int) -> None:
        """Store the failing step and its reported exit status."""
        super().__init__(f"Step '{step.name}' failed with exit code {exit_code}.")
        self.step = step
        self.exit_code = exit_code


class RunInterrupted(CIRunnerError):
    """Raised when the user interrupts a run while a step is executing."""

    def __init__(self, summary: RunSummary) -> None:
        """Store the partial summary produced before the interruption."""
        super().__init__("Run interrupted by user.")
        self.summary = summary
