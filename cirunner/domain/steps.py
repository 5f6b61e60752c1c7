"""Immutable step and run models shared between CLI and application layers."""

from __future__ import annotations

import shlex
from dataclasses import dataclass
from typing import Literal

StepName = Literal["fmt", "check", "clippy", "test", "lockfile"]
FlagName = Literal["FMT", "CHECK", "TEST"]

STEP_NAMES: tuple[StepName, ...] = ("fmt", "check", "clippy", "test", "lockfile")
FLAG_NAMES: tuple[FlagName, ...] = ("FMT", "CHECK", "TEST")
ENABLED_VALUE = "true"


@dataclass(frozen=True, slots=True)
class CIFlags:
    """Gate flags read once from the process environment."""

    fmt: bool = False
    check: bool = False
    test: bool = False

    def is_enabled(self, flag: FlagName) -> bool:
        """Return whether the named gate flag is enabled."""
        return {"FMT": self.fmt, "CHECK": self.check, "TEST": self.test}[flag]


@dataclass(frozen=True, slots=True)
class Step:
    """One external command invocation, optionally gated by a flag."""

    name: StepName
    command: tuple[str, ...]
    gate: FlagName | None = None

    @property
    def display(self) -> str:
        """Return the shell-quoted command line echoed before execution."""
        return shlex.join(self.command)


@dataclass(frozen=True, slots=True)
class RunPlan:
    """Ordered steps selected for one run."""

    steps: tuple[Step, ...]

    @property
    def step_names(self) -> tuple[str, ...]:
        """Return step names in execution order."""
        return tuple(step.name for step in self.steps)


@dataclass(frozen=True, slots=True)
class StepResult:
    """Exit status reported by one executed step."""

    step: Step
    exit_code: int

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0


@dataclass(frozen=True, slots=True)
class RunSummary:
    """Outcome of one run: executed steps in order plus planned steps never reached."""

    results: tuple[StepResult, ...]
    skipped: tuple[Step, ...] = ()

    @property
    def failed_result(self) -> StepResult | None:
        """Return the first failing result, if any."""
        for result in self.results:
            if not result.succeeded:
                return result
        return None

    @property
    def failed_step(self) -> Step | None:
        failed = self.failed_result
        return failed.step if failed is not None else None

    @property
    def exit_code(self) -> int:
        """Return the first non-zero exit code, or 0 when every executed step passed."""
        failed = self.failed_result
        return failed.exit_code if failed is not None else 0

    @property
    def succeeded(self) -> bool:
        return self.failed_result is None and not self.skipped

    def as_payload(self) -> dict[str, object]:
        """Build a JSON-serializable view of the run."""
        return {
            "steps": [
                {
                    "name": result.step.name,
                    "command": result.step.display,
                    "exit_code": result.exit_code,
                }
                for result in self.results
            ],
            "skipped": [step.name for step in self.skipped],
        }
