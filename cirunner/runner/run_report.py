"""Run-level step reporting helpers."""

from __future__ import annotations

from dataclasses import dataclass, field

from cirunner.domain.steps import RunPlan, RunSummary, Step, StepResult


@dataclass(slots=True)
class RunReport:
    """Accumulate step results and expose immutable run summaries."""

    plan: RunPlan
    results: list[StepResult] = field(default_factory=list)

    def mark_finished(self, step: Step, exit_code: int) -> StepResult:
        """Record the exit status of ``step`` and return the stored result."""
        result = StepResult(step=step, exit_code=exit_code)
        self.results.append(result)
        return result

    @property
    def remaining(self) -> tuple[Step, ...]:
        """Return planned steps that have not produced a result yet."""
        return self.plan.steps[len(self.results):]

    def as_summary(self) -> RunSummary:
        """Build immutable summary payload for CLI and workflow boundaries."""
        return RunSummary(results=tuple(self.results), skipped=self.remaining)
