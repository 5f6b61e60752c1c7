"""Application-layer workflows decoupled from CLI parsing details."""

from __future__ import annotations

import logging
from typing import Callable

from cirunner.config import RunnerSettings
from cirunner.domain.steps import CIFlags, RunPlan, RunSummary, Step
from cirunner.errors import RunInterrupted, StepFailedError
from cirunner.runner.executor import CommandExecutor, run_command
from cirunner.runner.plan import build_plan
from cirunner.runner.run_report import RunReport

log = logging.getLogger(__name__)

StepCallback = Callable[[Step], None]


def execute_plan(
    plan: RunPlan,
    *,
    executor: CommandExecutor = run_command,
    on_step_start: StepCallback | None = None,
) -> RunSummary:
    """
    Run ``plan`` step by step, stopping at the first non-zero exit code.

    ``on_step_start`` is invoked with each step right before its command is
    launched. Steps after a failure are reported as skipped.

    Raises:
        RunInterrupted: When the user interrupts a running step.
    """
    report = RunReport(plan=plan)
    for step in plan.steps:
        if on_step_start is not None:
            on_step_start(step)
        log.info("Running step %s: %s", step.name, step.display)
        try:
            exit_code = executor(step.command)
        except KeyboardInterrupt as exc:
            log.warning("Interrupted during step %s", step.name)
            raise RunInterrupted(report.as_summary()) from exc
        report.mark_finished(step, exit_code)
        if exit_code != 0:
            log.error("Step %s failed with exit code %d", step.name, exit_code)
            break
    summary = report.as_summary()
    if summary.skipped:
        log.info("Skipped steps: %s", ", ".join(step.name for step in summary.skipped))
    return summary


def run_gate(
    flags: CIFlags,
    settings: RunnerSettings | None = None,
    *,
    executor: CommandExecutor = run_command,
    on_step_start: StepCallback | None = None,
) -> RunSummary:
    """
    Build and execute the plan for ``flags``; raise on the first failing step.

    Raises:
        StepFailedError: Carrying the failing step and its exit code.
    """
    summary = execute_plan(
        build_plan(flags, settings),
        executor=executor,
        on_step_start=on_step_start,
    )
    failed = summary.failed_result
    if failed is not None:
        raise StepFailedError(failed.step, failed.exit_code)
    return summary


def summarize_run(summary: RunSummary) -> str:
    """Return a one-line human-readable outcome for ``summary``."""
    failed = summary.failed_result
    if failed is not None:
        return f"Step '{failed.step.name}' failed with exit code {failed.exit_code}."
    return f"All {len(summary.results)} step(s) passed."


def format_plan(plan: RunPlan) -> list[str]:
    """Return one ``name: command`` line per planned step."""
    return [f"{step.name}: {step.display}" for step in plan.steps]
