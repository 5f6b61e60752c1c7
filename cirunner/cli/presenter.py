"""CLI presentation helpers for human and JSON output modes."""

from __future__ import annotations

import json
from typing import Any, Iterable, Mapping

import click

from cirunner.application import workflows
from cirunner.domain.steps import CIFlags, RunPlan, RunSummary, Step


class CliPresenter:
    """Render command outputs for human and machine-readable modes."""

    def __init__(self, *, json_output: bool, quiet: bool) -> None:
        """Store output-mode flags for rendering decisions."""
        self.json_output = json_output
        self.quiet = quiet

    @property
    def emits_human_output(self) -> bool:
        """Return whether human-readable output should be emitted."""
        return not self.json_output and not self.quiet

    def emit_intro(self, intro: str) -> None:
        """Emit a styled intro banner when human output is enabled."""
        if self.emits_human_output:
            click.echo(click.style(intro, fg="blue"))

    def emit_notice(self, message: str) -> None:
        """Emit one human-readable informational message."""
        if self.emits_human_output:
            click.echo(message)

    def emit_notices(self, messages: Iterable[str]) -> None:
        """Emit multiple human-readable informational messages."""
        for message in messages:
            self.emit_notice(message)

    def emit_command(self, step: Step) -> None:
        """Echo one command line right before it is launched."""
        if self.emits_human_output:
            click.echo(click.style(f"+ {step.display}", bold=True))

    def emit_plan(self, plan: RunPlan, flags: CIFlags) -> None:
        """Emit the planned steps without running them."""
        if self.json_output:
            self.emit_json(
                {
                    "status": "ok",
                    "mode": "dry_run",
                    "exit_code": 0,
                    "flags": _flags_payload(flags),
                    "plan": [
                        {"name": step.name, "command": step.display, "gate": step.gate}
                        for step in plan.steps
                    ],
                }
            )
            return
        self.emit_notices(workflows.format_plan(plan))

    def emit_run_summary(self, summary: RunSummary, flags: CIFlags) -> None:
        """Emit the outcome of a finished run in current render mode."""
        if self.json_output:
            payload: dict[str, Any] = {
                "status": "ok" if summary.succeeded else "error",
                "mode": "run",
                "exit_code": summary.exit_code,
                "flags": _flags_payload(flags),
                **summary.as_payload(),
            }
            if summary.failed_result is not None:
                payload["message"] = workflows.summarize_run(summary)
            self.emit_json(payload)
            return

        if summary.failed_result is not None:
            click.echo(workflows.summarize_run(summary), err=True)
            if summary.skipped and not self.quiet:
                skipped = " ".join(step.name for step in summary.skipped)
                click.echo(f"Skipped steps: {skipped}", err=True)
            return
        self.emit_notice(workflows.summarize_run(summary))

    def emit_error(
        self,
        message: str,
        *,
        exit_code: int,
        summary: RunSummary | None = None,
    ) -> None:
        """Emit one runner-level error in current render mode."""
        if self.json_output:
            payload: dict[str, Any] = {
                "status": "error",
                "exit_code": exit_code,
                "message": message,
            }
            if summary is not None:
                payload.update(summary.as_payload())
            self.emit_json(payload)
            return
        click.echo(f"Error: {message}", err=True)

    def emit_json(self, payload: Mapping[str, Any]) -> None:
        """Emit one machine-readable JSON object to stdout."""
        click.echo(json.dumps(payload, sort_keys=True))


def _flags_payload(flags: CIFlags) -> dict[str, bool]:
    return {"FMT": flags.fmt, "CHECK": flags.check, "TEST": flags.test}
