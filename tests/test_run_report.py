"""Tests for run-level step reporting."""

from __future__ import annotations

from cirunner.domain.steps import CIFlags
from cirunner.runner.plan import build_plan
from cirunner.runner.run_report import RunReport


def test_report_tracks_remaining_steps() -> None:
    """Verify steps without results are reported as skipped."""
    plan = build_plan(CIFlags(fmt=True, test=True))
    report = RunReport(plan=plan)

    report.mark_finished(plan.steps[0], 2)
    summary = report.as_summary()

    assert [result.step.name for result in summary.results] == ["fmt"]
    assert [step.name for step in summary.skipped] == ["test", "lockfile"]
    assert summary.exit_code == 2


def test_report_complete_run_has_no_skipped_steps() -> None:
    plan = build_plan(CIFlags())
    report = RunReport(plan=plan)

    result = report.mark_finished(plan.steps[0], 0)

    assert result.succeeded
    assert report.as_summary().skipped == ()
