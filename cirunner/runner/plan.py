"""Selection of the ordered, flag-gated steps for one run."""

from __future__ import annotations

import logging

from cirunner.config import RunnerSettings
from cirunner.domain.steps import CIFlags, FlagName, RunPlan, Step, StepName

log = logging.getLogger(__name__)

# Fixed execution order; ``None`` marks the unconditional final check.
STEP_GATES: tuple[tuple[StepName, FlagName | None], ...] = (
    ("fmt", "FMT"),
    ("check", "CHECK"),
    ("clippy", "CHECK"),
    ("test", "TEST"),
    ("lockfile", None),
)


def build_plan(flags: CIFlags, settings: RunnerSettings | None = None) -> RunPlan:
    """
    Build the ordered list of steps enabled by ``flags``.

    Gated steps are included only when their flag is enabled; the lockfile
    check is always the last step.

    Parameters:
        flags (CIFlags): Parsed gate flags.
        settings (RunnerSettings, optional): Command and lockfile configuration.

    Returns:
        RunPlan: Steps in execution order.
    """
    settings = settings or RunnerSettings()
    steps: list[Step] = []
    for name, gate in STEP_GATES:
        if gate is not None and not flags.is_enabled(gate):
            log.debug("Skipping %s: %s is not 'true'", name, gate)
            continue
        steps.append(Step(name=name, command=settings.command_for(name), gate=gate))
    return RunPlan(steps=tuple(steps))
