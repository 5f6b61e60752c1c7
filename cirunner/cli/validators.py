import shlex

import click

from cirunner.domain.steps import STEP_NAMES


def validate_command_overrides(ctx: click.Context, param, value):
    """
    Validate ``--command STEP=COMMAND`` options and collect them into a mapping.

    Each value must name a known step and a non-empty command line; the command
    is split with shell quoting rules. A later option for the same step wins.

    Parameters:
        ctx (click.Context): The Click context.
        param: The parameter definition.
        value: The list of ``STEP=COMMAND`` strings provided.

    Returns:
        dict[str, tuple[str, ...]]: Command lines keyed by step name.
    """
    overrides = {}
    for item in value or ():
        step, separator, command = item.partition("=")
        step = step.strip()
        if not separator:
            raise click.BadParameter(f"Expected STEP=COMMAND, got: {item}")
        if step not in STEP_NAMES:
            choices = ", ".join(STEP_NAMES)
            raise click.BadParameter(f"Unknown step '{step}' (choose from {choices})")
        try:
            parts = tuple(shlex.split(command))
        except ValueError as exc:
            raise click.BadParameter(f"Invalid command for step '{step}': {exc}")
        if not parts:
            raise click.BadParameter(f"Empty command for step '{step}'")
        overrides[step] = parts
    return overrides
