import logging
import os
import sys
from functools import partial
from pathlib import Path
from typing import Dict, Optional, Tuple

import click

from cirunner import __version__ as about
from cirunner.application.workflows import execute_plan
from cirunner.cli.config import setup_logging
from cirunner.cli.exit_codes import INTERRUPTED, SUCCESS, USER_ERROR
from cirunner.cli.presenter import CliPresenter
from cirunner.cli.validators import validate_command_overrides
from cirunner.config import (
    CONFIG_FILE_ENV,
    DEFAULT_CONFIG_FILE,
    load_env_file,
    load_flags,
    load_settings,
)
from cirunner.errors import ConfigError, RunInterrupted
from cirunner.runner.executor import run_command
from cirunner.runner.plan import build_plan

# Get a logger for this module.
log = logging.getLogger(__name__)

# Define an epilog message with examples.
EPILOG = f"""
Steps are enabled by environment variables that must equal the exact string
'true': FMT (make fmt), CHECK (make check, make clippy) and TEST (make test).
The lockfile check (git diff --exit-code Cargo.lock) always runs last.

Examples:

{click.style('• run formatting and tests, then verify the lockfile', fg="green")}

    $ FMT=true TEST=true cirunner

{click.style('• show which commands CHECK=true would run', fg="green")}

    $ CHECK=true cirunner --dry-run

{click.style('• use a different lint command and lockfile', fg="green")}

    $ CHECK=true cirunner --command "clippy=cargo clippy -- -D warnings" --lockfile Cargo.lock
"""


@click.command(
    help=about.__description__,
    epilog=EPILOG,
)
@click.version_option(
    about.__version__,
    prog_name=about.__title__,
    message="%(prog)s, version %(version)s\nCheck {url} for more info".format(url=about.__url__),
)
@click.option(
    "--lockfile", "-l",
    metavar="<path>",
    default=None,
    help="Lockfile verified against version control [default: Cargo.lock]",
)
@click.option(
    "--config",
    "config_file",
    type=click.Path(dir_okay=False),
    metavar="<file>",
    default=None,
    help=f"TOML config file [default: ./{DEFAULT_CONFIG_FILE}]",
)
@click.option(
    "--cwd",
    type=click.Path(exists=True, file_okay=False),
    metavar="<directory>",
    default=None,
    help="Directory the step commands run in",
    envvar="CIRUNNER_CWD",
)
@click.option(
    "--command", "-c",
    "commands",
    multiple=True,
    metavar="<step=command>",
    help="Override the command of one step (fmt, check, clippy, test, lockfile)",
    callback=validate_command_overrides,
)
@click.option(
    "--dry-run", "-n",
    is_flag=True,
    default=False,
    show_default=True,
    help="Print the planned commands without running them",
)
@click.option(
    "--json",
    "json_output",
    is_flag=True,
    default=False,
    help="Emit one machine-readable JSON object",
)
@click.option(
    "--quiet", "-q",
    is_flag=True,
    default=False,
    help="Only report failures",
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    default=False,
    help="Enable debug logging",
)
@click.pass_context
def main(
        ctx: click.Context,
        lockfile: Optional[str],
        config_file: Optional[str],
        cwd: Optional[str],
        commands: Dict[str, Tuple[str, ...]],
        dry_run: bool,
        json_output: bool,
        quiet: bool,
        verbose: bool,
):
    """
    Main entry point for the CI runner CLI.

    Loads the ``.env`` file of the working directory (or ``--cwd``), reads the
    gate flags from the environment, resolves the command configuration,
    then runs the enabled steps followed by the lockfile check. The process
    exits with the exit code of the first failing step.

    Parameters:
        ctx (click.Context): Click context.
        lockfile (Optional[str]): Lockfile path override.
        config_file (Optional[str]): Explicit TOML configuration file.
        cwd (Optional[str]): Working directory for step commands.
        commands (Dict[str, Tuple[str, ...]]): Per-step command overrides.
        dry_run (bool): Print the plan instead of running it.
        json_output (bool): Emit machine-readable output.
        quiet (bool): Suppress informational output.
        verbose (bool): Enable debug logging.
    """
    if verbose:
        level = logging.DEBUG
    elif quiet or json_output:
        level = logging.WARNING
    else:
        level = logging.INFO
    setup_logging(level=level, stream=sys.stderr)

    presenter = CliPresenter(json_output=json_output, quiet=quiet)
    presenter.emit_intro(about.__intro__)

    load_env_file(cwd)
    if config_file is None and cwd is not None and not os.environ.get(CONFIG_FILE_ENV):
        config_file = str(Path(cwd) / DEFAULT_CONFIG_FILE)

    flags = load_flags()
    try:
        settings = load_settings(
            config_file=config_file,
            overrides={"lockfile": lockfile, "commands": commands},
        )
    except ConfigError as exc:
        presenter.emit_error(str(exc), exit_code=USER_ERROR)
        ctx.exit(USER_ERROR)

    plan = build_plan(flags, settings)
    log.debug("Planned steps: %s", ", ".join(plan.step_names))

    if dry_run:
        presenter.emit_plan(plan, flags)
        ctx.exit(SUCCESS)

    # Keep stdout clean for the JSON payload.
    executor = partial(
        run_command,
        cwd=cwd,
        output_stream=sys.stderr if json_output else None,
    )
    try:
        summary = execute_plan(
            plan,
            executor=executor,
            on_step_start=presenter.emit_command,
        )
    except RunInterrupted as exc:
        presenter.emit_error(str(exc), exit_code=INTERRUPTED, summary=exc.summary)
        ctx.exit(INTERRUPTED)

    presenter.emit_run_summary(summary, flags)
    ctx.exit(summary.exit_code)


if __name__ == "__main__":
    main(prog_name=about.__title__)
