"""Launch external commands and report their exit status."""

from __future__ import annotations

import logging
import os
import subprocess
from typing import Protocol, Sequence, TextIO

log = logging.getLogger(__name__)

# Shell conventions for commands that never started.
COMMAND_NOT_EXECUTABLE = 126
COMMAND_NOT_FOUND = 127


class CommandExecutor(Protocol):
    """Callable that runs one command to completion and returns its exit code."""

    def __call__(self, command: Sequence[str]) -> int:
        ...


def run_command(
    command: Sequence[str],
    *,
    cwd: str | os.PathLike[str] | None = None,
    output_stream: TextIO | None = None,
) -> int:
    """
    Run ``command`` and block until it exits.

    The child inherits stdio unless ``output_stream`` is given; then its stdout
    is captured and copied to ``output_stream`` once it exits, keeping the
    runner's own stdout free for machine-readable output.

    Returns:
        int: The child's exit code, 128 + N when it was killed by signal N,
        127 when the executable is missing or 126 when it cannot be executed.
    """
    log.debug("Launching %s (cwd=%s)", list(command), cwd)
    try:
        completed = subprocess.run(
            list(command),
            cwd=cwd,
            check=False,
            stdout=subprocess.PIPE if output_stream is not None else None,
        )
    except FileNotFoundError:
        log.error("Command not found: %s", command[0])
        return COMMAND_NOT_FOUND
    except PermissionError:
        log.error("Command not executable: %s", command[0])
        return COMMAND_NOT_EXECUTABLE
    if output_stream is not None and completed.stdout:
        output_stream.write(completed.stdout.decode(errors="replace"))
        output_stream.flush()
    if completed.returncode < 0:
        # Killed by a signal; report it the way a shell would.
        return 128 - completed.returncode
    return completed.returncode
