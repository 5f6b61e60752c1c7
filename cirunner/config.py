"""Environment- and file-backed runner configuration."""

from __future__ import annotations

import os
import shlex
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

from dotenv import dotenv_values

from cirunner.domain.steps import (
    ENABLED_VALUE,
    STEP_NAMES,
    CIFlags,
    StepName,
)
from cirunner.errors import ConfigError

ENV_FILE = ".env"
CONFIG_FILE_ENV = "CIRUNNER_CONFIG_FILE"
DEFAULT_CONFIG_FILE = ".cirunner.toml"
LOCKFILE_ENV = "CIRUNNER_LOCKFILE"
DEFAULT_LOCKFILE = "Cargo.lock"

DEFAULT_COMMANDS: dict[StepName, tuple[str, ...]] = {
    "fmt": ("make", "fmt"),
    "check": ("make", "check"),
    "clippy": ("make", "clippy"),
    "test": ("make", "test"),
}


def lockfile_command(lockfile: str) -> tuple[str, ...]:
    """Return the command that fails when ``lockfile`` differs from the committed version."""
    return ("git", "diff", "--exit-code", lockfile)


def command_env_var(step: str) -> str:
    """Return the environment variable that overrides the command for ``step``."""
    return f"CIRUNNER_{step.upper()}_CMD"


def load_env_file(
    directory: str | os.PathLike[str] | None = None,
    *,
    environ: dict[str, str] | None = None,
) -> dict[str, str]:
    """
    Load ``.env`` from ``directory`` (the working directory by default) into ``environ``.

    Only that exact file is read; parent directories are never searched.
    Variables that are already set keep their values.

    Returns:
        dict[str, str]: The variables that were added.
    """
    env = os.environ if environ is None else environ
    path = (Path.cwd() if directory is None else Path(directory)) / ENV_FILE
    if not path.is_file():
        return {}
    loaded: dict[str, str] = {}
    for key, value in dotenv_values(path).items():
        if value is None or key in env:
            continue
        env[key] = value
        loaded[key] = value
    return loaded


def parse_flag(value: str | None) -> bool:
    """Return ``True`` only for the exact string ``"true"``; anything else is disabled."""
    return value == ENABLED_VALUE


def load_flags(environ: Mapping[str, str] | None = None) -> CIFlags:
    """Read the ``FMT``, ``CHECK`` and ``TEST`` gate flags from ``environ``."""
    env = os.environ if environ is None else environ
    return CIFlags(
        fmt=parse_flag(env.get("FMT")),
        check=parse_flag(env.get("CHECK")),
        test=parse_flag(env.get("TEST")),
    )


@dataclass(frozen=True, slots=True)
class RunnerSettings:
    """Resolved lockfile path and per-step command lines."""

    lockfile: str = DEFAULT_LOCKFILE
    commands: Mapping[str, tuple[str, ...]] = field(
        default_factory=lambda: dict(DEFAULT_COMMANDS)
    )

    def command_for(self, step: StepName) -> tuple[str, ...]:
        """Return the command line configured for ``step``."""
        if step == "lockfile" and step not in self.commands:
            return lockfile_command(self.lockfile)
        return self.commands[step]


def _split_command(step: str, value: Any, source: str) -> tuple[str, ...]:
    if isinstance(value, str):
        try:
            parts = tuple(shlex.split(value))
        except ValueError as exc:
            raise ConfigError(f"Invalid command for step '{step}' in {source}: {exc}") from exc
    elif isinstance(value, (list, tuple)) and all(isinstance(item, str) for item in value):
        parts = tuple(value)
    else:
        raise ConfigError(
            f"Command for step '{step}' in {source} must be a string or a list of strings"
        )
    if not parts:
        raise ConfigError(f"Command for step '{step}' in {source} must not be empty")
    return parts


def _resolve_config_path(
    environ: Mapping[str, str],
    config_file: str | os.PathLike[str] | None,
) -> Path:
    if config_file is not None:
        return Path(config_file)
    configured = environ.get(CONFIG_FILE_ENV)
    if configured:
        return Path(configured)
    return Path.cwd() / DEFAULT_CONFIG_FILE


def _read_config_file(path: Path) -> dict[str, Any]:
    if not path.is_file():
        return {}
    try:
        with path.open("rb") as config_handle:
            return tomllib.load(config_handle)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Failed to parse {path}: {exc}") from exc


def _table(data: Mapping[str, Any], name: str, path: Path) -> Mapping[str, Any]:
    table = data.get(name, {})
    if not isinstance(table, dict):
        raise ConfigError(f"[{name}] section must be a table in {path}")
    return table


def _check_step_name(step: str, source: str) -> None:
    if step not in STEP_NAMES:
        raise ConfigError(f"Unknown step '{step}' in {source}")


def _apply_layer(
    commands: dict[str, tuple[str, ...]],
    lockfile: str,
    *,
    layer_lockfile: str | None,
    layer_commands: Mapping[str, tuple[str, ...]],
    source: str,
) -> str:
    # A lockfile path replaces any lockfile command from a lower layer.
    if layer_lockfile:
        if "lockfile" in layer_commands:
            raise ConfigError(
                f"Both a lockfile path and a lockfile command are configured in {source}"
            )
        commands.pop("lockfile", None)
        lockfile = layer_lockfile
    commands.update(layer_commands)
    return lockfile


def load_settings(
    *,
    environ: Mapping[str, str] | None = None,
    config_file: str | os.PathLike[str] | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> RunnerSettings:
    """
    Resolve runner settings from defaults, config file, environment and overrides.

    Later sources win per key: defaults, then the TOML file, then ``CIRUNNER_*``
    environment variables, then explicit ``overrides``. ``overrides`` accepts a
    ``lockfile`` key and a ``commands`` mapping of step name to command. A
    lockfile path from one source replaces a lockfile command from a lower one.

    Raises:
        ConfigError: When the file is malformed, names an unknown step, or one
        source sets both a lockfile path and a lockfile command.
    """
    env = os.environ if environ is None else environ
    path = _resolve_config_path(env, config_file)
    data = _read_config_file(path)

    lockfile = DEFAULT_LOCKFILE
    commands: dict[str, tuple[str, ...]] = dict(DEFAULT_COMMANDS)

    runner_table = _table(data, "runner", path)
    file_lockfile = runner_table.get("lockfile")
    if file_lockfile is not None and (not isinstance(file_lockfile, str) or not file_lockfile):
        raise ConfigError(f"[runner] lockfile must be a non-empty string in {path}")
    file_commands = {}
    for step, value in _table(data, "commands", path).items():
        _check_step_name(step, str(path))
        file_commands[step] = _split_command(step, value, str(path))
    lockfile = _apply_layer(
        commands,
        lockfile,
        layer_lockfile=file_lockfile,
        layer_commands=file_commands,
        source=str(path),
    )

    env_commands = {}
    for step in STEP_NAMES:
        value = env.get(command_env_var(step))
        if value:
            env_commands[step] = _split_command(step, value, command_env_var(step))
    lockfile = _apply_layer(
        commands,
        lockfile,
        layer_lockfile=env.get(LOCKFILE_ENV),
        layer_commands=env_commands,
        source="the environment",
    )

    override_commands = {}
    for key, value in (overrides or {}).items():
        if key == "commands":
            for step, command in value.items():
                _check_step_name(step, "overrides")
                override_commands[step] = _split_command(step, command, "overrides")
        elif key != "lockfile":
            raise ConfigError(f"Unsupported settings override key: {key}")
    lockfile = _apply_layer(
        commands,
        lockfile,
        layer_lockfile=(overrides or {}).get("lockfile"),
        layer_commands=override_commands,
        source="overrides",
    )

    return RunnerSettings(lockfile=lockfile, commands=commands)
