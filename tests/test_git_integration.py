"""End-to-end runs against a real git repository."""

from __future__ import annotations

import shlex
import shutil
import subprocess
import sys
from pathlib import Path

import pytest
from click.testing import CliRunner

from cirunner.cli import main as cli_main

pytestmark = pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")


def _git(repo: Path, *args: str) -> None:
    subprocess.run(
        ["git", "-c", "user.name=cirunner", "-c", "user.email=ci@example.invalid", *args],
        cwd=repo,
        check=True,
        capture_output=True,
    )


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep root handlers untouched by CLI invocations."""
    monkeypatch.setattr(cli_main, "setup_logging", lambda **kwargs: None)


@pytest.fixture
def repo(tmp_path: Path) -> Path:
    """Create a repository with a committed Cargo.lock."""
    repo_dir = tmp_path / "repo"
    repo_dir.mkdir()
    _git(repo_dir, "init", "-q")
    (repo_dir / "Cargo.lock").write_text("# lock v1\n", encoding="utf-8")
    _git(repo_dir, "add", "Cargo.lock")
    _git(repo_dir, "commit", "-q", "-m", "initial")
    return repo_dir


def test_clean_lockfile_passes(repo: Path) -> None:
    result = CliRunner().invoke(cli_main.main, ["--quiet", "--cwd", str(repo)])

    assert result.exit_code == 0


def test_lockfile_modified_by_step_fails(repo: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Verify a step that rewrites the lockfile makes the final diff fail."""
    monkeypatch.setenv("TEST", "true")
    script = "open('Cargo.lock', 'a').write('# drift\\n')"
    test_command = shlex.join([sys.executable, "-c", script])

    result = CliRunner().invoke(
        cli_main.main,
        ["--quiet", "--cwd", str(repo), "--command", f"test={test_command}"],
    )

    assert result.exit_code == 1
    assert "Step 'lockfile' failed with exit code 1." in result.output
