"""Integration tests for running scoped commands.

Spawns real shells; skipped on Windows, where the commands differ.
"""

import os
import sys
from pathlib import Path

import pytest

from envfetch.lib.process import run_command

pytestmark = [
    pytest.mark.integration,
    pytest.mark.skipif(sys.platform == "win32", reason="POSIX shell commands"),
]


@pytest.fixture
def env() -> dict[str, str]:
    return {"PATH": os.environ.get("PATH", "/usr/bin:/bin"), "GREETING": "Hello"}


class TestRunCommand:
    """Exit status and environment of the child."""

    def test_child_sees_environment(self, env: dict[str, str]) -> None:
        result = run_command('printf %s "$GREETING"', env, capture=True)
        assert result.ok
        assert result.stdout == "Hello"

    def test_child_only_gets_given_environment(self, env: dict[str, str]) -> None:
        result = run_command('printf %s "${HOME:-unset}"', env, capture=True)
        assert result.stdout == "unset"

    def test_exit_status(self, env: dict[str, str]) -> None:
        result = run_command("exit 3", env, capture=True)
        assert result.exit_code == 3
        assert not result.ok

    def test_stderr_captured(self, env: dict[str, str]) -> None:
        result = run_command("echo oops >&2; exit 1", env, capture=True)
        assert result.exit_code == 1
        assert "oops" in result.stderr

    def test_foreground(self, env: dict[str, str], tmp_path: Path) -> None:
        """Without capture the child still runs with the environment."""
        out = tmp_path / "out.txt"
        result = run_command(f'printf %s "$GREETING" > "{out}"', env)
        assert result.ok
        assert out.read_text() == "Hello"

    def test_foreground_failure(self, env: dict[str, str]) -> None:
        assert run_command("exit 7", env).exit_code == 7

    def test_unknown_command(self, env: dict[str, str]) -> None:
        """The shell starts, so a missing program is a failed run, not a start error."""
        result = run_command("definitely-not-a-real-command-xyz", env, capture=True)
        assert result.exit_code == 127
