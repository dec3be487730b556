"""Run a scoped command through the system shell.

The child inherits the given environment, so variables set by envfetch
are visible to it and disappear with it::

    code = run_command("echo $MY_VAR", env={"MY_VAR": "Hello"}).exit_code

POSIX shells are driven with ``sh``. Windows has no ``sh`` support, so
there the command is handed to ``cmd`` through ``subprocess``.
"""

import logging
import subprocess
import sys

from pydantic import BaseModel

from envfetch.lib.errors import StartingProcessError

logger = logging.getLogger(__name__)


class CommandResult(BaseModel):
    """Exit status and, when captured, output of a child process."""

    exit_code: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


def _exit_code(code: int) -> int:
    # Killed by a signal: report it the way shells do.
    return 128 - code if code < 0 else code


def _run_posix(command: str, env: dict[str, str], capture: bool) -> CommandResult:
    import sh

    try:
        shell = sh.Command("sh")
    except sh.CommandNotFound as e:
        raise StartingProcessError(f"can't start process: {e}") from e

    try:
        if not capture:
            shell("-c", command, _env=env, _fg=True)
            return CommandResult(exit_code=0)
        output = shell("-c", command, _env=env, _return_cmd=True)
        return CommandResult(
            exit_code=output.exit_code,
            stdout=str(output),
            stderr=output.stderr.decode(errors="replace"),
        )
    except sh.ErrorReturnCode as e:
        return CommandResult(
            exit_code=_exit_code(e.exit_code),
            stdout=(e.stdout or b"").decode(errors="replace"),
            stderr=(e.stderr or b"").decode(errors="replace"),
        )


def _run_windows(command: str, env: dict[str, str], capture: bool) -> CommandResult:
    try:
        completed = subprocess.run(
            command,
            shell=True,
            env=env,
            capture_output=capture,
            text=True,
            check=False,
        )
    except OSError as e:
        raise StartingProcessError(f"can't start process: {e}") from e
    return CommandResult(
        exit_code=completed.returncode,
        stdout=completed.stdout or "",
        stderr=completed.stderr or "",
    )


def run_command(
    command: str,
    env: dict[str, str],
    *,
    capture: bool = False,
) -> CommandResult:
    """Run ``command`` with the system shell and wait for it.

    Args:
        command: Shell command line.
        env: Complete environment for the child.
        capture: Collect stdout/stderr instead of passing the terminal through.

    Raises:
        StartingProcessError: The shell could not be started.
    """
    logger.debug("Running %r", command)
    if sys.platform == "win32":
        result = _run_windows(command, env, capture)
    else:
        result = _run_posix(command, env, capture)
    logger.debug("%r exited with status %d", command, result.exit_code)
    return result
