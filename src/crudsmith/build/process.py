"""
Child process runner for npm, npx and prisma.

One child process at a time; output is captured whole so it can be scanned
for diagnostics afterwards.
"""

from __future__ import annotations

import logging
import subprocess
import time
from dataclasses import dataclass
from pathlib import Path

from ..core.errors import BuildError

logger = logging.getLogger(__name__)


@dataclass
class CommandResult:
    """Outcome of one command."""

    args: list[str]
    returncode: int
    stdout: str
    stderr: str
    duration: float
    timed_out: bool = False

    @property
    def output(self) -> str:
        """stdout followed by stderr."""
        if self.stdout and self.stderr:
            return f"{self.stdout}\n{self.stderr}"
        return self.stdout or self.stderr

    @property
    def ok(self) -> bool:
        return self.returncode == 0 and not self.timed_out

    @property
    def command_line(self) -> str:
        return " ".join(self.args)


def _decode(value: str | bytes | None) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return value


def run_command(
    args: list[str],
    cwd: Path,
    env: dict[str, str] | None = None,
    timeout: float | None = None,
) -> CommandResult:
    """
    Run a command to completion and capture its output.

    A timeout is not an exception: the result comes back with ``timed_out``
    set and whatever output was produced before the kill.

    Raises:
        BuildError: If the executable cannot be found
    """
    logger.info("Running %s (cwd=%s)", " ".join(args), cwd)
    start = time.monotonic()
    try:
        completed = subprocess.run(
            args,
            cwd=cwd,
            env=env,
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired as e:
        duration = time.monotonic() - start
        logger.warning("%s timed out after %.0fs", " ".join(args), duration)
        return CommandResult(
            args=list(args),
            returncode=-1,
            stdout=_decode(e.stdout),
            stderr=_decode(e.stderr),
            duration=duration,
            timed_out=True,
        )
    except FileNotFoundError as e:
        raise BuildError(f"Command not found: {args[0]}. Is it installed and on PATH?") from e

    duration = time.monotonic() - start
    logger.debug("%s exited %d in %.1fs", args[0], completed.returncode, duration)
    return CommandResult(
        args=list(args),
        returncode=completed.returncode,
        stdout=completed.stdout or "",
        stderr=completed.stderr or "",
        duration=duration,
    )
