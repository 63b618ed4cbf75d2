"""
Shell command runner — execute a command and capture its output.

This is the one place appshelf spawns processes. It never raises for a
non-zero exit or a timeout; those come back as a CommandOutput. It
raises BackendUnavailableError only when the executable cannot be
started at all.
"""

from __future__ import annotations

import logging
import subprocess
import time
from dataclasses import dataclass

from appshelf.errors import BackendUnavailableError

logger = logging.getLogger(__name__)

# Conventional exit status for "timed out" (matches coreutils `timeout`)
TIMEOUT_EXIT_CODE = 124


@dataclass
class CommandOutput:
    """Raw outcome of one process invocation."""

    args: list[str]
    exit_code: int
    stdout: str = ""
    stderr: str = ""
    duration_ms: int = 0


def run_command(args: list[str], timeout: float | None = None) -> CommandOutput:
    """Run ``args`` without a shell and capture both streams.

    Args:
        args: Executable and arguments.
        timeout: Seconds to wait; None waits forever.

    Raises:
        BackendUnavailableError: The executable could not be started.
    """
    logger.debug("Executing: %s", " ".join(args))
    start = time.monotonic()

    try:
        result = subprocess.run(
            args,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            timeout=timeout,
        )
    except subprocess.TimeoutExpired as e:
        elapsed_ms = int((time.monotonic() - start) * 1000)
        logger.warning("Command timed out after %ss: %s", timeout, " ".join(args))
        return CommandOutput(
            args=args,
            exit_code=TIMEOUT_EXIT_CODE,
            stdout=_as_text(e.stdout),
            stderr=f"Command timed out after {timeout}s",
            duration_ms=elapsed_ms,
        )
    except OSError as e:
        raise BackendUnavailableError(f"Cannot run {args[0]}: {e}") from e

    elapsed_ms = int((time.monotonic() - start) * 1000)
    logger.debug("Exit %d after %dms: %s", result.returncode, elapsed_ms, args[0])
    return CommandOutput(
        args=args,
        exit_code=result.returncode,
        stdout=result.stdout or "",
        stderr=result.stderr or "",
        duration_ms=elapsed_ms,
    )


def _as_text(data: bytes | str | None) -> str:
    if data is None:
        return ""
    if isinstance(data, bytes):
        return data.decode("utf-8", errors="replace")
    return data
