"""Invocation of external command-line capabilities.

The TTS engine, the external audio players and the cast tool are all
driven through :func:`run_capability`, which never raises for process
failures: a missing binary or an OS error is folded into the returned
:class:`CapabilityResult` so each caller applies one error policy.
"""

from __future__ import annotations

import asyncio
import logging
import shutil
from dataclasses import dataclass
from typing import Sequence

logger = logging.getLogger(__name__)

# Exit status reported when the executable could not be started at all
LAUNCH_FAILURE_STATUS = 127


@dataclass(frozen=True)
class CapabilityResult:
    """Outcome of one external command."""

    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    def error_text(self) -> str:
        """Return the most useful diagnostic text for a failed run."""
        text = self.stderr.strip() or self.stdout.strip()
        return text or f"exited with status {self.returncode}"


def locate_executable(name: str) -> str | None:
    """Return the absolute path of *name* on ``PATH``, if any."""

    return shutil.which(name)


async def run_capability(argv: Sequence[str]) -> CapabilityResult:
    """Run *argv* to completion, capturing its output streams."""

    command = list(argv)
    logger.debug("Running %s", command[0])
    try:
        process = await asyncio.create_subprocess_exec(
            *command,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        stdout, stderr = await process.communicate()
    except OSError as exc:
        logger.warning("Failed to start %s: %s", command[0], exc)
        return CapabilityResult(LAUNCH_FAILURE_STATUS, "", str(exc))

    result = CapabilityResult(
        returncode=process.returncode if process.returncode is not None else -1,
        stdout=stdout.decode("utf-8", errors="replace"),
        stderr=stderr.decode("utf-8", errors="replace"),
    )
    if not result.ok:
        logger.debug("%s exited with status %d", command[0], result.returncode)
    return result


__all__ = [
    "CapabilityResult",
    "LAUNCH_FAILURE_STATUS",
    "locate_executable",
    "run_capability",
]
