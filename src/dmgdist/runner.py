"""Blocking execution of external release tools."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from typing import Callable, Sequence

from dmgdist.errors import ProcessError
from dmgdist.logging_utils import redact_command

LOGGER = logging.getLogger(__name__)

MISSING_EXECUTABLE_EXIT_CODE = 127
UNRUNNABLE_EXIT_CODE = 126


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Captured outcome of one finished external command."""

    args: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str


CommandRunner = Callable[[Sequence[str]], CommandResult]


def run_command(args: Sequence[str], *, logger: logging.Logger | None = None) -> CommandResult:
    """Run a command to completion and raise ProcessError unless it exits 0."""

    effective_logger = logger or LOGGER
    command = tuple(str(arg) for arg in args)
    effective_logger.debug("command.start cmd=%s", redact_command(command))

    try:
        completed = subprocess.run(
            list(command),
            capture_output=True,
            encoding="utf-8",
            errors="replace",
            check=False,
        )
    except FileNotFoundError as exc:
        raise ProcessError(
            command,
            MISSING_EXECUTABLE_EXIT_CODE,
            description=f"executable not found: {command[0]}",
        ) from exc
    except OSError as exc:
        raise ProcessError(
            command,
            UNRUNNABLE_EXIT_CODE,
            description=f"cannot run {command[0]}: {exc}",
        ) from exc

    result = CommandResult(
        args=command,
        returncode=completed.returncode,
        stdout=completed.stdout or "",
        stderr=completed.stderr or "",
    )
    effective_logger.debug("command.finish cmd=%s returncode=%s", command[0], result.returncode)
    if result.returncode != 0:
        raise ProcessError(command, result.returncode, result.stdout, result.stderr)
    return result
