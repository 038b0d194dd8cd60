"""Error types raised by the release pipeline."""

from __future__ import annotations

from typing import Sequence


class DmgDistError(Exception):
    """Base class for failures that abort a release run."""


class InputError(DmgDistError):
    """Raised when operator input is unusable before any external call."""


class PackagingError(DmgDistError):
    """Raised when the packager ran but produced no usable disk image."""


class ProcessError(DmgDistError):
    """Raised when an external command cannot start or exits non-zero."""

    def __init__(
        self,
        command: Sequence[str],
        returncode: int,
        stdout: str = "",
        stderr: str = "",
        *,
        description: str | None = None,
    ) -> None:
        self.command = tuple(command)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        program = " ".join(self.command[:2]) if self.command else "<empty>"
        detail = description or (stderr.strip() or stdout.strip() or "no output")
        super().__init__(f"{program} failed with exit code {returncode}: {detail}")


class DecodeError(DmgDistError):
    """Raised when a tool response does not match the expected payload shape."""

    def __init__(self, message: str, payload: str = "") -> None:
        self.payload = payload
        super().__init__(message)


class NotarizationFailedError(DmgDistError):
    """Raised when notarization reached a terminal failure verdict."""
