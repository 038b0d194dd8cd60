"""Attach a notarization ticket to a disk image."""

from __future__ import annotations

import logging
from pathlib import Path

from dmgdist.runner import CommandRunner, run_command

LOGGER = logging.getLogger(__name__)


class Stapler:
    """Runs ``xcrun stapler staple``; a non-zero exit raises ProcessError."""

    def __init__(
        self,
        *,
        runner: CommandRunner = run_command,
        xcrun: str = "xcrun",
        verbose: bool = False,
        logger: logging.Logger | None = None,
    ) -> None:
        self._runner = runner
        self._xcrun = xcrun
        self._verbose = verbose
        self._logger = logger or LOGGER

    def staple(self, artifact_path: Path) -> None:
        """Staple the notarization ticket to ``artifact_path``."""

        self._logger.info("Stapling %s", artifact_path)
        args = [self._xcrun, "stapler", "staple"]
        if self._verbose:
            args.append("-v")
        args.append(str(artifact_path))

        result = self._runner(args)
        if self._verbose:
            self._logger.info("stapler output:\n%s", result.stdout.rstrip())
