"""Notarization submission backends built on ``notarytool`` and ``altool``."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import ClassVar

from dmgdist.models import AccountCredentials, PollResult, RequestHandle, SubmissionOutcome, SubmissionRequest
from dmgdist.responses import decode_status_response, decode_upload_response
from dmgdist.runner import CommandResult, CommandRunner, run_command

LOGGER = logging.getLogger(__name__)


class SubmissionBackend(ABC):
    """Submits a packaged artifact for notarization."""

    name: ClassVar[str]

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

    @abstractmethod
    def submit(self, request: SubmissionRequest) -> SubmissionOutcome:
        """Submit the artifact; return a terminal outcome or a handle to poll."""

    def _run(self, args: list[str], *, label: str) -> CommandResult:
        result = self._runner(args)
        if self._verbose:
            self._logger.info("%s output:\n%s", label, result.stdout.rstrip())
        return result


class ModernBackend(SubmissionBackend):
    """``notarytool submit --wait``: blocks until the service reaches a verdict."""

    name = "notarytool"

    def submit(self, request: SubmissionRequest) -> SubmissionOutcome:
        """Submit and block until notarytool reports a verdict; failure raises ProcessError."""

        self._logger.info("backend.notarytool.submit artifact=%s", request.artifact_path)
        self._run(
            [
                self._xcrun,
                "notarytool",
                "submit",
                str(request.artifact_path),
                "--keychain-profile",
                request.credential_profile,
                "--wait",
            ],
            label="notarytool",
        )
        return SubmissionOutcome.completed()


class LegacyBackend(SubmissionBackend):
    """``altool --notarize-app``: returns a request id that must be polled."""

    name = "altool"

    def submit(self, request: SubmissionRequest) -> SubmissionOutcome:
        """Upload the artifact and return the request handle to poll."""

        self._logger.info(
            "backend.altool.submit artifact=%s bundle_id=%s",
            request.artifact_path,
            request.artifact.bundle_identifier,
        )
        result = self._run(
            [
                self._xcrun,
                "altool",
                "--notarize-app",
                "--primary-bundle-id",
                request.artifact.bundle_identifier,
                "-f",
                str(request.artifact_path),
                *self._account_args(request.credentials),
            ],
            label="altool",
        )
        handle = decode_upload_response(result.stdout)
        self._logger.info("backend.altool.submitted request_id=%s", handle)
        return SubmissionOutcome.pending(handle)

    def check_status(self, handle: RequestHandle, credentials: AccountCredentials) -> PollResult:
        """Fetch the current verdict for a previously submitted request."""

        result = self._run(
            [
                self._xcrun,
                "altool",
                "--notarization-info",
                handle.id,
                *self._account_args(credentials),
            ],
            label="altool",
        )
        return decode_status_response(result.stdout).to_poll_result()

    @staticmethod
    def _account_args(credentials: AccountCredentials) -> list[str]:
        """Credential and output-format arguments shared by altool calls."""

        return [
            "-u",
            credentials.account_email,
            "-p",
            credentials.account_secret,
            "--asc-provider",
            credentials.provider_id,
            "--output-format",
            "json",
        ]


def select_backend(
    use_notary_tool: bool,
    *,
    runner: CommandRunner = run_command,
    xcrun: str = "xcrun",
    verbose: bool = False,
    logger: logging.Logger | None = None,
) -> SubmissionBackend:
    """Return the modern backend when requested, otherwise the legacy one."""

    backend_cls: type[SubmissionBackend] = ModernBackend if use_notary_tool else LegacyBackend
    return backend_cls(runner=runner, xcrun=xcrun, verbose=verbose, logger=logger)
