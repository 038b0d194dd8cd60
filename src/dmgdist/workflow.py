"""Notarization workflow: package, submit, poll when needed, then staple."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from functools import partial
from pathlib import Path
from typing import Callable, Literal

from dmgdist.backends import LegacyBackend, SubmissionBackend, select_backend
from dmgdist.config import AppSettings
from dmgdist.errors import NotarizationFailedError
from dmgdist.models import AccountCredentials, ArtifactRef, RequestHandle, SubmissionRequest
from dmgdist.packager import DmgPackager
from dmgdist.poller import StatusPoller
from dmgdist.runner import CommandRunner, run_command
from dmgdist.stapler import Stapler

LOGGER = logging.getLogger(__name__)

WorkflowState = Literal["idle", "packaged", "submitted", "polling", "done"]
WORKFLOW_STATE_VALUES: tuple[WorkflowState, ...] = ("idle", "packaged", "submitted", "polling", "done")

_ALLOWED_TRANSITIONS: dict[WorkflowState, frozenset[WorkflowState]] = {
    "idle": frozenset({"packaged", "polling"}),
    "packaged": frozenset({"submitted"}),
    "submitted": frozenset({"polling", "done"}),
    "polling": frozenset({"done"}),
    "done": frozenset(),
}


class WorkflowStateError(RuntimeError):
    """Raised when the workflow is driven through an impossible transition."""


@dataclass(frozen=True, slots=True)
class WorkflowResult:
    """Final state of a successful run."""

    success: bool
    artifact: ArtifactRef | None
    handle: RequestHandle | None
    stapled: bool
    poll_attempts: int = 0


class NotarizationWorkflow:
    """Drives one artifact from packaging to a stapled or failed verdict.

    A workflow instance is single use. ``run`` goes through packaging and
    submission; ``resume`` starts polling an existing request id and never
    touches the packager or the submission backend.
    """

    def __init__(
        self,
        backend: SubmissionBackend,
        *,
        credentials: AccountCredentials,
        packager: DmgPackager,
        stapler: Stapler,
        poller: StatusPoller,
        logger: logging.Logger | None = None,
    ) -> None:
        self._backend = backend
        self._credentials = credentials
        self._packager = packager
        self._stapler = stapler
        self._poller = poller
        self._logger = logger or LOGGER
        self._state: WorkflowState = "idle"
        self.history: list[WorkflowState] = ["idle"]

    @property
    def state(self) -> WorkflowState:
        """Current workflow state."""

        return self._state

    def _advance(self, target: WorkflowState) -> None:
        """Move to ``target`` or raise WorkflowStateError for an illegal transition."""

        if target not in _ALLOWED_TRANSITIONS[self._state]:
            raise WorkflowStateError(f"Cannot move workflow from {self._state} to {target}")
        self._logger.debug("workflow.transition from=%s to=%s", self._state, target)
        self._state = target
        self.history.append(target)

    def run(self, app_path: Path, identity: str, dmg_name: str | None = None) -> WorkflowResult:
        """Package ``app_path``, notarize the disk image, and staple it."""

        artifact = self._packager.package(app_path, identity, dmg_name)
        self._advance("packaged")

        request = SubmissionRequest(artifact=artifact, identity=identity, credentials=self._credentials)
        self._logger.info("Submitting %s with %s", artifact.path, self._backend.name)
        outcome = self._backend.submit(request)
        self._advance("submitted")

        handle = outcome.handle
        if handle is None:
            self._advance("done")
            self._stapler.staple(artifact.path)
            return WorkflowResult(success=True, artifact=artifact, handle=None, stapled=True)

        self._logger.info("Notarization request ID: %s", handle)
        return self._poll(handle, artifact)

    def resume(self, request_id: str) -> WorkflowResult:
        """Keep checking an earlier request without repackaging or resubmitting."""

        return self._poll(RequestHandle(request_id), artifact=None)

    def _poll(self, handle: RequestHandle, artifact: ArtifactRef | None) -> WorkflowResult:
        """Poll ``handle`` to a verdict, then staple ``artifact`` when there is one."""

        self._advance("polling")
        polled = self._poller.wait(handle)
        self._advance("done")
        self._logger.info("Request %s fulfilled with success = %s", handle, polled.success)

        if not polled.success:
            message = polled.last_result.message if polled.last_result else None
            detail = f": {message}" if message else ""
            raise NotarizationFailedError(f"Notarization failed for request {handle}{detail}")

        stapled = False
        if artifact is not None:
            self._stapler.staple(artifact.path)
            stapled = True
        return WorkflowResult(
            success=True,
            artifact=artifact,
            handle=handle,
            stapled=stapled,
            poll_attempts=polled.attempts,
        )


def build_workflow(
    settings: AppSettings,
    credentials: AccountCredentials,
    *,
    use_notary_tool: bool | None = None,
    verbose: bool = False,
    runner: CommandRunner = run_command,
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], float] = time.monotonic,
    logger: logging.Logger | None = None,
) -> NotarizationWorkflow:
    """Wire collaborators from settings; CLI flags override configured defaults."""

    effective_logger = logger or LOGGER
    tools = settings.tools
    notarization = settings.notarization
    chosen_notary_tool = notarization.use_notary_tool if use_notary_tool is None else use_notary_tool

    backend = select_backend(
        chosen_notary_tool,
        runner=runner,
        xcrun=tools.xcrun,
        verbose=verbose,
        logger=effective_logger,
    )
    # Status checks always go through altool, including when resuming.
    status_backend = (
        backend
        if isinstance(backend, LegacyBackend)
        else LegacyBackend(runner=runner, xcrun=tools.xcrun, verbose=verbose, logger=effective_logger)
    )
    poller = StatusPoller(
        partial(status_backend.check_status, credentials=credentials),
        interval_seconds=notarization.poll_interval_seconds,
        terminal_failure_statuses=notarization.terminal_failure_statuses,
        sleep=sleep,
        clock=clock,
        logger=effective_logger,
    )
    packager = DmgPackager(
        runner=runner,
        create_dmg=tools.create_dmg,
        work_root=settings.paths.work_root,
        max_name_length=settings.packaging.max_dmg_name_length,
        logger=effective_logger,
    )
    stapler = Stapler(runner=runner, xcrun=tools.xcrun, verbose=verbose, logger=effective_logger)
    return NotarizationWorkflow(
        backend,
        credentials=credentials,
        packager=packager,
        stapler=stapler,
        poller=poller,
        logger=effective_logger,
    )
