"""Fixed-interval notarization status polling."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Iterable

from dmgdist.errors import DecodeError, ProcessError
from dmgdist.models import PollResult, RequestHandle, VerdictStatus

LOGGER = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL_SECONDS = 10.0

StatusCheck = Callable[[RequestHandle], PollResult]


@dataclass(frozen=True, slots=True)
class PollingOutcome:
    """Terminal result of a polling loop."""

    handle: RequestHandle
    success: bool
    attempts: int
    failed_checks: int
    last_result: PollResult | None


class StatusPoller:
    """Check a request once immediately, then on a fixed period until terminal.

    Only a ``success`` verdict ends the loop unless ``terminal_failure_statuses``
    names verdicts that should end it with a failure. With the default empty
    set any other verdict keeps polling indefinitely.
    """

    def __init__(
        self,
        check: StatusCheck,
        *,
        interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS,
        terminal_failure_statuses: Iterable[VerdictStatus] = (),
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
        logger: logging.Logger | None = None,
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive.")
        failure_statuses = frozenset(terminal_failure_statuses)
        if "success" in failure_statuses:
            raise ValueError("success cannot be a terminal failure status.")
        self._check = check
        self._interval = interval_seconds
        self._failure_statuses = failure_statuses
        self._sleep = sleep
        self._clock = clock
        self._logger = logger or LOGGER

    def wait(self, handle: RequestHandle) -> PollingOutcome:
        """Block until the request reaches a terminal verdict."""

        self._logger.info("Checking status of request %s", handle)
        started = self._clock()
        attempts = 0
        failed_checks = 0
        last_result: PollResult | None = None

        while True:
            attempts += 1
            result = self._check_once(handle, attempts)
            if result is None:
                failed_checks += 1
            else:
                last_result = result
                if result.is_done:
                    self._logger.info("Notarization done request_id=%s attempts=%s", handle, attempts)
                    return PollingOutcome(handle, True, attempts, failed_checks, last_result)
                if result.verdict in self._failure_statuses:
                    self._logger.error(
                        "poller.terminal_failure request_id=%s status=%s message=%s",
                        handle,
                        result.raw_status,
                        result.message,
                    )
                    return PollingOutcome(handle, False, attempts, failed_checks, last_result)
                self._logger.info(
                    "poller.not_done request_id=%s verdict=%s status=%s",
                    handle,
                    result.verdict,
                    result.raw_status,
                )

            # Ticks stay anchored to the start of polling; overrun ticks are skipped.
            elapsed = self._clock() - started
            self._sleep(self._interval - (elapsed % self._interval))

    def _check_once(self, handle: RequestHandle, attempt: int) -> PollResult | None:
        """Run one check; log and return None when the tool call fails."""

        try:
            return self._check(handle)
        except (ProcessError, DecodeError) as exc:
            self._logger.warning(
                "Error checking for notarization status request_id=%s attempt=%s error=%s",
                handle,
                attempt,
                exc,
            )
            return None
