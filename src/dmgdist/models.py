"""Typed values passed between the packager, backends, poller, and workflow."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

VerdictStatus = Literal["pending", "success", "invalid", "unknown"]
VERDICT_STATUS_VALUES: tuple[VerdictStatus, ...] = ("pending", "success", "invalid", "unknown")

# Textual statuses reported by altool that map onto a canonical verdict.
_STATUS_TEXT_TO_VERDICT: dict[str, VerdictStatus] = {
    "in progress": "pending",
    "success": "success",
    "invalid": "invalid",
}


def verdict_from_status_text(status: str | None) -> VerdictStatus:
    """Map a backend status string to a canonical verdict.

    ``None`` means the service has no information yet. Any text that is not a
    known status maps to ``unknown``.
    """

    if status is None:
        return "pending"
    return _STATUS_TEXT_TO_VERDICT.get(status, "unknown")


@dataclass(frozen=True, slots=True)
class ArtifactRef:
    """Packaged disk image and the bundle identifier of the app inside it."""

    path: Path
    bundle_identifier: str


@dataclass(frozen=True, slots=True)
class AccountCredentials:
    """App Store Connect account used for submission and status checks."""

    provider_id: str
    account_email: str
    account_secret: str = field(repr=False)


@dataclass(frozen=True, slots=True)
class SubmissionRequest:
    """Everything a submission backend needs for one artifact."""

    artifact: ArtifactRef
    identity: str
    credentials: AccountCredentials

    @property
    def artifact_path(self) -> Path:
        return self.artifact.path

    @property
    def provider_id(self) -> str:
        return self.credentials.provider_id

    @property
    def account_email(self) -> str:
        return self.credentials.account_email

    @property
    def account_secret(self) -> str:
        return self.credentials.account_secret

    @property
    def credential_profile(self) -> str:
        """Keychain profile name for notarytool, supplied in the secret slot."""

        return self.credentials.account_secret


@dataclass(frozen=True, slots=True)
class RequestHandle:
    """Opaque notarization request identifier returned by a legacy submission."""

    id: str

    def __post_init__(self) -> None:
        if not self.id or not self.id.strip():
            raise ValueError("Request handle id must be a non-empty string.")

    def __str__(self) -> str:
        """The raw request id."""

        return self.id


@dataclass(frozen=True, slots=True)
class PollResult:
    """Outcome of a single status check."""

    verdict: VerdictStatus
    message: str | None = None
    raw_status: str | None = None

    @property
    def is_done(self) -> bool:
        """The single completion predicate: only ``success`` is done."""

        return self.verdict == "success"


@dataclass(frozen=True, slots=True)
class SubmissionOutcome:
    """Result of ``submit``: an accepted submission or a handle that needs polling.

    Backends report a failed submission by raising, so a completed outcome
    always carries a successful verdict.
    """

    handle: RequestHandle | None = None

    @classmethod
    def completed(cls) -> "SubmissionOutcome":
        """Outcome of a submission that already reached a successful verdict."""

        return cls(handle=None)

    @classmethod
    def pending(cls, handle: RequestHandle) -> "SubmissionOutcome":
        """Outcome of a submission whose verdict must be polled for."""

        return cls(handle=handle)
