"""Package, notarize, and staple macOS disk images."""

from dmgdist.backends import LegacyBackend, ModernBackend, SubmissionBackend, select_backend
from dmgdist.errors import (
    DecodeError,
    DmgDistError,
    InputError,
    NotarizationFailedError,
    PackagingError,
    ProcessError,
)
from dmgdist.models import (
    AccountCredentials,
    ArtifactRef,
    PollResult,
    RequestHandle,
    SubmissionOutcome,
    SubmissionRequest,
    VerdictStatus,
)
from dmgdist.packager import DmgPackager
from dmgdist.poller import PollingOutcome, StatusPoller
from dmgdist.stapler import Stapler
from dmgdist.workflow import NotarizationWorkflow, WorkflowResult, build_workflow

__all__ = [
    "SubmissionBackend",
    "ModernBackend",
    "LegacyBackend",
    "select_backend",
    "DmgDistError",
    "InputError",
    "PackagingError",
    "ProcessError",
    "DecodeError",
    "NotarizationFailedError",
    "AccountCredentials",
    "ArtifactRef",
    "PollResult",
    "RequestHandle",
    "SubmissionOutcome",
    "SubmissionRequest",
    "VerdictStatus",
    "DmgPackager",
    "PollingOutcome",
    "StatusPoller",
    "Stapler",
    "NotarizationWorkflow",
    "WorkflowResult",
    "build_workflow",
]
