from dataclasses import FrozenInstanceError
from pathlib import Path

import pytest

from dmgdist.models import (
    AccountCredentials,
    ArtifactRef,
    PollResult,
    RequestHandle,
    SubmissionOutcome,
    SubmissionRequest,
    verdict_from_status_text,
)


@pytest.mark.parametrize("value", ["", "   "])
def test_request_handle_rejects_blank_ids(value: str) -> None:
    with pytest.raises(ValueError):
        RequestHandle(value)


def test_request_handle_is_opaque_text() -> None:
    handle = RequestHandle("not-a-uuid/at all")
    assert str(handle) == "not-a-uuid/at all"


@pytest.mark.parametrize(
    ("status", "verdict"),
    [
        (None, "pending"),
        ("in progress", "pending"),
        ("success", "success"),
        ("invalid", "invalid"),
        ("Invalid", "unknown"),
        ("", "unknown"),
    ],
)
def test_verdict_from_status_text(status, verdict) -> None:
    assert verdict_from_status_text(status) == verdict


def test_only_success_is_done() -> None:
    assert PollResult(verdict="success").is_done
    for verdict in ("pending", "invalid", "unknown"):
        assert not PollResult(verdict=verdict).is_done


def test_submission_request_exposes_flat_fields_and_hides_secret(credentials: AccountCredentials) -> None:
    artifact = ArtifactRef(path=Path("/tmp/MyApp.dmg"), bundle_identifier="com.example.myapp")
    request = SubmissionRequest(artifact=artifact, identity="Developer ID Application: X", credentials=credentials)

    assert request.artifact_path == Path("/tmp/MyApp.dmg")
    assert request.provider_id == "TEAM123"
    assert request.account_email == "dev@example.com"
    assert request.account_secret == "@keychain:AC_PASSWORD"
    assert request.credential_profile == "@keychain:AC_PASSWORD"
    assert "AC_PASSWORD" not in repr(request)

    with pytest.raises(FrozenInstanceError):
        request.identity = "other"  # type: ignore[misc]


def test_submission_outcome_constructors() -> None:
    assert SubmissionOutcome.completed().handle is None

    pending = SubmissionOutcome.pending(RequestHandle("abc"))
    assert pending.handle == RequestHandle("abc")
