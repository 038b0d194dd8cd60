"""Decoders for the JSON payloads printed by ``altool``."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from dmgdist.errors import DecodeError
from dmgdist.models import PollResult, RequestHandle, verdict_from_status_text


class _AltoolPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)


class UploadInfo(_AltoolPayload):
    request_uuid: str = Field(alias="RequestUUID", min_length=1)


class NotarizationUploadResponse(_AltoolPayload):
    """Response of ``altool --notarize-app``."""

    upload: UploadInfo = Field(alias="notarization-upload")


class StatusInfo(_AltoolPayload):
    status: str = Field(alias="Status")
    status_message: str | None = Field(default=None, alias="Status Message")


class NotarizationStatusResponse(_AltoolPayload):
    """Response of ``altool --notarization-info``.

    A missing ``notarization-info`` object means the service has nothing to
    report yet.
    """

    info: StatusInfo | None = Field(default=None, alias="notarization-info")

    @property
    def is_done(self) -> bool:
        """True only for the ``success`` status."""

        return self.to_poll_result().is_done

    def to_poll_result(self) -> PollResult:
        """Convert the payload to a canonical poll result."""

        if self.info is None:
            return PollResult(verdict=verdict_from_status_text(None))
        return PollResult(
            verdict=verdict_from_status_text(self.info.status),
            message=self.info.status_message,
            raw_status=self.info.status,
        )


def decode_upload_response(output: str) -> RequestHandle:
    """Extract the request handle from a submission response."""

    try:
        response = NotarizationUploadResponse.model_validate_json(output)
        return RequestHandle(response.upload.request_uuid)
    except ValueError as exc:
        # ValidationError is a ValueError; so is a blank RequestUUID.
        raise DecodeError(f"Unexpected notarization upload response: {exc}", payload=output) from exc


def decode_status_response(output: str) -> NotarizationStatusResponse:
    """Parse a status-check response."""

    try:
        return NotarizationStatusResponse.model_validate_json(output)
    except ValidationError as exc:
        raise DecodeError(f"Unexpected notarization status response: {exc}", payload=output) from exc
