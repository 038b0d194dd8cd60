from __future__ import annotations

import plistlib
from pathlib import Path
from typing import Callable, Sequence, Union

import pytest

from dmgdist.errors import ProcessError
from dmgdist.models import AccountCredentials
from dmgdist.runner import CommandResult

Response = Union[str, BaseException, Callable[[tuple[str, ...]], str]]


class FakeRunner:
    """Command runner double keyed by tool name.

    Responses queue per key; the last one repeats once the queue is drained.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, ...]] = []
        self._responses: dict[str, list[Response]] = {}

    def on(self, key: str, *responses: Response) -> "FakeRunner":
        self._responses.setdefault(key, []).extend(responses)
        return self

    def fail(self, key: str, returncode: int = 1, stderr: str = "boom") -> "FakeRunner":
        return self.on(key, ProcessError((key,), returncode, "", stderr))

    @staticmethod
    def key_for(args: tuple[str, ...]) -> str:
        name = Path(args[0]).name
        if name == "xcrun":
            if args[1] == "altool":
                return f"altool {args[2]}"
            return args[1]
        return name

    def calls_for(self, key: str) -> list[tuple[str, ...]]:
        return [call for call in self.calls if self.key_for(call) == key]

    def __call__(self, args: Sequence[str]) -> CommandResult:
        command = tuple(str(arg) for arg in args)
        self.calls.append(command)
        queue = self._responses.get(self.key_for(command), [])
        response: Response = ""
        if queue:
            response = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(response, BaseException):
            raise response
        stdout = response(command) if callable(response) else response
        return CommandResult(args=command, returncode=0, stdout=stdout, stderr="")


class StopPolling(Exception):
    pass


class FakeSleep:
    """Records requested delays; raises StopPolling after ``limit`` sleeps."""

    def __init__(self, limit: int | None = None) -> None:
        self.delays: list[float] = []
        self._limit = limit

    def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)
        if self._limit is not None and len(self.delays) >= self._limit:
            raise StopPolling()


def write_app(
    root: Path,
    name: str = "My App",
    *,
    identifier: str | None = "com.example.myapp",
    short_version: str | None = "1.2",
    bundle_version: str | None = "45",
) -> Path:
    app_path = root / f"{name}.app"
    contents = app_path / "Contents"
    contents.mkdir(parents=True)
    info: dict[str, str] = {}
    if identifier is not None:
        info["CFBundleIdentifier"] = identifier
    if short_version is not None:
        info["CFBundleShortVersionString"] = short_version
    if bundle_version is not None:
        info["CFBundleVersion"] = bundle_version
    with (contents / "Info.plist").open("wb") as handle:
        plistlib.dump(info, handle)
    return app_path


def create_dmg_writes(file_name: str = "My App 1.2.dmg") -> Callable[[tuple[str, ...]], str]:
    """create-dmg stand-in that drops a disk image into the output directory."""

    def _respond(args: tuple[str, ...]) -> str:
        (Path(args[-1]) / file_name).write_bytes(b"dmg")
        return ""

    return _respond


def upload_payload(request_id: str = "abc-123") -> str:
    return '{"notarization-upload": {"RequestUUID": "%s"}}' % request_id


def status_payload(status: str, message: str | None = None) -> str:
    if message is None:
        return '{"notarization-info": {"Status": "%s"}}' % status
    return '{"notarization-info": {"Status": "%s", "Status Message": "%s"}}' % (status, message)


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def credentials() -> AccountCredentials:
    return AccountCredentials(
        provider_id="TEAM123",
        account_email="dev@example.com",
        account_secret="@keychain:AC_PASSWORD",
    )
