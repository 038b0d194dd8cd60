"""Package a signed ``.app`` bundle into a disk image with ``create-dmg``."""

from __future__ import annotations

import logging
import plistlib
import tempfile
import time
from dataclasses import dataclass
from pathlib import Path

from dmgdist.errors import InputError, PackagingError
from dmgdist.models import ArtifactRef
from dmgdist.runner import CommandRunner, run_command

LOGGER = logging.getLogger(__name__)

DEFAULT_MAX_DMG_NAME_LENGTH = 27
WORK_DIR_PREFIX = "DMGDist-"


@dataclass(frozen=True, slots=True)
class BundleInfo:
    """Fields read from an app bundle's Info.plist."""

    identifier: str
    short_version: str
    bundle_version: str


def read_bundle_info(app_path: Path) -> BundleInfo:
    """Read identifier and version strings from ``Contents/Info.plist``."""

    plist_path = app_path / "Contents" / "Info.plist"
    try:
        with plist_path.open("rb") as handle:
            info = plistlib.load(handle)
    except FileNotFoundError as exc:
        raise InputError(f"Failed to construct app bundle: {plist_path} is missing") from exc
    except plistlib.InvalidFileException as exc:
        raise InputError(f"Failed to read app Info.plist at {plist_path}: {exc}") from exc

    def _required(key: str) -> str:
        value = info.get(key)
        if not isinstance(value, str) or not value:
            raise InputError(f"Failed to read {key} from app's Info.plist")
        return value

    return BundleInfo(
        identifier=_required("CFBundleIdentifier"),
        short_version=_required("CFBundleShortVersionString"),
        bundle_version=_required("CFBundleVersion"),
    )


def sanitize_app_name(app_path: Path) -> str:
    """App file name without extension and with spaces removed."""

    return app_path.stem.replace(" ", "")


def default_dmg_name(app_path: Path, info: BundleInfo) -> str:
    """Default output name: sanitized app name plus version and build."""

    return f"{sanitize_app_name(app_path)}_v{info.short_version}-{info.bundle_version}"


def validate_dmg_name(name: str, max_length: int = DEFAULT_MAX_DMG_NAME_LENGTH) -> str:
    """Reject names that reach the disk image title limit."""

    if not name.strip():
        raise InputError("The output DMG file name must not be empty.")
    if len(name) >= max_length:
        raise InputError(
            f'The output DMG file name "{name}" exceeds the maximum character limit of {max_length}.\n'
            "Please specify a shorter custom name with the --dmg-name option."
        )
    return name


def find_output_dmg(work_dir: Path) -> Path:
    """Return the first disk image written under ``work_dir``."""

    for candidate in sorted(work_dir.rglob("*")):
        if candidate.is_file() and candidate.suffix.lower() == ".dmg":
            return candidate
    raise PackagingError(f"Couldn't find output DMG in temporary directory {work_dir}")


class DmgPackager:
    """Builds a disk image for an app and returns a reference to it."""

    def __init__(
        self,
        *,
        runner: CommandRunner = run_command,
        create_dmg: str = "create-dmg",
        work_root: Path | None = None,
        max_name_length: int = DEFAULT_MAX_DMG_NAME_LENGTH,
        logger: logging.Logger | None = None,
    ) -> None:
        self._runner = runner
        self._create_dmg = create_dmg
        self._work_root = work_root
        self._max_name_length = max_name_length
        self._logger = logger or LOGGER

    def package(self, app_path: Path, identity: str, dmg_name: str | None = None) -> ArtifactRef:
        """Create ``<name>.dmg`` for ``app_path`` signed with ``identity``."""

        if " " in app_path.stem:
            self._logger.warning("The app file name contains spaces, they will be removed in the output file.")
        if not app_path.exists():
            raise InputError(f"The input app doesn't exist at {app_path}")

        info = read_bundle_info(app_path)
        output_name = validate_dmg_name(
            dmg_name if dmg_name is not None else default_dmg_name(app_path, info),
            self._max_name_length,
        )
        work_dir = self._make_work_dir(sanitize_app_name(app_path))

        self._logger.debug("Primary bundle ID is %s", info.identifier)
        self._logger.debug("Output DMG will be named %s", output_name)
        self._logger.debug("Using temporary directory %s", work_dir)

        self._runner(
            [
                self._create_dmg,
                f"--identity={identity}",
                "--overwrite",
                f"--dmg-title={output_name}",
                str(app_path),
                str(work_dir),
            ]
        )

        self._logger.debug("Renaming output DMG")
        created = find_output_dmg(work_dir)
        output_path = work_dir / f"{output_name}.dmg"
        if created != output_path:
            created.replace(output_path)

        self._logger.info("packager.created path=%s bundle_id=%s", output_path, info.identifier)
        return ArtifactRef(path=output_path, bundle_identifier=info.identifier)

    def _make_work_dir(self, sanitized_name: str) -> Path:
        """Create a fresh timestamped work directory under the work root."""

        root = self._work_root or Path(tempfile.gettempdir())
        work_dir = root / f"{WORK_DIR_PREFIX}{sanitized_name}-{time.time()}"
        work_dir.mkdir(parents=True, exist_ok=True)
        return work_dir
