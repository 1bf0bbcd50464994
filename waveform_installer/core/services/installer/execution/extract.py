"""
L4 Execution — Archive extraction.

Unpacks downloaded assets with the platform's own archive tools and
locates the audiowaveform binary inside them:

    zip  → PowerShell ``Expand-Archive``          (Windows)
    deb  → ``ar x`` then ``tar -xf data.tar.*``   (Linux)
"""

from __future__ import annotations

import logging
from pathlib import Path

from waveform_installer.adapters.registry import AR, POWERSHELL, TAR, ToolRegistry
from waveform_installer.core.errors import (
    BinaryNotFoundError,
    ExtractionError,
    MissingToolError,
)
from waveform_installer.core.services.installer.data.assets import (
    DEB_BINARY_PATH,
    DEB_DATA_PATTERN,
    ZIP_BINARY_PATTERN,
)

logger = logging.getLogger(__name__)


def find_single_file(root: Path, pattern: str) -> Path:
    """Find the file matching ``pattern`` under ``root``.

    When several files match, the first in sorted path order wins.

    Raises:
        ExtractionError: If nothing matches.
    """
    matches = sorted(p for p in root.glob(pattern) if p.is_file())
    if not matches:
        raise ExtractionError(f"No files matched pattern: {pattern}")
    if len(matches) > 1:
        logger.warning(
            "%d files matched %s under %s; using %s",
            len(matches), pattern, root, matches[0],
        )
    return matches[0]


def _ps_quote(path: Path) -> str:
    return "'" + str(path).replace("'", "''") + "'"


def _require(registry: ToolRegistry, name: str, purpose: str):
    tool = registry.available(name)
    if tool is None:
        raise MissingToolError(
            name,
            f"'{name}' is required to {purpose} but was not found on PATH.",
        )
    return tool


def extract_zip(registry: ToolRegistry, archive: Path, extract_dir: Path) -> Path:
    """Expand a Windows zip asset and return the path of ``audiowaveform.exe``."""
    powershell = _require(registry, POWERSHELL, "extract the zip archive")
    extract_dir.mkdir(parents=True, exist_ok=True)

    receipt = powershell.run([
        "Expand-Archive",
        "-Path", _ps_quote(archive),
        "-DestinationPath", _ps_quote(extract_dir),
        "-Force",
    ])
    if not receipt.ok:
        raise ExtractionError(f"Expand-Archive failed for {archive.name}: {receipt.error}")

    return find_single_file(extract_dir, ZIP_BINARY_PATTERN)


def extract_deb(registry: ToolRegistry, package: Path, workspace: Path) -> Path:
    """Unpack a Debian package and return the path of its audiowaveform binary.

    The package's outer ``ar`` container is unpacked into
    ``workspace/unpack``; its data archive is extracted into
    ``workspace/rootfs``.
    """
    ar = _require(registry, AR, "unpack the Debian package")
    tar = _require(registry, TAR, "extract the Debian data archive")

    unpack_dir = workspace / "unpack"
    rootfs_dir = workspace / "rootfs"
    unpack_dir.mkdir(parents=True, exist_ok=True)
    rootfs_dir.mkdir(parents=True, exist_ok=True)

    receipt = ar.run(["x", str(package)], cwd=str(unpack_dir))
    if not receipt.ok:
        raise ExtractionError(f"ar failed to unpack {package.name}: {receipt.error}")

    data_tar = find_single_file(unpack_dir, DEB_DATA_PATTERN)

    receipt = tar.run(["-xf", str(data_tar), "-C", str(rootfs_dir)])
    if not receipt.ok:
        raise ExtractionError(f"tar failed to extract {data_tar.name}: {receipt.error}")

    binary = rootfs_dir.joinpath(*DEB_BINARY_PATH)
    if not binary.is_file():
        raise BinaryNotFoundError("Unable to locate audiowaveform binary in Debian package")
    return binary
