"""
Installer errors — every failure surfaced to callers.

All installer failures derive from ``InstallerError`` so that entry
points can catch one type and print the message. Messages are meant
for humans: they name what was observed and, where possible, the
exact command that fixes it.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager


class InstallerError(Exception):
    """Base class for all installer and invocation failures."""


class UnsupportedPlatformError(InstallerError):
    """No release asset exists for this OS / architecture."""

    def __init__(self, os_name: str, arch: str, supported: dict[str, list[str]]):
        self.os = os_name
        self.arch = arch
        self.supported = supported
        lines = [f"Unsupported platform: {os_name}/{arch}.", "Supported targets:"]
        for name, arches in supported.items():
            lines.append(f"- {name}: {', '.join(arches)}")
        lines.append(
            "If you need another target, install audiowaveform manually "
            "and point your tooling at that binary."
        )
        super().__init__("\n".join(lines))


class DownloadError(InstallerError):
    """The release asset could not be fetched."""

    def __init__(self, url: str, status: int | None = None, reason: str = ""):
        self.url = url
        self.status = status
        if status is not None:
            message = f"Download failed ({status}) for {url}"
        else:
            message = f"Download failed for {url}: {reason}"
        super().__init__(message)


class ExtractionError(InstallerError):
    """An archive tool failed or the expected file was absent."""


class BinaryNotFoundError(InstallerError):
    """The audiowaveform binary is not where the package should put it."""


class FilesystemError(InstallerError):
    """Creating, linking or moving files during an install failed."""

    def __init__(self, action: str, error: OSError):
        self.action = action
        self.error = error
        super().__init__(f"Could not {action}: {error}")


@contextmanager
def filesystem_step(action: str) -> Iterator[None]:
    """Re-raise any ``OSError`` inside the block as ``FilesystemError``."""
    try:
        yield
    except OSError as e:
        raise FilesystemError(action, e) from e


class MissingToolError(InstallerError):
    """A required external tool is not available."""

    def __init__(self, tool: str, message: str):
        self.tool = tool
        super().__init__(message)


class UnresolvableLibrariesError(InstallerError):
    """Missing shared libraries with no known package mapping."""

    def __init__(self, libraries: list[str], packages: list[str] | None = None):
        self.libraries = libraries
        self.packages = packages or []
        super().__init__(
            "audiowaveform needs shared libraries that could not be mapped "
            f"to packages: {', '.join(libraries)}. "
            "Install them manually with your system package manager."
        )


class InsufficientPrivilegeError(InstallerError):
    """Missing libraries can't be installed without elevation."""

    def __init__(self, message: str, command: str):
        self.command = command
        super().__init__(message)


class RemediationError(InstallerError):
    """Installing packages failed, or libraries were still missing afterwards."""

    def __init__(self, message: str, libraries: list[str] | None = None):
        self.libraries = libraries or []
        super().__init__(message)


class WaveformGenerationError(InstallerError):
    """The installed binary exited with a non-zero code."""

    def __init__(self, exit_code: int, stderr: str = ""):
        self.exit_code = exit_code
        self.stderr = stderr
        detail = stderr.strip()
        message = f"audiowaveform failed (exit {exit_code})"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
