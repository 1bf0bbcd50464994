"""
Platform models — what we are running on and what we download for it.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict

StrategyKind = Literal["zip", "deb", "homebrew"]


class PlatformKey(BaseModel):
    """Normalised (operating system, CPU architecture) pair.

    OS tags: ``linux``, ``darwin``, ``windows``.
    Arch tags: ``x64``, ``arm64``, ``ia32``.
    """

    model_config = ConfigDict(frozen=True)

    os: str
    arch: str

    @property
    def is_windows(self) -> bool:
        return self.os == "windows"

    @property
    def binary_name(self) -> str:
        """Platform-appropriate executable name."""
        return "audiowaveform.exe" if self.is_windows else "audiowaveform"

    def __str__(self) -> str:
        return f"{self.os}/{self.arch}"


class AssetDescriptor(BaseModel):
    """A resolved release asset for one platform.

    ``file_name`` is None for platforms served by a system package
    manager instead of a release download.
    """

    model_config = ConfigDict(frozen=True)

    platform: PlatformKey
    kind: StrategyKind
    file_name: str | None = None
