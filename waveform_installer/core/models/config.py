"""
Installer configuration model.

Loaded from ``waveform.yml`` and environment variables by
``core.config.loader``. Passed explicitly into the installer so that
tests and parallel runs can each use their own install root.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field, field_validator

DEFAULT_VERSION = "1.10.2"
DEFAULT_BASE_URL = "https://github.com/bbc/audiowaveform/releases/download"
INSTALL_DIR_NAME = ".audiowaveform"


class InstallerConfig(BaseModel):
    """Where and what to install."""

    install_root: Path = Field(default_factory=Path.home)
    version: str = DEFAULT_VERSION
    base_url: str = DEFAULT_BASE_URL

    # Platform overrides — None means detect at call time
    os: str | None = None
    arch: str | None = None

    auto_install_dependencies: bool = True

    download_timeout: float | None = None
    command_timeout: float | None = None

    @field_validator("install_root", mode="before")
    @classmethod
    def _expand_root(cls, value: object) -> object:
        if isinstance(value, str):
            return Path(value).expanduser()
        if isinstance(value, Path):
            return value.expanduser()
        return value

    @field_validator("base_url")
    @classmethod
    def _strip_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @property
    def install_dir(self) -> Path:
        """Directory that holds the installed binary."""
        return self.install_root / INSTALL_DIR_NAME
