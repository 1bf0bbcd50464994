"""
Shared test fixtures and configuration.
"""

from __future__ import annotations

import io
import logging
from pathlib import Path

import pytest

from waveform_installer.adapters.mock import MockTool
from waveform_installer.adapters.registry import (
    APT_GET,
    AR,
    BREW,
    LDD,
    POWERSHELL,
    SUDO,
    SYSTEM_AUDIOWAVEFORM,
    TAR,
    ToolRegistry,
)
from waveform_installer.core import context
from waveform_installer.core.models.config import InstallerConfig
from waveform_installer.core.observability.logging_config import PACKAGE_LOGGER


@pytest.fixture(autouse=True)
def _reset_context():
    """Keep the process-wide config from leaking between tests."""
    context.set_config(None)
    yield
    context.set_config(None)


@pytest.fixture(autouse=True)
def _reset_logging():
    """Drop handlers added by setup_logging() during a test."""
    yield
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def install_root(tmp_path: Path) -> Path:
    """Return a temporary install root."""
    root = tmp_path / "root"
    root.mkdir()
    return root


@pytest.fixture
def linux_config(install_root: Path) -> InstallerConfig:
    return InstallerConfig(install_root=install_root, os="linux", arch="x86_64")


@pytest.fixture
def windows_config(install_root: Path) -> InstallerConfig:
    return InstallerConfig(install_root=install_root, os="Windows", arch="AMD64")


@pytest.fixture
def darwin_config(install_root: Path) -> InstallerConfig:
    return InstallerConfig(install_root=install_root, os="Darwin", arch="arm64")


@pytest.fixture
def mock_registry() -> ToolRegistry:
    """Registry where every tool is a MockTool that succeeds silently."""
    registry = ToolRegistry()
    for name in (AR, TAR, POWERSHELL, LDD, APT_GET, SUDO, BREW):
        registry.register(MockTool(name))
    registry.register(MockTool(SYSTEM_AUDIOWAVEFORM, available=False))
    return registry


class FakeDownloader:
    """Stand-in for ``download()`` that writes fixed bytes and logs calls."""

    def __init__(self, content: bytes = b"asset"):
        self.content = content
        self.calls: list[tuple[str, Path]] = []

    def __call__(self, url: str, destination: Path, *, timeout=None) -> Path:
        self.calls.append((url, destination))
        destination.write_bytes(self.content)
        return destination


@pytest.fixture
def fake_downloader() -> FakeDownloader:
    return FakeDownloader()


class FakeResponse(io.BytesIO):
    """Minimal ``urlopen`` response."""

    def __init__(self, body: bytes, status: int = 200):
        super().__init__(body)
        self.status = status

    def getcode(self) -> int:
        return self.status

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
        return False


@pytest.fixture
def fake_response():
    """Factory for fake ``urlopen`` responses."""
    return FakeResponse
