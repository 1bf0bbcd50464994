"""
L5 Orchestration — Per-platform install strategies.

A closed set of variants, chosen once from the resolved asset:

    ZipStrategy       windows  download zip → Expand-Archive → find .exe
    DebStrategy       linux    download .deb → ar/tar → ldd audit
    HomebrewStrategy  darwin   reuse PATH binary or ``brew install``

Each strategy stages a binary inside the install attempt's workspace.
The orchestrator then makes it executable, calls ``verify`` and moves
it into place.
"""

from __future__ import annotations

import logging
import os
from abc import ABC, abstractmethod
from collections.abc import Callable
from pathlib import Path

from waveform_installer.adapters.registry import BREW, SYSTEM_AUDIOWAVEFORM, ToolRegistry
from waveform_installer.core.errors import (
    BinaryNotFoundError,
    MissingToolError,
    RemediationError,
    filesystem_step,
)
from waveform_installer.core.models.config import InstallerConfig
from waveform_installer.core.models.platform import AssetDescriptor
from waveform_installer.core.services.installer.data.assets import HOMEBREW_FORMULA
from waveform_installer.core.services.installer.execution.dependency_audit import (
    AuditResult,
    DependencyAuditor,
)
from waveform_installer.core.services.installer.execution.download import (
    download,
    release_url,
)
from waveform_installer.core.services.installer.execution.extract import (
    extract_deb,
    extract_zip,
)

logger = logging.getLogger(__name__)

Downloader = Callable[..., Path]


class InstallStrategy(ABC):
    """How to obtain the binary on one platform."""

    kind: str = ""
    # chmod 0o755 after staging
    make_executable: bool = True

    def __init__(
        self,
        asset: AssetDescriptor,
        config: InstallerConfig,
        registry: ToolRegistry,
        downloader: Downloader = download,
    ):
        self.asset = asset
        self.config = config
        self.registry = registry
        self.downloader = downloader

    @abstractmethod
    def stage(self, workspace: Path) -> Path:
        """Produce the binary somewhere inside ``workspace`` and return its path."""

    def verify(self, staged: Path) -> AuditResult | None:
        """Check the staged binary before it is moved into place."""
        return None

    def fetch(self, workspace: Path) -> Path:
        """Download the release asset into ``workspace``."""
        if self.asset.file_name is None:
            raise ValueError(f"{self.kind} asset for {self.asset.platform} has no file to download")
        url = release_url(self.config.base_url, self.config.version, self.asset.file_name)
        destination = workspace / self.asset.file_name
        return self.downloader(url, destination, timeout=self.config.download_timeout)


class ZipStrategy(InstallStrategy):
    """Windows: zip archive expanded with PowerShell."""

    kind = "zip"
    make_executable = False

    def stage(self, workspace: Path) -> Path:
        archive = self.fetch(workspace)
        return extract_zip(self.registry, archive, workspace / "extract")


class DebStrategy(InstallStrategy):
    """Linux: Debian package unpacked with ar/tar, then audited with ldd."""

    kind = "deb"

    def __init__(self, *args, auditor: DependencyAuditor | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.auditor = auditor or DependencyAuditor(
            self.registry,
            auto_install=self.config.auto_install_dependencies,
            timeout=self.config.command_timeout,
        )

    def stage(self, workspace: Path) -> Path:
        package = self.fetch(workspace)
        return extract_deb(self.registry, package, workspace)

    def verify(self, staged: Path) -> AuditResult:
        return self.auditor.audit(staged)


class HomebrewStrategy(InstallStrategy):
    """macOS: link to a PATH or Homebrew-installed binary."""

    kind = "homebrew"
    make_executable = False

    def _system_binary(self) -> str | None:
        tool = self.registry.available(SYSTEM_AUDIOWAVEFORM)
        return tool.resolve() if tool is not None else None

    def stage(self, workspace: Path) -> Path:
        binary = self._system_binary()

        if binary is None:
            brew = self.registry.available(BREW)
            if brew is None:
                raise MissingToolError(
                    BREW,
                    "\n".join([
                        "audiowaveform is not installed and Homebrew is not available.",
                        "Install Homebrew first: https://brew.sh",
                        "Then re-run: waveform-installer install",
                    ]),
                )

            logger.info("Installing audiowaveform via Homebrew...")
            receipt = brew.run(["install", HOMEBREW_FORMULA], timeout=self.config.command_timeout)
            if not receipt.ok:
                raise RemediationError(
                    f"brew install {HOMEBREW_FORMULA} failed: {receipt.error}",
                )
            binary = self._system_binary()

        if binary is None:
            raise BinaryNotFoundError("Unable to locate audiowaveform after Homebrew install")

        link = workspace / self.asset.platform.binary_name
        with filesystem_step(f"link {binary} into the install workspace"):
            os.symlink(binary, link)
        return link


STRATEGIES: dict[str, type[InstallStrategy]] = {
    ZipStrategy.kind: ZipStrategy,
    DebStrategy.kind: DebStrategy,
    HomebrewStrategy.kind: HomebrewStrategy,
}


def select_strategy(
    asset: AssetDescriptor,
    config: InstallerConfig,
    registry: ToolRegistry,
    downloader: Downloader = download,
) -> InstallStrategy:
    """Instantiate the strategy for ``asset.kind``."""
    return STRATEGIES[asset.kind](asset, config, registry, downloader=downloader)
