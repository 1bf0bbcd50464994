"""
L5 Orchestration — Install workflow.

Ties everything together for one install attempt:

    workspace → install dir → platform/asset → strategy.stage
    → chmod → strategy.verify → atomic rename → remove workspace

The Install Target is only touched by the final ``os.replace``, so a
failed attempt leaves whatever was there before. The workspace is
private to the attempt and always removed.
"""

from __future__ import annotations

import logging
import os
import shutil
import stat
import tempfile
from pathlib import Path

from waveform_installer.adapters.registry import ToolRegistry, default_registry
from waveform_installer.core.errors import filesystem_step
from waveform_installer.core.models.config import InstallerConfig
from waveform_installer.core.models.platform import AssetDescriptor, PlatformKey
from waveform_installer.core.services.installer.detection.platform import (
    detect_platform,
    resolve_asset,
)
from waveform_installer.core.services.installer.execution.dependency_audit import (
    AuditResult,
)
from waveform_installer.core.services.installer.execution.download import download
from waveform_installer.core.services.installer.orchestration.strategies import (
    Downloader,
    InstallStrategy,
    select_strategy,
)

logger = logging.getLogger(__name__)

WORKSPACE_PREFIX = ".audiowaveform-tmp-"


def install_target(config: InstallerConfig, key: PlatformKey | None = None) -> Path:
    """Path the binary is installed to for ``config``."""
    key = key or detect_platform(config.os, config.arch)
    return config.install_dir / key.binary_name


def _make_executable(path: Path) -> None:
    mode = path.stat().st_mode
    os.chmod(path, mode | stat.S_IRWXU | stat.S_IRGRP | stat.S_IXGRP | stat.S_IROTH | stat.S_IXOTH)


class Installer:
    """Install audiowaveform for one configuration.

    Args:
        config: Install root, version and platform overrides.
        registry: External tools; defaults to the real system tools.
        downloader: Asset fetcher, ``download(url, dest, timeout=...)``.
    """

    def __init__(
        self,
        config: InstallerConfig,
        registry: ToolRegistry | None = None,
        downloader: Downloader = download,
    ):
        self.config = config
        self.registry = registry or default_registry()
        self.downloader = downloader
        # Result of the last install's dependency audit (Linux only)
        self.audit: AuditResult | None = None

    @property
    def platform(self) -> PlatformKey:
        return detect_platform(self.config.os, self.config.arch)

    @property
    def target(self) -> Path:
        return install_target(self.config, self.platform)

    def resolve(self) -> AssetDescriptor:
        """Resolve the asset for this platform (no I/O)."""
        return resolve_asset(self.platform, self.config.version)

    def strategy(self, asset: AssetDescriptor | None = None) -> InstallStrategy:
        return select_strategy(
            asset or self.resolve(),
            self.config,
            self.registry,
            downloader=self.downloader,
        )

    def install(self) -> Path:
        """Run a full install and return the Install Target path.

        Raises:
            InstallerError: Any failure, filesystem errors included; the
                workspace is removed regardless.
        """
        self.audit = None
        # Resolve first: unsupported platforms fail before touching disk
        asset = self.resolve()
        strategy = self.strategy(asset)
        target = self.target

        root = self.config.install_root
        with filesystem_step(f"create an install workspace under {root}"):
            root.mkdir(parents=True, exist_ok=True)
            workspace = Path(tempfile.mkdtemp(prefix=WORKSPACE_PREFIX, dir=root))
        logger.debug("Install workspace: %s", workspace)

        try:
            with filesystem_step(f"create {self.config.install_dir}"):
                self.config.install_dir.mkdir(parents=True, exist_ok=True)

            staged = strategy.stage(workspace)

            if strategy.make_executable and not staged.is_symlink():
                with filesystem_step(f"make {staged.name} executable"):
                    _make_executable(staged)

            self.audit = strategy.verify(staged)
            if self.audit is not None:
                logger.debug("Dependency audit: %s", self.audit.to_dict())

            with filesystem_step(f"move audiowaveform into {target}"):
                os.replace(staged, target)
        finally:
            shutil.rmtree(workspace, ignore_errors=True)

        logger.info("Installed audiowaveform to %s", target)
        return target
