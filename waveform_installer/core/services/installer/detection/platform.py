"""
L3 Detection — Platform resolution.

Reads the OS / architecture from the runtime and maps it onto a
release asset. Pure lookups: no network, no filesystem.
"""

from __future__ import annotations

import logging
import platform

from waveform_installer.core.errors import UnsupportedPlatformError
from waveform_installer.core.models.platform import AssetDescriptor, PlatformKey
from waveform_installer.core.services.installer.data.assets import (
    ARCH_ALIASES,
    ASSET_TABLE,
    OS_ALIASES,
    SUPPORTED_TARGETS,
)

logger = logging.getLogger(__name__)


def detect_platform(
    os_override: str | None = None,
    arch_override: str | None = None,
) -> PlatformKey:
    """Normalise the running OS / CPU into a ``PlatformKey``.

    Unknown values are passed through lower-cased so that the resolver
    can report exactly what it saw.
    """
    system = (os_override or platform.system()).lower()
    machine = (arch_override or platform.machine()).lower()
    key = PlatformKey(
        os=OS_ALIASES.get(system, system),
        arch=ARCH_ALIASES.get(machine, machine),
    )
    logger.debug("Detected platform %s (system=%s, machine=%s)", key, system, machine)
    return key


def resolve_asset(key: PlatformKey, version: str) -> AssetDescriptor:
    """Look up the release asset for ``key``.

    Raises:
        UnsupportedPlatformError: If no asset exists for the combination.
    """
    entry = ASSET_TABLE.get((key.os, key.arch))
    if entry is None:
        raise UnsupportedPlatformError(key.os, key.arch, SUPPORTED_TARGETS)

    kind, template = entry
    file_name = template.format(version=version) if template else None
    return AssetDescriptor(platform=key, kind=kind, file_name=file_name)
