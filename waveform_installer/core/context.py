"""
Installer context — the configuration the module-level helpers use.

Set once by whichever entry point starts the process:

    - CLI:     main.py   → context.set_config(load_config(...))
    - Library: first call to get_config() loads it lazily
    - Tests:   conftest  → context.set_config(InstallerConfig(install_root=tmp_path))

Module-level singleton (not a class). Callers that need isolation
construct their own ``Waveform`` / ``Installer`` with an explicit config.
"""

from __future__ import annotations

from typing import Optional

from waveform_installer.core.models.config import InstallerConfig

_config: Optional[InstallerConfig] = None


def set_config(config: Optional[InstallerConfig]) -> None:
    """Register the configuration for the current process (None resets it)."""
    global _config
    _config = config


def get_config() -> InstallerConfig:
    """Return the active configuration, loading it on first use."""
    global _config
    if _config is None:
        from waveform_installer.core.config.loader import load_config

        _config = load_config()
    return _config
