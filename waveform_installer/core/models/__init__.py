"""
Domain models — Pydantic types for the installer.

All models are re-exported here for convenient access:

    from waveform_installer.core.models import InstallerConfig, PlatformKey, Receipt
"""

from waveform_installer.core.models.config import InstallerConfig
from waveform_installer.core.models.platform import AssetDescriptor, PlatformKey
from waveform_installer.core.models.receipt import Receipt

__all__ = [
    # platform.py
    "AssetDescriptor",
    # config.py
    "InstallerConfig",
    "PlatformKey",
    # receipt.py
    "Receipt",
]
