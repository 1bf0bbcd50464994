"""Adapters — bindings for the external tools the installer drives.

Public re-exports for convenient access.
"""

from waveform_installer.adapters.base import ToolAdapter, ToolInvocation
from waveform_installer.adapters.mock import MockTool
from waveform_installer.adapters.registry import ToolRegistry, default_registry
from waveform_installer.adapters.shell.command import CommandTool

__all__ = [
    "CommandTool",
    "MockTool",
    "ToolAdapter",
    "ToolInvocation",
    "ToolRegistry",
    "default_registry",
]
