"""
Tool registry — the set of external capabilities the installer may use.

The registry is the single point of tool lookup. Services receive a
registry instead of probing the system themselves, so tests can swap
any tool for a ``MockTool`` (or mark it unavailable) and exercise
every failure path deterministically.
"""

from __future__ import annotations

import logging
from typing import Any

from waveform_installer.adapters.base import ToolAdapter
from waveform_installer.adapters.shell.command import CommandTool

logger = logging.getLogger(__name__)

# Tool names used by the installer services
AR = "ar"
TAR = "tar"
POWERSHELL = "powershell"
LDD = "ldd"
APT_GET = "apt-get"
SUDO = "sudo"
BREW = "brew"
SYSTEM_AUDIOWAVEFORM = "audiowaveform"


class ToolRegistry:
    """Registry of tool adapters keyed by name."""

    def __init__(self) -> None:
        self._tools: dict[str, ToolAdapter] = {}

    def register(self, tool: ToolAdapter) -> None:
        """Register a tool, replacing any previous one with the same name."""
        name = tool.name
        if name in self._tools:
            logger.debug("Overwriting existing tool: %s", name)
        self._tools[name] = tool
        logger.debug("Registered tool: %s", name)

    def get(self, name: str) -> ToolAdapter | None:
        """Look up a tool by name."""
        return self._tools.get(name)

    def available(self, name: str) -> ToolAdapter | None:
        """Look up a tool by name, returning None unless it is available."""
        tool = self._tools.get(name)
        if tool is None:
            return None
        try:
            return tool if tool.is_available() else None
        except Exception:
            logger.debug("Availability check raised for %s", name, exc_info=True)
            return None

    def list_tools(self) -> list[str]:
        """List all registered tool names."""
        return list(self._tools.keys())

    def tool_status(self) -> dict[str, dict[str, Any]]:
        """Get availability status of all registered tools."""
        status = {}
        for name, tool in self._tools.items():
            status[name] = {
                "name": name,
                "available": self.available(name) is not None,
                "type": tool.__class__.__name__,
            }
        return status


def default_registry() -> ToolRegistry:
    """Registry wired to the real system executables."""
    registry = ToolRegistry()
    registry.register(CommandTool(AR))
    registry.register(CommandTool(TAR))
    registry.register(
        CommandTool(
            POWERSHELL,
            prefix=["-NoLogo", "-NoProfile", "-Command"],
        )
    )
    registry.register(CommandTool(LDD))
    registry.register(CommandTool(APT_GET, elevate_with=["sudo", "-n"]))
    registry.register(CommandTool(SUDO))
    registry.register(CommandTool(BREW))
    registry.register(CommandTool(SYSTEM_AUDIOWAVEFORM))
    return registry
