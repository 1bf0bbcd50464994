"""
Configuration loader — reads waveform.yml and the environment into InstallerConfig.

Precedence, highest first:
    WAVEFORM_* environment variables  >  config file  >  defaults

The config file is either given explicitly or found by walking up from
the working directory.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from waveform_installer.core.models.config import InstallerConfig

logger = logging.getLogger(__name__)

# Default config filename
CONFIG_FILE = "waveform.yml"

# env var → config field
ENV_VARS: dict[str, str] = {
    "WAVEFORM_INSTALL_ROOT": "install_root",
    "WAVEFORM_VERSION": "version",
    "WAVEFORM_BASE_URL": "base_url",
    "WAVEFORM_OS": "os",
    "WAVEFORM_ARCH": "arch",
    "WAVEFORM_AUTO_INSTALL_DEPS": "auto_install_dependencies",
    "WAVEFORM_DOWNLOAD_TIMEOUT": "download_timeout",
    "WAVEFORM_COMMAND_TIMEOUT": "command_timeout",
}


class ConfigError(Exception):
    """Raised when installer configuration is invalid or unreadable."""


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Search for waveform.yml starting from the given directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to waveform.yml, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / CONFIG_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def _read_file(path: Path) -> dict[str, Any]:
    logger.debug("Loading installer config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    # Settings may sit under an "audiowaveform" key or at the top level
    section = data.get("audiowaveform", data)
    if not isinstance(section, dict):
        raise ConfigError(f"Expected 'audiowaveform' to be a mapping in {path}")

    # Relative install roots are relative to the config file
    root = section.get("install_root")
    if isinstance(root, str) and not Path(root).expanduser().is_absolute():
        section = {**section, "install_root": str((path.parent / root).resolve())}

    return section


def _read_env(environ: dict[str, str] | os._Environ[str]) -> dict[str, Any]:
    values: dict[str, Any] = {}
    for var, field in ENV_VARS.items():
        value = environ.get(var)
        if value:
            values[field] = value
    return values


def load_config(
    path: Path | None = None,
    *,
    environ: dict[str, str] | None = None,
    search: bool = True,
) -> InstallerConfig:
    """Load installer configuration.

    Args:
        path: Explicit config file. Must exist if given.
        environ: Environment mapping (default: ``os.environ``).
        search: Whether to look for waveform.yml upward from cwd
            when ``path`` is None.

    Returns:
        Validated InstallerConfig.

    Raises:
        ConfigError: If the file is missing, unreadable or invalid.
    """
    data: dict[str, Any] = {}

    if path is not None:
        if not path.is_file():
            raise ConfigError(f"Config file not found: {path}")
        data.update(_read_file(path))
    elif search:
        found = find_config_file()
        if found is not None:
            data.update(_read_file(found))

    data.update(_read_env(os.environ if environ is None else environ))

    try:
        config = InstallerConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid installer configuration: {e}") from e

    logger.debug("Install root %s, audiowaveform %s", config.install_root, config.version)
    return config
