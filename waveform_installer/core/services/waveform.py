"""
Waveform façade — everything callers need to use the installed binary.

    wf = Waveform()
    wf.ensure_installed()                      # install on first use
    wf.build_command(["--version"])            # [<binary>, "--version"]
    wf.run("--version").text()                 # shell-style invocation
    wf.generate({"input": "tone.wav"})         # → Path("tone.png")

Installation is lazy and idempotent: the binary is installed the first
time it is needed and never again while the file exists.
"""

from __future__ import annotations

import logging
import shlex
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, model_validator

from waveform_installer.adapters.registry import ToolRegistry
from waveform_installer.adapters.shell.command import CommandTool
from waveform_installer.core.errors import WaveformGenerationError
from waveform_installer.core.models.config import InstallerConfig
from waveform_installer.core.models.receipt import Receipt
from waveform_installer.core.services.installer.orchestration.orchestrator import (
    Installer,
)

logger = logging.getLogger(__name__)

DEFAULT_IMAGE_SUFFIX = ".png"


def split_arguments(command_line: str, *, windows: bool = False) -> list[str]:
    """Split a command-line string into arguments.

    POSIX rules by default. With ``windows`` set, backslashes are literal
    and one pair of surrounding quotes is removed from each argument, so
    ``C:\\audio\\tone.wav`` survives intact.
    """
    if not windows:
        return shlex.split(command_line)
    args = []
    for token in shlex.split(command_line, posix=False):
        if len(token) >= 2 and token[0] == token[-1] and token[0] in "\"'":
            token = token[1:-1]
        args.append(token)
    return args


class GenerateOptions(BaseModel):
    """Arguments for one waveform image render."""

    input: Path
    output: Path | None = None
    bits: Literal[8, 16] = 8
    zoom: int = Field(default=64, gt=0)

    @model_validator(mode="after")
    def _default_output(self) -> GenerateOptions:
        if self.output is None:
            self.output = self.input.with_suffix(DEFAULT_IMAGE_SUFFIX)
        return self

    @property
    def output_path(self) -> Path:
        """The image path, defaulted from ``input`` when ``output`` is unset."""
        if self.output is not None:
            return self.output
        return self.input.with_suffix(DEFAULT_IMAGE_SUFFIX)

    def to_args(self) -> list[str]:
        return [
            "-i", str(self.input),
            "-o", str(self.output_path),
            "--bits", str(self.bits),
            "--zoom", str(self.zoom),
        ]


class Waveform:
    """Façade over the installed audiowaveform binary.

    Args:
        config: Installer configuration (default: the active context config).
        registry: Tools passed to the installer.
        installer: Pre-built installer, mostly for tests.
    """

    def __init__(
        self,
        config: InstallerConfig | None = None,
        registry: ToolRegistry | None = None,
        installer: Installer | None = None,
    ):
        if config is None:
            from waveform_installer.core.context import get_config

            config = installer.config if installer is not None else get_config()
        self.config = config
        self._registry = registry
        self._installer = installer

    @property
    def installer(self) -> Installer:
        if self._installer is None:
            self._installer = Installer(self.config, self._registry)
        return self._installer

    @property
    def binary_path(self) -> Path:
        """Install Target path (whether or not it exists yet)."""
        return self.installer.target

    def has_binary(self) -> bool:
        return self.binary_path.is_file()

    def ensure_installed(self) -> Path:
        """Install audiowaveform unless it is already present.

        Returns:
            The Install Target path.
        """
        if self.has_binary():
            return self.binary_path
        logger.info("audiowaveform not found at %s, installing", self.binary_path)
        return self.installer.install()

    def install(self, force: bool = False) -> Path:
        """Install, reinstalling over an existing binary when ``force`` is set."""
        if force:
            return self.installer.install()
        return self.ensure_installed()

    def build_command(self, args: Sequence[str] = ()) -> list[str]:
        """Prepend the binary path to ``args``."""
        return [str(self.binary_path), *args]

    def _tool(self) -> CommandTool:
        return CommandTool("audiowaveform", self.ensure_installed())

    def run(self, args: str | Sequence[str] = ()) -> Receipt:
        """Run the binary with ``args`` and return its receipt.

        A string is split shell-style, so ``run("-i 'my file.wav' -o out.png")``
        works; on Windows backslashes in paths are kept. Non-zero exits are
        reported in the receipt, not raised.
        """
        if isinstance(args, str):
            argv = split_arguments(args, windows=self.installer.platform.is_windows)
        else:
            argv = [str(a) for a in args]
        return self._tool().run(argv, timeout=self.config.command_timeout)

    def generate(self, options: GenerateOptions | Mapping[str, Any]) -> Path:
        """Render a waveform image and return the output path.

        Raises:
            WaveformGenerationError: If audiowaveform exits non-zero.
        """
        if not isinstance(options, GenerateOptions):
            options = GenerateOptions.model_validate(options)

        receipt = self.run(options.to_args())
        if not receipt.ok:
            raise WaveformGenerationError(receipt.exit_code, receipt.error or "")

        logger.info("Waveform written to %s", options.output_path)
        return options.output_path
