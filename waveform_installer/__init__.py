"""waveform-installer — fetch, install and run the audiowaveform binary.

Module-level helpers use a default ``Waveform`` bound to the active
configuration (see ``core.context``)::

    import waveform_installer as wi

    wi.install()                          # path of the installed binary
    wi.generate({"input": "tone.wav"})    # Path("tone.png")
"""

__version__ = "0.1.0"

from collections.abc import Mapping, Sequence  # noqa: E402
from pathlib import Path  # noqa: E402
from typing import Any  # noqa: E402

from waveform_installer.core.errors import InstallerError  # noqa: E402
from waveform_installer.core.models.receipt import Receipt  # noqa: E402
from waveform_installer.core.services.waveform import (  # noqa: E402
    GenerateOptions,
    Waveform,
)


def _default() -> Waveform:
    return Waveform()


def get_binary_path() -> Path:
    """Install Target path for the active configuration."""
    return _default().binary_path


def has_binary() -> bool:
    """Whether the binary is already installed."""
    return _default().has_binary()


def install(force: bool = False) -> Path:
    """Install audiowaveform if needed and return its path."""
    return _default().install(force=force)


def build_command(args: Sequence[str] = ()) -> list[str]:
    """``[<binary path>, *args]``."""
    return _default().build_command(args)


def run(args: str | Sequence[str] = ()) -> Receipt:
    """Run audiowaveform with shell-style or list arguments."""
    return _default().run(args)


def generate(options: GenerateOptions | Mapping[str, Any]) -> Path:
    """Render a waveform image; see ``Waveform.generate``."""
    return _default().generate(options)


__all__ = [
    "GenerateOptions",
    "InstallerError",
    "Receipt",
    "Waveform",
    "__version__",
    "build_command",
    "generate",
    "get_binary_path",
    "has_binary",
    "install",
    "run",
]
