"""
Command tool adapter — run one external executable and capture its output.

This is the only adapter that calls ``subprocess``. Every real tool
(ar, tar, ldd, apt-get, sudo, brew, PowerShell, audiowaveform) is a
``CommandTool`` bound to a different executable.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import time
from datetime import UTC, datetime
from pathlib import Path

from waveform_installer.adapters.base import ToolAdapter, ToolInvocation
from waveform_installer.core.models.receipt import Receipt

logger = logging.getLogger(__name__)


class CommandTool(ToolAdapter):
    """Run an executable found on PATH (or at an explicit path).

    Args:
        tool_name: Identifier used in the registry and in receipts.
        executable: Program name looked up on PATH, or a filesystem path.
            Defaults to ``tool_name``.
        prefix: Fixed leading arguments (e.g. PowerShell's ``-NoProfile``).
        elevate_with: Command prepended when an invocation is ``elevated``
            (e.g. ``["sudo", "-n"]``).
    """

    def __init__(
        self,
        tool_name: str,
        executable: str | os.PathLike[str] | None = None,
        *,
        prefix: list[str] | None = None,
        elevate_with: list[str] | None = None,
    ):
        self._name = tool_name
        self._executable = str(executable) if executable is not None else tool_name
        self._prefix = list(prefix or [])
        self._elevate_with = list(elevate_with or [])

    @property
    def name(self) -> str:
        return self._name

    @property
    def executable(self) -> str:
        return self._executable

    def resolve(self) -> str | None:
        """Absolute path of the executable, or None if it can't be found."""
        if os.sep in self._executable or (os.altsep and os.altsep in self._executable):
            path = Path(self._executable)
            return str(path) if path.exists() else None
        return shutil.which(self._executable)

    def is_available(self) -> bool:
        return self.resolve() is not None

    def validate(self, invocation: ToolInvocation) -> tuple[bool, str]:
        if invocation.cwd and not Path(invocation.cwd).is_dir():
            return False, f"Working directory does not exist: {invocation.cwd}"
        if invocation.elevated and not self._elevate_with:
            return False, f"{self._name} has no elevation wrapper configured"
        return True, ""

    def build_argv(self, invocation: ToolInvocation) -> list[str]:
        """Full argv for an invocation, elevation prefix included."""
        argv = [self.resolve() or self._executable, *self._prefix, *invocation.args]
        if invocation.elevated:
            argv = [*self._elevate_with, *argv]
        return argv

    def execute(self, invocation: ToolInvocation) -> Receipt:
        argv = self.build_argv(invocation)

        logger.debug("Executing: %s (cwd=%s)", " ".join(argv), invocation.cwd)
        started_at = datetime.now(UTC).isoformat()
        start = time.monotonic()

        try:
            result = subprocess.run(
                argv,
                cwd=invocation.cwd,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=invocation.timeout,
            )
        except subprocess.TimeoutExpired:
            return Receipt.failure(
                tool=self._name,
                command=argv,
                started_at=started_at,
                error=f"Command timed out after {invocation.timeout}s",
                metadata={"timeout": invocation.timeout},
            )
        except OSError as e:
            return Receipt.failure(
                tool=self._name,
                command=argv,
                started_at=started_at,
                error=f"Command execution error: {e}",
            )

        elapsed_ms = int((time.monotonic() - start) * 1000)
        stdout = result.stdout or ""
        stderr = result.stderr or ""

        if result.returncode == 0:
            return Receipt.success(
                tool=self._name,
                command=argv,
                started_at=started_at,
                output=stdout,
                duration_ms=elapsed_ms,
                metadata={"stderr": stderr},
            )

        return Receipt.failure(
            tool=self._name,
            command=argv,
            started_at=started_at,
            error=stderr or f"Command exited with code {result.returncode}",
            output=stdout,
            return_code=result.returncode,
            duration_ms=elapsed_ms,
        )
