"""
Tool adapter base — the contract between the installer and external tools.

Every external executable the installer touches (archive tools, the
dynamic linker query, the package manager, sudo, Homebrew, the
installed binary itself) is reached through this interface. Services
only talk to tools through adapters, never to ``subprocess`` directly,
which keeps every failure path testable with ``MockTool``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

from pydantic import BaseModel, Field

from waveform_installer.core.models.receipt import Receipt


class ToolInvocation(BaseModel):
    """Everything an adapter needs to run one command."""

    args: list[str] = Field(default_factory=list)
    cwd: str | None = None
    timeout: float | None = None
    elevated: bool = False


class ToolAdapter(ABC):
    """Abstract base class for all tool adapters.

    Adapters perform external side effects and return receipts.
    They NEVER raise exceptions — failures are captured in the Receipt.

    To add a tool:
        1. Subclass ToolAdapter (or configure a ``CommandTool``)
        2. Implement name, is_available, validate, execute
        3. Register it in the ToolRegistry
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """The tool identifier (e.g. 'ldd', 'apt-get', 'tar')."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the underlying executable can be run.

        Should be fast and never raise.
        """

    @abstractmethod
    def validate(self, invocation: ToolInvocation) -> tuple[bool, str]:
        """Validate that the invocation can run.

        Returns:
            (is_valid, error_message). error_message is empty if valid.
        """

    @abstractmethod
    def execute(self, invocation: ToolInvocation) -> Receipt:
        """Run the invocation and return a receipt.

        MUST never raise exceptions.
        """

    def resolve(self) -> str | None:
        """Filesystem path of the executable, when the tool has one."""
        return None

    def run(
        self,
        args: Sequence[str] = (),
        *,
        cwd: str | None = None,
        timeout: float | None = None,
        elevated: bool = False,
    ) -> Receipt:
        """Validate and execute ``args`` in one call."""
        invocation = ToolInvocation(
            args=[str(a) for a in args],
            cwd=cwd,
            timeout=timeout,
            elevated=elevated,
        )
        valid, error = self.validate(invocation)
        if not valid:
            return Receipt.failure(
                tool=self.name,
                command=invocation.args,
                error=f"Validation failed: {error}",
            )
        return self.execute(invocation)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
