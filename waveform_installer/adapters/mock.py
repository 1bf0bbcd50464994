"""
Mock tool — test double for any external executable.

Simulates tool behavior without touching the system. Configurable to
be unavailable, to return scripted receipts per command, or to run a
handler that fakes side effects (e.g. writing the files an archive
tool would have extracted).
"""

from __future__ import annotations

from collections.abc import Callable

from waveform_installer.adapters.base import ToolAdapter, ToolInvocation
from waveform_installer.core.models.receipt import Receipt

Handler = Callable[[ToolInvocation], Receipt | None]


class MockTool(ToolAdapter):
    """Mock adapter for a single tool.

    By default, returns success for everything. Responses are matched
    on the first argument (the subcommand), falling back to the handler
    and then the default output.
    """

    def __init__(
        self,
        tool_name: str = "mock",
        available: bool = True,
        default_output: str = "",
        handler: Handler | None = None,
        path: str | None = None,
    ):
        self._name = tool_name
        self._path = path
        self._available = available
        self._default_output = default_output
        self._handler = handler
        self._responses: dict[str, list[Receipt]] = {}
        self._call_log: list[ToolInvocation] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def call_log(self) -> list[ToolInvocation]:
        """All invocations this mock has received."""
        return self._call_log

    @property
    def call_count(self) -> int:
        """Number of times execute has been called."""
        return len(self._call_log)

    def is_available(self) -> bool:
        return self._available

    def resolve(self) -> str | None:
        return self._path if self._available else None

    def set_available(self, available: bool, path: str | None = None) -> None:
        self._available = available
        if path is not None:
            self._path = path

    def set_response(self, first_arg: str, *receipts: Receipt) -> None:
        """Queue receipts for invocations starting with ``first_arg``.

        Receipts are consumed in order; the last one repeats.
        """
        self._responses[first_arg] = list(receipts)

    def set_output(self, first_arg: str, *outputs: str) -> None:
        """Queue successful outputs for invocations starting with ``first_arg``."""
        self.set_response(
            first_arg,
            *(Receipt.success(tool=self._name, output=out) for out in outputs),
        )

    def set_failure(self, first_arg: str, error: str = "Mock failure", return_code: int = 1) -> None:
        """Configure invocations starting with ``first_arg`` to fail."""
        self.set_response(
            first_arg,
            Receipt.failure(tool=self._name, error=error, return_code=return_code),
        )

    def validate(self, invocation: ToolInvocation) -> tuple[bool, str]:
        return True, ""

    def execute(self, invocation: ToolInvocation) -> Receipt:
        self._call_log.append(invocation)

        key = invocation.args[0] if invocation.args else ""
        queued = self._responses.get(key)
        if queued:
            receipt = queued.pop(0) if len(queued) > 1 else queued[0]
            return receipt.model_copy(update={"command": list(invocation.args)})

        if self._handler is not None:
            receipt = self._handler(invocation)
            if receipt is not None:
                return receipt

        return Receipt.success(
            tool=self._name,
            command=list(invocation.args),
            output=self._default_output,
            metadata={"mock": True},
        )

    def reset(self) -> None:
        """Clear call log and custom responses."""
        self._call_log.clear()
        self._responses.clear()
