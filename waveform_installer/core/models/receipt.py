"""
Receipt model — the result contract for every external tool call.

Tool adapters run commands and return Receipts. Never exceptions.
Services decide which failed receipts are fatal and raise the
matching installer error themselves.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, Field


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class Receipt(BaseModel):
    """Result of running an external tool.

    ``output`` holds stdout, ``error`` holds stderr (or a description
    of why the command could not be started at all).
    """

    tool: str
    command: list[str] = Field(default_factory=list)
    status: Literal["ok", "failed"] = "ok"

    # Set by the adapter around the command; ended_at is when the receipt is built
    started_at: str = Field(default_factory=_now_iso)
    ended_at: str = Field(default_factory=_now_iso)
    duration_ms: int = 0

    return_code: int | None = None
    output: str = ""
    error: str | None = None

    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """Whether the command succeeded."""
        return self.status == "ok"

    @property
    def failed(self) -> bool:
        """Whether the command failed."""
        return self.status == "failed"

    @property
    def exit_code(self) -> int:
        """Exit code, with ``-1`` for commands that never started."""
        return self.return_code if self.return_code is not None else -1

    def text(self) -> str:
        """Captured stdout."""
        return self.output

    @classmethod
    def success(
        cls,
        tool: str,
        command: list[str] | None = None,
        output: str = "",
        **kwargs: Any,
    ) -> Receipt:
        """Create a success receipt."""
        kwargs.setdefault("return_code", 0)
        return cls(
            tool=tool,
            command=command or [],
            status="ok",
            output=output,
            **kwargs,
        )

    @classmethod
    def failure(
        cls,
        tool: str,
        command: list[str] | None = None,
        error: str = "",
        **kwargs: Any,
    ) -> Receipt:
        """Create a failure receipt."""
        return cls(
            tool=tool,
            command=command or [],
            status="failed",
            error=error,
            **kwargs,
        )

