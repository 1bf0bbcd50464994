"""
L4 Execution — Shared-library dependency audit (Linux).

Runs ``ldd`` against the staged binary, maps unresolved libraries to
Debian packages and, when allowed and privileged, installs them with
``apt-get``. The check is re-run once after remediation; anything
still missing is an error.

Privilege rules:
    - Running as root → ``apt-get`` directly.
    - Otherwise ``sudo -n true`` must succeed (no password prompt),
      and ``apt-get`` runs as ``sudo -n apt-get ...``.
    - Anything else → fail with the exact command to run by hand.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from waveform_installer.adapters.registry import APT_GET, LDD, SUDO, ToolRegistry
from waveform_installer.core.errors import (
    InsufficientPrivilegeError,
    MissingToolError,
    RemediationError,
    UnresolvableLibrariesError,
)
from waveform_installer.core.services.installer.data.assets import (
    PACKAGE_MANAGER_INSTALL,
    PACKAGE_MANAGER_UPDATE,
)
from waveform_installer.core.services.installer.detection.linked_libs import (
    RemediationPlan,
    parse_missing_libraries,
    plan_remediation,
)

logger = logging.getLogger(__name__)


def _running_as_root() -> bool:
    geteuid = getattr(os, "geteuid", None)
    return geteuid is not None and geteuid() == 0


def manual_install_command(packages: list[str]) -> str:
    """The command a user can paste to install ``packages`` themselves."""
    joined = " ".join(packages)
    return f"sudo apt-get update && sudo apt-get install -y {joined}"


@dataclass
class AuditResult:
    """Outcome of a successful audit."""

    checked: bool = True
    missing: list[str] = field(default_factory=list)
    installed_packages: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "checked": self.checked,
            "missing": self.missing,
            "installed_packages": self.installed_packages,
        }


class DependencyAuditor:
    """Detect and remediate missing shared libraries of a binary.

    Args:
        registry: Tools to use (``ldd``, ``apt-get``, ``sudo``).
        auto_install: Whether installing packages is permitted at all.
        is_superuser: Privilege check; defaults to ``os.geteuid() == 0``.
        timeout: Timeout applied to every tool call.
    """

    def __init__(
        self,
        registry: ToolRegistry,
        *,
        auto_install: bool = True,
        is_superuser: Callable[[], bool] | None = None,
        timeout: float | None = None,
    ):
        self._registry = registry
        self._auto_install = auto_install
        self._is_superuser = is_superuser or _running_as_root
        self._timeout = timeout

    # ── Detection ───────────────────────────────────────────────

    def missing_libraries(self, binary: Path) -> list[str] | None:
        """Libraries ``ldd`` reports as not found, or None if unchecked."""
        ldd = self._registry.available(LDD)
        if ldd is None:
            logger.warning(
                "ldd not available; skipping shared-library check for %s", binary,
            )
            return None

        receipt = ldd.run([str(binary)], timeout=self._timeout)
        # ldd exits non-zero for some inputs but still prints the table
        text = "\n".join(filter(None, [receipt.output, receipt.error or ""]))
        if not receipt.ok and "not found" not in text:
            logger.warning("ldd failed for %s: %s", binary, receipt.error)
            return None
        return parse_missing_libraries(text)

    # ── Audit ───────────────────────────────────────────────────

    def audit(self, binary: Path) -> AuditResult:
        """Verify (and if needed repair) the shared libraries of ``binary``.

        Raises:
            UnresolvableLibrariesError: Libraries with no package mapping.
            MissingToolError: ``apt-get`` not available.
            InsufficientPrivilegeError: Not allowed or not able to elevate.
            RemediationError: Package install failed or libraries remain.
        """
        missing = self.missing_libraries(binary)
        if missing is None:
            return AuditResult(checked=False)
        if not missing:
            logger.debug("All shared libraries resolved for %s", binary)
            return AuditResult()

        logger.info("Missing shared libraries: %s", ", ".join(missing))
        plan = plan_remediation(missing)
        if not plan.resolvable:
            raise UnresolvableLibrariesError(plan.unresolvable, plan.packages)

        self.remediate(plan)

        remaining = self.missing_libraries(binary) or []
        if remaining:
            raise RemediationError(
                "Shared libraries are still missing after installing "
                f"{', '.join(plan.packages)}: {', '.join(remaining)}",
                libraries=remaining,
            )

        return AuditResult(missing=missing, installed_packages=plan.packages)

    # ── Remediation ─────────────────────────────────────────────

    def remediate(self, plan: RemediationPlan) -> None:
        """Install ``plan.packages`` with apt-get (update, then install)."""
        manual = manual_install_command(plan.packages)
        libraries = ", ".join(plan.libraries)

        if not self._auto_install:
            raise InsufficientPrivilegeError(
                f"audiowaveform is missing shared libraries ({libraries}) and "
                f"automatic installation is disabled. Run:\n  {manual}",
                command=manual,
            )

        apt = self._registry.available(APT_GET)
        if apt is None:
            raise MissingToolError(
                APT_GET,
                f"audiowaveform is missing shared libraries ({libraries}) and "
                f"apt-get is not available. Install the equivalent of:\n  {manual}",
            )

        elevated = self._needs_elevation()
        if elevated is None:
            raise InsufficientPrivilegeError(
                f"audiowaveform is missing shared libraries ({libraries}). "
                f"Installing them needs root privileges. Run:\n  {manual}",
                command=manual,
            )

        logger.info(
            "Installing packages %s%s",
            " ".join(plan.packages), " (via sudo)" if elevated else "",
        )
        for args in (PACKAGE_MANAGER_UPDATE, [*PACKAGE_MANAGER_INSTALL, *plan.packages]):
            receipt = apt.run(args, elevated=elevated, timeout=self._timeout)
            if not receipt.ok:
                raise RemediationError(
                    f"apt-get {' '.join(args)} failed: {receipt.error}",
                    libraries=plan.libraries,
                )

    def _needs_elevation(self) -> bool | None:
        """False if already root, True if passwordless sudo works, else None."""
        if self._is_superuser():
            return False
        sudo = self._registry.available(SUDO)
        if sudo is None:
            return None
        receipt = sudo.run(["-n", "true"], timeout=self._timeout)
        return True if receipt.ok else None
