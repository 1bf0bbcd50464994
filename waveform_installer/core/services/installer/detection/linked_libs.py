"""
L3 Detection — Shared-library dependency parsing.

Turns ``ldd`` output into the set of missing libraries and maps those
onto installable packages. Pure functions; running ``ldd`` itself is
the dependency auditor's job.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from waveform_installer.core.services.installer.data.assets import LIBRARY_PACKAGES

NOT_FOUND_MARKER = "not found"
LDD_SEPARATOR = "=>"


@dataclass
class RemediationPlan:
    """Packages to install for a set of missing libraries."""

    libraries: list[str] = field(default_factory=list)
    packages: list[str] = field(default_factory=list)
    unresolvable: list[str] = field(default_factory=list)

    @property
    def resolvable(self) -> bool:
        return not self.unresolvable


def parse_missing_libraries(ldd_output: str) -> list[str]:
    """Extract library names that ``ldd`` reports as not found.

    A line like ``libmad.so.0 => not found`` yields ``libmad.so.0``.
    Order is preserved, duplicates dropped.

    Example::

        >>> parse_missing_libraries("\\tlibmad.so.0 => not found\\n")
        ['libmad.so.0']
    """
    missing: list[str] = []
    for line in ldd_output.splitlines():
        if NOT_FOUND_MARKER not in line:
            continue
        name = line.split(LDD_SEPARATOR, 1)[0].strip()
        if name and name not in missing:
            missing.append(name)
    return missing


def package_for_library(
    library: str,
    table: dict[str, str] | None = None,
) -> str | None:
    """Map a library name to a package via the longest matching prefix."""
    table = LIBRARY_PACKAGES if table is None else table
    best: str | None = None
    for prefix in table:
        if library.startswith(prefix) and (best is None or len(prefix) > len(best)):
            best = prefix
    return table[best] if best is not None else None


def plan_remediation(
    libraries: list[str],
    table: dict[str, str] | None = None,
) -> RemediationPlan:
    """Split missing libraries into installable packages and leftovers."""
    packages: set[str] = set()
    unresolvable: list[str] = []
    for library in libraries:
        package = package_for_library(library, table)
        if package is None:
            unresolvable.append(library)
        else:
            packages.add(package)
    return RemediationPlan(
        libraries=list(libraries),
        packages=sorted(packages),
        unresolvable=unresolvable,
    )
