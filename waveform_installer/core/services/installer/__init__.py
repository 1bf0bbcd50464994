"""
Installer service — package re-exports.

Each symbol lives in its single-responsibility module inside the
appropriate layer (data → detection → execution → orchestration)::

    from waveform_installer.core.services.installer import Installer
"""

# ── L0: Data ──
from waveform_installer.core.services.installer.data.assets import (  # noqa: F401
    ASSET_TABLE,
    LIBRARY_PACKAGES,
    SUPPORTED_TARGETS,
)

# ── L3: Detection ──
from waveform_installer.core.services.installer.detection.linked_libs import (  # noqa: F401
    RemediationPlan,
    package_for_library,
    parse_missing_libraries,
    plan_remediation,
)
from waveform_installer.core.services.installer.detection.platform import (  # noqa: F401
    detect_platform,
    resolve_asset,
)

# ── L4: Execution ──
from waveform_installer.core.services.installer.execution.dependency_audit import (  # noqa: F401
    AuditResult,
    DependencyAuditor,
)
from waveform_installer.core.services.installer.execution.download import (  # noqa: F401
    download,
    release_url,
)
from waveform_installer.core.services.installer.execution.extract import (  # noqa: F401
    extract_deb,
    extract_zip,
    find_single_file,
)

# ── L5: Orchestration ──
from waveform_installer.core.services.installer.orchestration.orchestrator import (  # noqa: F401
    Installer,
    install_target,
)
from waveform_installer.core.services.installer.orchestration.strategies import (  # noqa: F401
    DebStrategy,
    HomebrewStrategy,
    InstallStrategy,
    ZipStrategy,
    select_strategy,
)
