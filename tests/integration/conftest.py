"""
Auto-mark all tests in this directory as integration tests.

These install the real audiowaveform release for the running platform
and invoke it, so they need network access and, on Linux, the ability
to install missing shared libraries.

Run ONLY integration tests:
    WAVEFORM_INTEGRATION=1 pytest tests/integration/ -m integration

Run ONLY unit tests (default):
    pytest -m "not integration"
"""

import pytest


def pytest_collection_modifyitems(items):
    """Auto-apply the 'integration' marker to every test in this directory."""
    for item in items:
        if "/integration/" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
