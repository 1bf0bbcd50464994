"""
L4 Execution — functions that WRITE to the system.

Downloads, archive extraction and package installation.
"""
