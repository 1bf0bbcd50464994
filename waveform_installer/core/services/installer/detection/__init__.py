"""
L3 Detection — read-only checks and parsers.

These functions READ system state but never WRITE.
"""
