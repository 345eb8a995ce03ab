"""
Custom exceptions for findings.
"""


class FindingsError(Exception):
    """Raised when a report section has no observations to rank."""
    pass
