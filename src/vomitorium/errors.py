"""
Exception hierarchy for vomitorium.

Only fatal conditions are raised. Failures tied to a single directory entry
are collected as :class:`vomitorium.core.EntryError` values instead.
"""


class VomitoriumError(Exception):
    """Base exception for vomitorium errors."""


class InvalidRootError(VomitoriumError):
    """Raised when the scan root is missing, not a directory or unreadable."""


class ConfigFileError(VomitoriumError):
    """Raised when a configuration file cannot be read or is malformed."""


class OutputError(VomitoriumError):
    """Raised when the output artifact cannot be created."""
