"""
Error taxonomy for the takeout sync.

ParseError is fatal to one source file, WriteError to one record, and
SetupError to the whole run.
"""
from typing import Optional


class TakeoutSyncError(Exception):
    """Base class for sync errors."""


class ParseError(TakeoutSyncError):
    """Malformed or wrong-shaped input."""


class WriteError(TakeoutSyncError):
    """A store create/modify failed for one record."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class SetupError(TakeoutSyncError):
    """The output location could not be prepared."""
