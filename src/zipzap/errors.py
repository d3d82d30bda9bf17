"""
Error types raised by the zipzap engine.

Every failure surfaced to callers derives from ZipzapError, so thin CLI
layers can map the whole family onto an exit status with one handler.
NotFoundError is the expected "no match" outcome of a query rather than
a fault.
"""

from pathlib import Path
from typing import Optional, Union


class ZipzapError(Exception):
    """Base class for all zipzap errors."""
    pass


class StorageError(ZipzapError):
    """Raised when the backing database cannot be created, opened or written."""

    def __init__(self, message: str, path: Optional[Union[str, Path]] = None):
        super().__init__(message)
        self.path = path


class NotFoundError(ZipzapError):
    """Raised when a query has no matching directory."""
    pass


class ParseError(ZipzapError):
    """
    Raised when a legacy import record is malformed.

    Attributes:
        line_number: 1-based line number of the offending record
        line: The raw text of the offending record
    """

    def __init__(self, message: str, line_number: int, line: str):
        super().__init__(f"line {line_number}: {message} in '{line}'")
        self.line_number = line_number
        self.line = line


class PreconditionError(ZipzapError):
    """Raised when caller input violates the engine's contract."""
    pass
