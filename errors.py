from typing import Iterable, List


class ScannerError(Exception):
    """Base class for errors raised by the scanner backend."""


class ValidationError(ScannerError):
    """A submitted scan result is missing fields or has invalid values."""

    def __init__(self, message: str, fields: Iterable[str] = ()):
        super().__init__(message)
        self.message = message
        self.fields: List[str] = list(fields)


class PersistenceError(ScannerError):
    """The result store could not be reached or the operation failed."""
