"""Common exceptions for exam repositories."""
from __future__ import annotations


class StorageError(RuntimeError):
    """Raised when an exam repository cannot be initialised, read or written."""

    def __init__(self, message: str, *, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.__cause__ = cause
