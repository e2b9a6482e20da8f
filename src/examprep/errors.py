"""Pipeline level exceptions raised by the import workflow."""
from __future__ import annotations

EMPTY_IMPORT_MESSAGE = "no questions could be extracted; check formatting"


class ExamImportError(RuntimeError):
    """Base class for failures that abort a whole import."""


class EmptyImportError(ExamImportError):
    """Raised when no question survives parsing of an entire import."""

    def __init__(self, message: str = EMPTY_IMPORT_MESSAGE) -> None:
        super().__init__(message)


class ChunkNormalizationError(ExamImportError):
    """Raised when the AI normalisation of a single chunk fails."""

    def __init__(self, chunk_index: int, chunk_count: int, cause: BaseException) -> None:
        super().__init__(f"Normalisation failed for part {chunk_index + 1}/{chunk_count}: {cause}")
        self.chunk_index = chunk_index
        self.chunk_count = chunk_count
        self.__cause__ = cause
