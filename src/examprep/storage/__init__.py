"""Exam repositories backed by pluggable backends."""

from __future__ import annotations

import os
from functools import lru_cache

from .base import ExamRepository
from .errors import StorageError
from .json_store import JsonFileExamRepository
from .memory_store import InMemoryExamRepository


@lru_cache()
def get_exam_repository(backend: str | None = None, persist_dir: str | None = None) -> ExamRepository:
    """Return a lazily initialised repository, one per backend and directory.

    Arguments left as ``None`` are read from ``EXAM_STORE`` and
    ``EXAM_PERSIST_DIR``.
    """

    backend = (backend or os.getenv("EXAM_STORE", "memory")).strip().lower()

    if backend == "memory":
        return InMemoryExamRepository()

    if backend == "json":
        return JsonFileExamRepository(persist_dir or os.getenv("EXAM_PERSIST_DIR", "exam_store"))

    raise StorageError(f"Unsupported EXAM_STORE backend: {backend!r}")


def reset_exam_repository_cache() -> None:
    """Clear the cached repository (primarily for testing)."""

    get_exam_repository.cache_clear()  # type: ignore[attr-defined]


__all__ = [
    "ExamRepository",
    "InMemoryExamRepository",
    "JsonFileExamRepository",
    "StorageError",
    "get_exam_repository",
    "reset_exam_repository_cache",
]
