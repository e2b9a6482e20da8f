"""Base interface for AI normalisers."""

from __future__ import annotations

from abc import ABC, abstractmethod

__all__ = ["ExamNormalizer"]


class ExamNormalizer(ABC):
    """Converts free-form study material into canonical exam text."""

    name: str = "normalizer"

    @abstractmethod
    async def normalize(self, chunk: str, kind: str) -> str:
        """Return canonical text for *chunk*; *kind* is an opaque content tag."""
