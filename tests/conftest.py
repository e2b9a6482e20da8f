"""Shared fixtures for the import pipeline tests."""
from __future__ import annotations

import asyncio
from typing import Dict, List

import pytest

from examprep.ingest import DELIMITER
from examprep.providers import ExamNormalizer
from examprep.services.importer import ImportService
from examprep.storage import InMemoryExamRepository


def make_block(
    question: str,
    options: List[str],
    correct: int | None = None,
    explanation: str = "",
) -> str:
    lines = ["[Question]", question]
    for index, option in enumerate(options):
        marker = "*" if index == correct else ""
        lines.append(f"{marker}{'ABCD'[index]}. {option}")
    lines.extend(["[Explanation]", explanation])
    return "\n".join(lines)


def join_blocks(*blocks: str) -> str:
    return f"\n{DELIMITER}\n".join(blocks)


class RecordingNormalizer(ExamNormalizer):
    """Normaliser that wraps each chunk in a numbered canonical block."""

    name = "recording"

    def __init__(self, delays: Dict[int, float] | None = None, failures: Dict[int, Exception] | None = None) -> None:
        self.delays = delays or {}
        self.failures = failures or {}
        self.calls: List[tuple[str, str]] = []
        self.completed: List[int] = []

    async def normalize(self, chunk: str, kind: str) -> str:
        index = len(self.calls)
        self.calls.append((chunk, kind))
        await asyncio.sleep(self.delays.get(index, 0))
        if index in self.failures:
            raise self.failures[index]
        self.completed.append(index)
        return make_block(f"Question from chunk {index}", ["yes", "no"], correct=0)


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def repository() -> InMemoryExamRepository:
    return InMemoryExamRepository()


@pytest.fixture
def normalizer() -> RecordingNormalizer:
    return RecordingNormalizer()


@pytest.fixture
def service(normalizer: RecordingNormalizer, repository: InMemoryExamRepository) -> ImportService:
    return ImportService(normalizer=normalizer, repository=repository)
