"""Wrap parsed questions into an exam record."""
from __future__ import annotations

from typing import Sequence

from examprep.errors import EmptyImportError

from .models import ExamImportRequest, ExamMetadata, ExamQuestion, ParsedQuestion


def assemble_exam(questions: Sequence[ParsedQuestion], metadata: ExamMetadata) -> ExamImportRequest:
    """Number *questions* from 1 in list order and attach the exam metadata."""

    if not questions:
        raise EmptyImportError()
    numbered = [ExamQuestion(id=index, question=question) for index, question in enumerate(questions, start=1)]
    return ExamImportRequest(metadata=metadata, questions=numbered)
