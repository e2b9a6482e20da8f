"""Simple in-memory exam repository."""
from __future__ import annotations

import logging
import threading
from typing import Dict, List, Optional

from examprep.ingest.models import ExamImportRequest, StoredExam

from .base import ExamRepository

LOGGER = logging.getLogger(__name__)


class InMemoryExamRepository(ExamRepository):
    """Keep exams in a process-local dictionary."""

    backend = "memory"

    def __init__(self) -> None:
        self._exams: Dict[str, StoredExam] = {}
        self._lock = threading.Lock()

    def create_exam(self, request: ExamImportRequest, created_by: Optional[str] = None) -> StoredExam:
        stored = self._new_record(request, created_by)
        with self._lock:
            self._exams[stored.exam_id] = stored
        LOGGER.debug("Stored exam %s with %s questions", stored.exam_id, len(request.questions))
        return stored

    def get_exam(self, exam_id: str) -> Optional[StoredExam]:
        with self._lock:
            return self._exams.get(exam_id)

    def list_exams(self) -> List[StoredExam]:
        with self._lock:
            return sorted(self._exams.values(), key=lambda exam: exam.created_at)
