"""Repository contract for persisting imported exams."""
from __future__ import annotations

import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import List, Optional

from examprep.ingest.models import ExamImportRequest, StoredExam


class ExamRepository(ABC):
    """Stores finished exams with a single atomic create per import."""

    backend: str = "unknown"

    @abstractmethod
    def create_exam(self, request: ExamImportRequest, created_by: Optional[str] = None) -> StoredExam:
        """Persist *request* and return the stored record with its new id."""

    @abstractmethod
    def get_exam(self, exam_id: str) -> Optional[StoredExam]:
        """Return the exam with *exam_id*, or ``None`` when it does not exist."""

    @abstractmethod
    def list_exams(self) -> List[StoredExam]:
        """Return all stored exams, oldest first."""

    @staticmethod
    def _new_record(request: ExamImportRequest, created_by: Optional[str]) -> StoredExam:
        created_at = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
        return StoredExam(
            exam_id=uuid.uuid4().hex,
            created_at=created_at,
            request=request,
            created_by=created_by,
        )
