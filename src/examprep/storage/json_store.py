"""Exam repository persisting one JSON document per exam on disk."""
from __future__ import annotations

import json
import logging
import os
import re
import tempfile
from pathlib import Path
from typing import List, Optional

from examprep.ingest.models import ExamImportRequest, StoredExam

from .base import ExamRepository
from .errors import StorageError

LOGGER = logging.getLogger(__name__)

_EXAM_ID_RE = re.compile(r"^[A-Za-z0-9_-]+$")


class JsonFileExamRepository(ExamRepository):
    """Write each exam to ``<persist_dir>/<exam_id>.json``."""

    backend = "json"

    def __init__(self, persist_dir: str | Path) -> None:
        self.persist_dir = Path(persist_dir).resolve()
        try:
            self.persist_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageError(f"Cannot create exam store at {self.persist_dir}", cause=exc) from exc

    def create_exam(self, request: ExamImportRequest, created_by: Optional[str] = None) -> StoredExam:
        stored = self._new_record(request, created_by)
        destination = self._path_for(stored.exam_id)
        payload = json.dumps(stored.to_record(), ensure_ascii=False, indent=2)
        tmp_name: Optional[str] = None
        try:
            fd, tmp_name = tempfile.mkstemp(dir=self.persist_dir, suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(payload)
            os.replace(tmp_name, destination)
        except OSError as exc:
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)
            LOGGER.exception("Failed to write exam %s", stored.exam_id)
            raise StorageError(f"Failed to persist exam {stored.exam_id}", cause=exc) from exc
        LOGGER.info("Persisted exam %s to %s", stored.exam_id, destination)
        return stored

    def get_exam(self, exam_id: str) -> Optional[StoredExam]:
        if not _EXAM_ID_RE.match(exam_id):
            return None
        path = self._path_for(exam_id)
        if not path.exists():
            return None
        try:
            return StoredExam.from_record(json.loads(path.read_text(encoding="utf-8")))
        except (OSError, ValueError, KeyError, TypeError) as exc:
            raise StorageError(f"Failed to read exam {exam_id}", cause=exc) from exc

    def list_exams(self) -> List[StoredExam]:
        exams: List[StoredExam] = []
        for path in sorted(self.persist_dir.glob("*.json")):
            try:
                exams.append(StoredExam.from_record(json.loads(path.read_text(encoding="utf-8"))))
            except (OSError, ValueError, KeyError, TypeError):
                LOGGER.warning("Skipping unreadable exam file %s", path)
        return sorted(exams, key=lambda exam: exam.created_at)

    def _path_for(self, exam_id: str) -> Path:
        return self.persist_dir / f"{exam_id}.json"
