"""Data models used by the import pipeline."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(slots=True)
class Chunk:
    """A contiguous slice of the trimmed source document."""

    index: int
    start: int
    end: int
    text: str


@dataclass(slots=True)
class ParsedQuestion:
    """Structured result of one canonical question block."""

    text: str
    options: List[str]
    correct: int = 0
    explanation: str = ""
    image: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "text": self.text,
            "options": list(self.options),
            "correct": self.correct,
            "explanation": self.explanation,
        }
        if self.image:
            payload["image"] = self.image
        return payload


@dataclass(slots=True)
class ParseReport:
    """Parsed questions together with per-block diagnostics."""

    questions: List[ParsedQuestion]
    block_count: int
    dropped_blocks: List[int] = field(default_factory=list)
    unmarked: List[int] = field(default_factory=list)


@dataclass(slots=True)
class ExamMetadata:
    """Closed set of exam attributes supplied by the caller."""

    title: str
    subject_id: str
    time_minutes: int

    def __post_init__(self) -> None:
        self.title = self.title.strip()
        if not self.title:
            raise ValueError("title must not be blank")
        if not self.subject_id:
            raise ValueError("subject_id must not be empty")
        if isinstance(self.time_minutes, bool) or not isinstance(self.time_minutes, int):
            raise ValueError("time_minutes must be an integer")
        if self.time_minutes <= 0:
            raise ValueError("time_minutes must be a positive integer")


@dataclass(slots=True)
class ExamQuestion:
    """A parsed question numbered within its exam."""

    id: int
    question: ParsedQuestion

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, **self.question.to_dict()}


@dataclass(slots=True)
class ExamImportRequest:
    """An assembled exam ready to be handed to a repository."""

    metadata: ExamMetadata
    questions: List[ExamQuestion]

    def to_record(self) -> Dict[str, Any]:
        return {
            "title": self.metadata.title,
            "subjectId": self.metadata.subject_id,
            "timeMinutes": self.metadata.time_minutes,
            "questions": [question.to_dict() for question in self.questions],
        }


@dataclass(slots=True)
class StoredExam:
    """An exam record as persisted by a repository."""

    exam_id: str
    created_at: str
    request: ExamImportRequest
    created_by: Optional[str] = None

    def to_record(self) -> Dict[str, Any]:
        record = {"id": self.exam_id, **self.request.to_record(), "createdAt": self.created_at}
        if self.created_by:
            record["createdBy"] = self.created_by
        return record

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "StoredExam":
        metadata = ExamMetadata(
            title=record["title"],
            subject_id=record["subjectId"],
            time_minutes=int(record["timeMinutes"]),
        )
        questions = [
            ExamQuestion(
                id=int(item["id"]),
                question=ParsedQuestion(
                    text=item["text"],
                    options=list(item["options"]),
                    correct=int(item.get("correct", 0)),
                    explanation=item.get("explanation", ""),
                    image=item.get("image"),
                ),
            )
            for item in record.get("questions", [])
        ]
        return cls(
            exam_id=record["id"],
            created_at=record["createdAt"],
            request=ExamImportRequest(metadata=metadata, questions=questions),
            created_by=record.get("createdBy"),
        )
