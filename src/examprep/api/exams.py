"""API router exposing normalise, parse and import endpoints for exams."""
from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from pydantic import BaseModel, ConfigDict, Field

from examprep.errors import ChunkNormalizationError, EmptyImportError
from examprep.ingest import ParsedQuestion, StoredExam
from examprep.ingest.extractors import DocumentExtractionError, UnsupportedDocumentError
from examprep.providers import NormalizerConfigurationError
from examprep.services.importer import ImportService, NormalizationResult, get_import_service
from examprep.storage import StorageError

router = APIRouter(prefix="/exams", tags=["exams"])


class NormalizeRequest(BaseModel):
    """Raw study material to rewrite as canonical exam text."""

    text: str = Field(..., min_length=1, description="Pasted study material.")
    kind: str = Field("practice", description="Opaque content tag forwarded to the AI model.")


class NormalizeResponse(BaseModel):
    text: str
    chunk_count: int
    duration_seconds: float


class ParseRequest(BaseModel):
    text: str = Field(..., description="Canonical exam text.")


class QuestionPayload(BaseModel):
    text: str
    options: list[str]
    correct: int
    explanation: str
    image: Optional[str] = None


class ParseResponse(BaseModel):
    questions: list[QuestionPayload]
    block_count: int
    dropped_blocks: list[int]
    unmarked: list[int]


class ImportRequest(BaseModel):
    """Canonical exam text together with the exam metadata."""

    model_config = ConfigDict(populate_by_name=True)

    text: str = Field(..., description="Canonical exam text.")
    title: str = Field(..., min_length=1)
    subject_id: Optional[str] = Field(None, alias="subjectId", min_length=1)
    time_minutes: Optional[int] = Field(None, alias="timeMinutes", ge=1)
    created_by: Optional[str] = Field(None, alias="createdBy")


class ImportResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    exam_id: str = Field(..., alias="examId")
    title: str
    question_count: int = Field(..., alias="questionCount")


def get_exam_import_service() -> ImportService:
    """Resolve the shared service, answering 503 when it cannot be configured."""

    try:
        return get_import_service()
    except (NormalizerConfigurationError, StorageError) as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc


def _question_payload(question: ParsedQuestion) -> QuestionPayload:
    return QuestionPayload(**question.to_dict())


def _normalize_response(result: NormalizationResult) -> NormalizeResponse:
    return NormalizeResponse(
        text=result.text,
        chunk_count=result.chunk_count,
        duration_seconds=result.duration_seconds,
    )


def _exam_record(exam: StoredExam) -> dict[str, Any]:
    return exam.to_record()


@router.post("/normalize", response_model=NormalizeResponse)
async def normalize_text(
    request: NormalizeRequest,
    service: ImportService = Depends(get_exam_import_service),
) -> NormalizeResponse:
    """Rewrite pasted study material into canonical exam text."""

    if not request.text.strip():
        raise HTTPException(status_code=422, detail="Text must not be empty")
    try:
        result = await service.normalize_document(request.text, request.kind)
    except ChunkNormalizationError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    return _normalize_response(result)


@router.post("/normalize/upload", response_model=NormalizeResponse)
async def normalize_upload(
    file: UploadFile = File(...),
    kind: str = Form("practice"),
    service: ImportService = Depends(get_exam_import_service),
) -> NormalizeResponse:
    """Extract an uploaded ``.txt``, ``.docx`` or ``.pdf`` file and normalise it."""

    contents = await file.read()
    try:
        result = await service.normalize_upload(
            contents,
            file.filename or "upload.txt",
            kind,
            mime_type=file.content_type,
        )
    except UnsupportedDocumentError as exc:
        raise HTTPException(status_code=415, detail=str(exc)) from exc
    except DocumentExtractionError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except ChunkNormalizationError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    return _normalize_response(result)


@router.post("/parse", response_model=ParseResponse)
def parse_text(
    request: ParseRequest,
    service: ImportService = Depends(get_exam_import_service),
) -> ParseResponse:
    """Preview the questions canonical text would produce."""

    report = service.parse(request.text)
    return ParseResponse(
        questions=[_question_payload(question) for question in report.questions],
        block_count=report.block_count,
        dropped_blocks=report.dropped_blocks,
        unmarked=report.unmarked,
    )


@router.post("/import", response_model=ImportResponse, response_model_by_alias=True, status_code=201)
def import_exam(
    request: ImportRequest,
    service: ImportService = Depends(get_exam_import_service),
) -> ImportResponse:
    """Parse canonical text and store it as a new exam."""

    try:
        metadata = service.metadata_for(request.title, request.subject_id, request.time_minutes)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    try:
        stored = service.import_exam(request.text, metadata, created_by=request.created_by)
    except EmptyImportError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except StorageError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    return ImportResponse(
        exam_id=stored.exam_id,
        title=metadata.title,
        question_count=len(stored.request.questions),
    )


@router.get("")
def list_exams(service: ImportService = Depends(get_exam_import_service)) -> list[dict[str, Any]]:
    """List stored exams."""

    try:
        exams = service.repository.list_exams()
    except StorageError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    return [_exam_record(exam) for exam in exams]


@router.get("/{exam_id}")
def get_exam(exam_id: str, service: ImportService = Depends(get_exam_import_service)) -> dict[str, Any]:
    """Return one stored exam."""

    try:
        exam = service.repository.get_exam(exam_id)
    except StorageError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    if exam is None:
        raise HTTPException(status_code=404, detail="Exam not found")
    return _exam_record(exam)
