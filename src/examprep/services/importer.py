"""Orchestration of the exam import workflow."""
from __future__ import annotations

import asyncio
import logging
import time
import uuid
from dataclasses import dataclass
from typing import List, Optional

from examprep.config import DEFAULT_SUBJECT_ID, DEFAULT_TIME_MINUTES, Settings
from examprep.errors import ChunkNormalizationError, EmptyImportError
from examprep.ingest import (
    Chunk,
    ExamMetadata,
    ParseReport,
    StoredExam,
    assemble_exam,
    join_canonical,
    parse_exam_text_report,
)
from examprep.ingest.pipeline import DocumentPipeline, DocumentPipelineConfig
from examprep.logging_config import AUDIT_LOGGER_NAME
from examprep.providers import ExamNormalizer, create_normalizer
from examprep.storage import ExamRepository, StorageError, get_exam_repository
from examprep.telemetry import (
    emit_chunking_event,
    emit_exception,
    emit_normalizer_request,
    emit_normalizer_result,
    emit_parse_event,
    emit_storage_event,
)

LOGGER = logging.getLogger(__name__)
AUDIT_LOGGER = logging.getLogger(AUDIT_LOGGER_NAME)


@dataclass(slots=True)
class NormalizationResult:
    """Canonical text produced from one raw document."""

    text: str
    chunk_count: int
    duration_seconds: float


class ImportService:
    """High level orchestration: chunk, normalise, parse, assemble and store."""

    def __init__(
        self,
        *,
        normalizer: ExamNormalizer,
        repository: ExamRepository,
        pipeline: DocumentPipeline | None = None,
        default_subject_id: str = DEFAULT_SUBJECT_ID,
        default_time_minutes: int = DEFAULT_TIME_MINUTES,
    ) -> None:
        self.normalizer = normalizer
        self.repository = repository
        self.pipeline = pipeline or DocumentPipeline()
        self.default_subject_id = default_subject_id
        self.default_time_minutes = default_time_minutes

    def metadata_for(
        self,
        title: str,
        subject_id: Optional[str] = None,
        time_minutes: Optional[int] = None,
    ) -> ExamMetadata:
        """Build exam metadata, filling the subject and duration from defaults."""

        return ExamMetadata(
            title=title,
            subject_id=subject_id or self.default_subject_id,
            time_minutes=time_minutes if time_minutes is not None else self.default_time_minutes,
        )

    async def normalize_document(self, raw_text: str, kind: str) -> NormalizationResult:
        """Normalise pasted material; see :meth:`normalize_chunks`."""

        return await self.normalize_chunks(self.pipeline.prepare_text(raw_text), kind)

    async def normalize_upload(
        self,
        file_bytes: bytes,
        file_name: str,
        kind: str,
        mime_type: Optional[str] = None,
    ) -> NormalizationResult:
        """Extract an uploaded document and normalise its text."""

        chunks = self.pipeline.prepare_upload(file_bytes, file_name, mime_type)
        return await self.normalize_chunks(chunks, kind)

    async def normalize_chunks(self, chunks: List[Chunk], kind: str) -> NormalizationResult:
        """Send every chunk to the normaliser concurrently and join the results.

        Results are recombined in chunk order. If any chunk fails, the
        lowest-indexed failure is raised as :class:`ChunkNormalizationError`
        once all requests have finished.
        """

        started = time.perf_counter()
        req_id = uuid.uuid4().hex
        emit_chunking_event(
            req_id=req_id,
            kind=kind,
            document_chars=sum(len(chunk.text) for chunk in chunks),
            chunk_sizes=[len(chunk.text) for chunk in chunks],
        )

        outcomes = await asyncio.gather(
            *(self._normalize_chunk(req_id, chunk, kind) for chunk in chunks),
            return_exceptions=True,
        )

        parts: List[str] = []
        for chunk, outcome in zip(chunks, outcomes):
            if isinstance(outcome, BaseException):
                error = ChunkNormalizationError(chunk.index, len(chunks), outcome)
                emit_exception(module=f"{__name__}.normalizer", error=error, req_id=req_id)
                raise error from outcome
            parts.append(outcome)

        duration = time.perf_counter() - started
        LOGGER.info("Normalised %s chunks in %.3fs", len(chunks), duration)
        return NormalizationResult(text=join_canonical(parts), chunk_count=len(chunks), duration_seconds=duration)

    def parse(self, canonical_text: str) -> ParseReport:
        """Parse canonical text for review without storing anything."""

        report = parse_exam_text_report(canonical_text)
        emit_parse_event(
            block_count=report.block_count,
            question_count=len(report.questions),
            dropped_blocks=report.dropped_blocks,
            unmarked=report.unmarked,
        )
        if report.unmarked:
            LOGGER.warning(
                "%s question(s) have no marked answer; defaulting to the first option",
                len(report.unmarked),
            )
        return report

    def import_exam(
        self,
        canonical_text: str,
        metadata: ExamMetadata,
        *,
        created_by: Optional[str] = None,
    ) -> StoredExam:
        """Parse canonical text, assemble the exam and persist it."""

        report = self.parse(canonical_text)
        try:
            request = assemble_exam(report.questions, metadata)
        except EmptyImportError:
            LOGGER.warning(
                "Import %r produced no questions from %s block(s)", metadata.title, report.block_count
            )
            raise

        started = time.perf_counter()
        try:
            stored = self.repository.create_exam(request, created_by=created_by)
        except StorageError as error:
            emit_storage_event(
                backend=self.repository.backend,
                exam_id=None,
                question_count=len(request.questions),
                duration_ms=(time.perf_counter() - started) * 1000.0,
                error=error,
            )
            raise

        emit_storage_event(
            backend=self.repository.backend,
            exam_id=stored.exam_id,
            question_count=len(request.questions),
            duration_ms=(time.perf_counter() - started) * 1000.0,
        )
        AUDIT_LOGGER.info(
            {
                "event": "import",
                "exam_id": stored.exam_id,
                "title": metadata.title,
                "subject_id": metadata.subject_id,
                "question_count": len(request.questions),
                "created_by": created_by,
            }
        )
        return stored

    async def _normalize_chunk(self, req_id: str, chunk: Chunk, kind: str) -> str:
        emit_normalizer_request(
            req_id=req_id,
            chunk_index=chunk.index,
            kind=kind,
            backend=self.normalizer.name,
            chunk_chars=len(chunk.text),
        )
        started = time.perf_counter()
        try:
            text = await self.normalizer.normalize(chunk.text, kind)
        except Exception as error:
            emit_normalizer_result(
                req_id=req_id,
                chunk_index=chunk.index,
                duration_ms=(time.perf_counter() - started) * 1000.0,
                output_preview=None,
                error=error,
            )
            raise
        emit_normalizer_result(
            req_id=req_id,
            chunk_index=chunk.index,
            duration_ms=(time.perf_counter() - started) * 1000.0,
            output_preview=text,
        )
        return text


def build_import_service(settings: Settings | None = None) -> ImportService:
    """Wire an :class:`ImportService` from environment settings."""

    settings = settings or Settings.from_env()
    pipeline = DocumentPipeline(
        DocumentPipelineConfig(chunk_chars=settings.chunk_size, window_chars=settings.chunk_window)
    )
    return ImportService(
        normalizer=create_normalizer(settings),
        repository=get_exam_repository(settings.exam_store, settings.exam_persist_dir),
        pipeline=pipeline,
        default_subject_id=settings.default_subject_id,
        default_time_minutes=settings.default_time_minutes,
    )


_import_service: ImportService | None = None


def get_import_service() -> ImportService:
    """FastAPI dependency returning the shared :class:`ImportService` instance."""

    global _import_service
    if _import_service is None:
        _import_service = build_import_service()
    return _import_service
