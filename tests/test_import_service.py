"""Tests for the import orchestration service."""

from __future__ import annotations

import logging

import pytest
from conftest import join_blocks, make_block

from examprep.config import Settings
from examprep.errors import ChunkNormalizationError, EmptyImportError
from examprep.ingest import DELIMITER, ExamMetadata, chunk_text, parse_exam_text
from examprep.ingest.pipeline import DocumentPipeline, DocumentPipelineConfig
from examprep.logging_config import AUDIT_LOGGER_NAME
from examprep.providers import NormalizerError, PassthroughNormalizer
from examprep.services.importer import ImportService, build_import_service
from examprep.storage import InMemoryExamRepository, StorageError, reset_exam_repository_cache


def _metadata(title: str = "Mock exam") -> ExamMetadata:
    return ExamMetadata(title=title, subject_id="toan", time_minutes=50)


def _three_chunks() -> list:
    text = "\n\n".join(["a" * 30, "b" * 30, "c" * 30])
    return chunk_text(text, chunk_size=30, window=5)


@pytest.mark.anyio
async def test_results_are_joined_in_chunk_order_despite_completion_order(service, normalizer):
    normalizer.delays = {0: 0.05, 1: 0.0, 2: 0.02}
    chunks = _three_chunks()
    assert len(chunks) == 3

    result = await service.normalize_chunks(chunks, "practice")

    assert normalizer.completed != [0, 1, 2]
    assert result.chunk_count == 3
    assert result.text.count(DELIMITER) == 2
    questions = parse_exam_text(result.text)
    assert [question.text for question in questions] == [
        "Question from chunk 0",
        "Question from chunk 1",
        "Question from chunk 2",
    ]
    assert [kind for _, kind in normalizer.calls] == ["practice"] * 3


@pytest.mark.anyio
async def test_lowest_index_failure_is_reported(service, normalizer):
    normalizer.failures = {1: NormalizerError("boom one"), 2: NormalizerError("boom two")}
    normalizer.delays = {1: 0.03, 2: 0.0}

    with pytest.raises(ChunkNormalizationError) as excinfo:
        await service.normalize_chunks(_three_chunks(), "practice")

    error = excinfo.value
    assert error.chunk_index == 1
    assert error.chunk_count == 3
    assert "part 2/3" in str(error)
    assert isinstance(error.__cause__, NormalizerError)
    assert normalizer.completed == [0]


@pytest.mark.anyio
async def test_normalize_document_cleans_and_chunks_raw_text(repository):
    service = ImportService(
        normalizer=PassthroughNormalizer(),
        repository=repository,
        pipeline=DocumentPipeline(DocumentPipelineConfig(chunk_chars=4000, window_chars=500)),
    )
    raw = make_block("Carry over?", ["yes", "no"], correct=0).replace("\n", "\r\n") + "   \r\n\r\n\r\n"

    result = await service.normalize_document(raw, "practice")

    assert result.chunk_count == 1
    assert parse_exam_text(result.text)[0].text == "Carry over?"


@pytest.mark.anyio
async def test_empty_document_produces_no_chunks(service, normalizer):
    result = await service.normalize_document("   ", "practice")

    assert result.text == ""
    assert result.chunk_count == 0
    assert normalizer.calls == []


@pytest.mark.anyio
async def test_normalize_upload_extracts_text(service, normalizer):
    result = await service.normalize_upload(b"Raw notes about water.", "notes.txt", "theory")

    assert normalizer.calls == [("Raw notes about water.", "theory")]
    assert result.chunk_count == 1


def test_parse_reports_unmarked_questions(service, caplog):
    text = join_blocks(make_block("Marked", ["a", "b"], correct=1), make_block("Unmarked", ["a", "b"]))

    with caplog.at_level(logging.WARNING, logger="examprep.services.importer"):
        report = service.parse(text)

    assert report.unmarked == [1]
    assert "no marked answer" in caplog.text


def test_import_stores_numbered_questions_and_audits(service, repository, caplog):
    text = join_blocks(
        make_block("One?", ["a", "b"], correct=1, explanation="why"),
        "garbage block",
        make_block("Two?", ["c", "d", "e"], correct=2),
    )
    audit_logger = logging.getLogger(AUDIT_LOGGER_NAME)
    audit_logger.addHandler(caplog.handler)
    try:
        with caplog.at_level(logging.INFO, logger=AUDIT_LOGGER_NAME):
            stored = service.import_exam(text, _metadata(), created_by="author-7")
    finally:
        audit_logger.removeHandler(caplog.handler)

    assert repository.get_exam(stored.exam_id) is stored
    record = stored.to_record()
    assert record["title"] == "Mock exam"
    assert record["createdBy"] == "author-7"
    assert [question["id"] for question in record["questions"]] == [1, 2]
    assert record["questions"][1]["correct"] == 2

    audit_entries = [r.msg for r in caplog.records if r.name == AUDIT_LOGGER_NAME]
    assert audit_entries
    assert audit_entries[0]["exam_id"] == stored.exam_id
    assert audit_entries[0]["question_count"] == 2


def test_import_without_questions_stores_nothing(service, repository):
    with pytest.raises(EmptyImportError):
        service.import_exam(f"nothing here\n{DELIMITER}\nstill nothing", _metadata())

    assert repository.list_exams() == []


class _FailingRepository(InMemoryExamRepository):
    backend = "failing"

    def create_exam(self, request, created_by=None):
        raise StorageError("disk full")


def test_storage_failure_propagates(normalizer):
    service = ImportService(normalizer=normalizer, repository=_FailingRepository())

    with pytest.raises(StorageError, match="disk full"):
        service.import_exam(make_block("Q?", ["a", "b"], correct=0), _metadata())


def test_build_import_service_uses_settings(monkeypatch):
    monkeypatch.setenv("EXAM_STORE", "memory")
    reset_exam_repository_cache()
    try:
        service = build_import_service(
            Settings(chunk_size=1234, chunk_window=56, normalizer="passthrough", default_subject_id="hoa")
        )
    finally:
        reset_exam_repository_cache()

    assert isinstance(service.normalizer, PassthroughNormalizer)
    assert service.pipeline.config.chunk_chars == 1234
    assert service.pipeline.config.window_chars == 56
    assert service.metadata_for("Exam").subject_id == "hoa"


def test_metadata_for_prefers_explicit_values(service):
    explicit = service.metadata_for("  Physics ", "ly", 90)
    defaulted = service.metadata_for("Maths")

    assert (explicit.title, explicit.subject_id, explicit.time_minutes) == ("Physics", "ly", 90)
    assert (defaulted.subject_id, defaulted.time_minutes) == ("toan", 50)
    with pytest.raises(ValueError):
        service.metadata_for("   ")


def test_build_import_service_uses_configured_store(monkeypatch, tmp_path):
    monkeypatch.delenv("EXAM_STORE", raising=False)
    monkeypatch.delenv("EXAM_PERSIST_DIR", raising=False)
    reset_exam_repository_cache()
    try:
        service = build_import_service(
            Settings(normalizer="passthrough", exam_store="json", exam_persist_dir=str(tmp_path / "exams"))
        )
    finally:
        reset_exam_repository_cache()

    assert service.repository.backend == "json"
    stored = service.import_exam(make_block("Kept?", ["yes", "no"], correct=0), _metadata())
    assert (tmp_path / "exams" / f"{stored.exam_id}.json").exists()
