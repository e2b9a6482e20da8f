from __future__ import annotations

from typing import Iterator

import pytest
from conftest import RecordingNormalizer, join_blocks, make_block
from fastapi import HTTPException
from fastapi.testclient import TestClient

from examprep.api.exams import get_exam_import_service
from examprep.main import app
from examprep.providers import NormalizerConfigurationError, NormalizerError, PassthroughNormalizer
from examprep.services.importer import ImportService
from examprep.storage import InMemoryExamRepository, StorageError


@pytest.fixture
def service() -> ImportService:
    return ImportService(normalizer=PassthroughNormalizer(), repository=InMemoryExamRepository())


@pytest.fixture
def client(service: ImportService) -> Iterator[TestClient]:
    app.dependency_overrides[get_exam_import_service] = lambda: service
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def _import_payload(text: str, **overrides) -> dict:
    payload = {"text": text, "title": "Algebra quiz", "subjectId": "toan", "timeMinutes": 50}
    payload.update(overrides)
    return payload


def test_read_root_returns_ok() -> None:
    client = TestClient(app)

    assert client.get("/").text == "ok"
    assert client.get("/healthz").text == "ok"


def test_normalize_returns_canonical_text(client: TestClient) -> None:
    canonical = make_block("What is 2+2?", ["3", "4"], correct=1, explanation="Addition.")

    response = client.post("/exams/normalize", json={"text": canonical, "kind": "practice"})

    assert response.status_code == 200
    payload = response.json()
    assert payload["text"] == canonical
    assert payload["chunk_count"] == 1
    assert payload["duration_seconds"] >= 0


def test_normalize_rejects_blank_text(client: TestClient) -> None:
    response = client.post("/exams/normalize", json={"text": "   \n "})

    assert response.status_code == 422


def test_normalize_failure_maps_to_bad_gateway(service: ImportService, client: TestClient) -> None:
    service.normalizer = RecordingNormalizer(failures={0: NormalizerError("quota exceeded")})

    response = client.post("/exams/normalize", json={"text": "raw notes"})

    assert response.status_code == 502
    assert "part 1/1" in response.json()["detail"]
    assert "quota exceeded" in response.json()["detail"]


def test_normalize_upload_reads_text_file(client: TestClient) -> None:
    canonical = make_block("Uploaded?", ["yes", "no"], correct=0, explanation="Uploaded as text.")
    files = {"file": ("exam.txt", canonical.encode("utf-8"), "text/plain")}

    response = client.post("/exams/normalize/upload", files=files, data={"kind": "theory"})

    assert response.status_code == 200
    assert response.json()["text"] == canonical


def test_normalize_upload_rejects_unsupported_format(client: TestClient) -> None:
    files = {"file": ("slides.pptx", b"\x00\x01", "application/octet-stream")}

    response = client.post("/exams/normalize/upload", files=files)

    assert response.status_code == 415


def test_normalize_upload_rejects_empty_file(client: TestClient) -> None:
    files = {"file": ("empty.txt", b"   ", "text/plain")}

    response = client.post("/exams/normalize/upload", files=files)

    assert response.status_code == 400


def test_parse_previews_questions(client: TestClient) -> None:
    text = join_blocks(
        make_block("With image ![fig](https://img.example/1.png)", ["a", "b"], correct=1, explanation="because"),
        "not a question",
        make_block("No marker", ["a", "b"]),
    )

    response = client.post("/exams/parse", json={"text": text})

    assert response.status_code == 200
    payload = response.json()
    assert payload["block_count"] == 3
    assert payload["dropped_blocks"] == [1]
    assert payload["unmarked"] == [1]
    first = payload["questions"][0]
    assert first == {
        "text": "With image",
        "options": ["a", "b"],
        "correct": 1,
        "explanation": "because",
        "image": "https://img.example/1.png",
    }


def test_import_then_fetch_exam(client: TestClient) -> None:
    text = join_blocks(make_block("One", ["a", "b"], correct=0), make_block("Two", ["c", "d"], correct=1))

    response = client.post("/exams/import", json=_import_payload(text, createdBy="user-1"))

    assert response.status_code == 201
    created = response.json()
    assert created["questionCount"] == 2
    assert created["title"] == "Algebra quiz"

    fetched = client.get(f"/exams/{created['examId']}")
    assert fetched.status_code == 200
    record = fetched.json()
    assert record["id"] == created["examId"]
    assert record["subjectId"] == "toan"
    assert record["timeMinutes"] == 50
    assert record["createdBy"] == "user-1"
    assert [question["id"] for question in record["questions"]] == [1, 2]

    listing = client.get("/exams")
    assert [exam["id"] for exam in listing.json()] == [created["examId"]]


def test_import_without_questions_is_unprocessable(client: TestClient) -> None:
    response = client.post("/exams/import", json=_import_payload("nothing to see"))

    assert response.status_code == 422
    assert "no questions could be extracted" in response.json()["detail"]
    assert client.get("/exams").json() == []


def test_import_rejects_invalid_metadata(client: TestClient) -> None:
    text = make_block("One", ["a", "b"], correct=0)

    assert client.post("/exams/import", json=_import_payload(text, title="   ")).status_code == 422
    assert client.post("/exams/import", json=_import_payload(text, timeMinutes=0)).status_code == 422


def test_import_storage_failure_is_unavailable(service: ImportService, client: TestClient) -> None:
    class BrokenRepository(InMemoryExamRepository):
        def create_exam(self, request, created_by=None):
            raise StorageError("database offline")

    service.repository = BrokenRepository()

    response = client.post("/exams/import", json=_import_payload(make_block("One", ["a"], correct=0)))

    assert response.status_code == 503
    assert response.json()["detail"] == "database offline"


def test_unknown_exam_returns_404(client: TestClient) -> None:
    assert client.get("/exams/does-not-exist").status_code == 404


def test_unconfigured_service_returns_503(monkeypatch) -> None:
    def broken() -> ImportService:
        raise NormalizerConfigurationError("No AI keys configured")

    monkeypatch.setattr("examprep.api.exams.get_import_service", broken)

    with pytest.raises(HTTPException) as excinfo:
        get_exam_import_service()

    assert excinfo.value.status_code == 503
    response = TestClient(app).post("/exams/parse", json={"text": ""})
    assert response.status_code == 503


def test_import_fills_subject_and_duration_from_defaults(client: TestClient) -> None:
    payload = {"text": make_block("One", ["a", "b"], correct=0), "title": "Defaults"}

    response = client.post("/exams/import", json=payload)

    assert response.status_code == 201
    record = client.get(f"/exams/{response.json()['examId']}").json()
    assert record["subjectId"] == "toan"
    assert record["timeMinutes"] == 50
