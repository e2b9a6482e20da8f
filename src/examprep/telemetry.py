"""Structured lifecycle events for the import pipeline."""

from __future__ import annotations

import logging
import traceback
from typing import Any, Iterable, Optional

LOGGER = logging.getLogger("examprep.telemetry")

_PREVIEW_CHARS = 120


def _format_exception(error: BaseException) -> str:
    return "".join(traceback.format_exception(error.__class__, error, error.__traceback__))


def log_event(
    logger: Optional[logging.Logger],
    step: str,
    *,
    level: str = "info",
    req_id: str | None = None,
    duration_ms: float | None = None,
    exc: BaseException | str | None = None,
    details: dict[str, Any] | None = None,
    **payload: Any,
) -> None:
    """Emit a structured log event with the agreed-upon schema."""

    logger = logger or LOGGER
    event: dict[str, Any] = {"step": step, "module": logger.name}
    if req_id:
        event["req_id"] = req_id
    if duration_ms is not None:
        event["duration_ms"] = round(duration_ms, 3)
    if details is not None:
        event["details"] = details
    event.update(payload)

    exc_info = None
    if exc is not None:
        if isinstance(exc, BaseException):
            event["exc"] = _format_exception(exc)
            exc_info = (exc.__class__, exc, exc.__traceback__)
        else:
            event["exc"] = str(exc)

    log_method = getattr(logger, level.lower(), logger.info)
    log_method(event, exc_info=exc_info)


def emit_chunking_event(*, req_id: str, kind: str, document_chars: int, chunk_sizes: Iterable[int]) -> None:
    sizes = list(chunk_sizes)
    details = {
        "kind": kind,
        "document_chars": document_chars,
        "chunks": len(sizes),
        "chunk_sizes": sizes,
    }
    log_event(LOGGER, "import.chunked", req_id=req_id, details=details)


def emit_normalizer_request(*, req_id: str, chunk_index: int, kind: str, backend: str, chunk_chars: int) -> None:
    details = {
        "chunk_index": chunk_index,
        "kind": kind,
        "backend": backend,
        "chunk_chars": chunk_chars,
    }
    log_event(LOGGER, "normalizer.request", req_id=req_id, details=details)


def emit_normalizer_result(
    *,
    req_id: str,
    chunk_index: int,
    duration_ms: float,
    output_preview: str | None,
    error: BaseException | None = None,
) -> None:
    details: dict[str, Any] = {"chunk_index": chunk_index}
    if output_preview is not None:
        details["output_preview"] = output_preview[:_PREVIEW_CHARS]
    log_event(
        LOGGER,
        "normalizer.result",
        level="error" if error is not None else "info",
        req_id=req_id,
        duration_ms=duration_ms,
        details=details,
        exc=error,
    )


def emit_parse_event(
    *,
    block_count: int,
    question_count: int,
    dropped_blocks: Iterable[int],
    unmarked: Iterable[int],
) -> None:
    details = {
        "blocks": block_count,
        "questions": question_count,
        "dropped_blocks": list(dropped_blocks),
        "unmarked_questions": list(unmarked),
    }
    log_event(LOGGER, "import.parsed", details=details)


def emit_storage_event(
    *,
    backend: str,
    exam_id: str | None,
    question_count: int,
    duration_ms: float,
    error: BaseException | None = None,
) -> None:
    details = {"backend": backend, "exam_id": exam_id, "questions": question_count}
    log_event(
        LOGGER,
        "import.stored",
        level="error" if error is not None else "info",
        duration_ms=duration_ms,
        details=details,
        exc=error,
    )


def emit_exception(
    *,
    module: str,
    error: BaseException,
    req_id: str | None = None,
    suggestion: str | None = None,
) -> None:
    details = {"module": module}
    if suggestion:
        details["suggestion"] = suggestion
    log_event(
        LOGGER,
        "exception",
        level="error",
        req_id=req_id,
        details=details,
        exc=error,
    )


__all__ = [
    "emit_chunking_event",
    "emit_exception",
    "emit_normalizer_request",
    "emit_normalizer_result",
    "emit_parse_event",
    "emit_storage_event",
    "log_event",
]
