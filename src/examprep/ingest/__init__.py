"""Chunking, parsing and assembly of imported exam material."""
from __future__ import annotations

from .assembler import assemble_exam
from .blocks import DELIMITER, join_canonical, split_blocks
from .chunking import ChunkingConfig, ExamTextChunker, chunk_text
from .models import (
    Chunk,
    ExamImportRequest,
    ExamMetadata,
    ExamQuestion,
    ParsedQuestion,
    ParseReport,
    StoredExam,
)
from .parser import parse_exam_text, parse_exam_text_report, parse_question_block

__all__ = [
    "DELIMITER",
    "Chunk",
    "ChunkingConfig",
    "ExamImportRequest",
    "ExamMetadata",
    "ExamQuestion",
    "ExamTextChunker",
    "ParseReport",
    "ParsedQuestion",
    "StoredExam",
    "assemble_exam",
    "chunk_text",
    "join_canonical",
    "parse_exam_text",
    "parse_exam_text_report",
    "parse_question_block",
    "split_blocks",
]
