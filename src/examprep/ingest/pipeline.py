"""High level document preparation entry point."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from .chunking import ChunkingConfig, ExamTextChunker
from .extractors import extract_document_text
from .models import Chunk
from .normalization import normalize_text

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class DocumentPipelineConfig:
    chunk_chars: int = 4000
    window_chars: int = 500


class DocumentPipeline:
    """Pipeline orchestrating extraction, normalisation and chunking of raw material."""

    def __init__(self, config: Optional[DocumentPipelineConfig] = None) -> None:
        self.config = config or DocumentPipelineConfig()
        self.chunker = ExamTextChunker(
            ChunkingConfig(chunk_chars=self.config.chunk_chars, window_chars=self.config.window_chars)
        )

    def prepare_text(self, text: str) -> List[Chunk]:
        """Normalise pasted text and return the chunks to send for AI processing."""

        normalized = normalize_text(text)
        chunks = self.chunker.chunk(normalized)
        LOGGER.info("Generated %s chunks from %s characters", len(chunks), len(normalized))
        return chunks

    def prepare_upload(self, file_bytes: bytes, file_name: str, mime_type: Optional[str] = None) -> List[Chunk]:
        """Extract an uploaded document and return its chunks."""

        text = extract_document_text(file_bytes, file_name, mime_type)
        return self.prepare_text(text)
