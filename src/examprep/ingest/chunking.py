"""Split long study material into bounded segments for AI normalisation."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator, List

from .models import Chunk

LOGGER = logging.getLogger(__name__)

PARAGRAPH_BREAK = "\n\n"


@dataclass(slots=True)
class ChunkingConfig:
    chunk_chars: int = 4000
    window_chars: int = 500


class ExamTextChunker:
    """Cut text into chunks, preferring paragraph boundaries near the size limit.

    The document is trimmed and scanned with a moving cursor. Each naive cut
    point (``cursor + chunk_chars``) is moved to just past the first blank line
    found within ``window_chars`` of it; when there is none the naive cut is
    used as is. Chunks never overlap, so joining them yields the trimmed input.
    """

    def __init__(self, config: ChunkingConfig | None = None) -> None:
        self.config = config or ChunkingConfig()
        if self.config.chunk_chars <= 0:
            raise ValueError("chunk_chars must be a positive integer")
        if self.config.window_chars < 0:
            raise ValueError("window_chars must be a non-negative integer")

    def chunk(self, text: str) -> List[Chunk]:
        return list(self.iter_chunks(text))

    def iter_chunks(self, text: str) -> Iterator[Chunk]:
        document = text.strip()
        length = len(document)
        cursor = 0
        index = 0
        while cursor < length:
            end = self._find_break(document, cursor)
            LOGGER.debug("Chunk %s offsets %s-%s", index, cursor, end)
            yield Chunk(index=index, start=cursor, end=end, text=document[cursor:end])
            cursor = end
            index += 1

    def _find_break(self, document: str, cursor: int) -> int:
        naive_end = cursor + self.config.chunk_chars
        if naive_end >= len(document):
            return len(document)
        window = self.config.window_chars
        search_from = max(cursor, naive_end - window)
        paragraph_break = document.find(PARAGRAPH_BREAK, search_from)
        if paragraph_break != -1 and paragraph_break < naive_end + window:
            return paragraph_break + len(PARAGRAPH_BREAK)
        return naive_end


def chunk_text(text: str, chunk_size: int = 4000, window: int = 500) -> List[Chunk]:
    """Split *text* into ordered, non-overlapping chunks."""

    return ExamTextChunker(ChunkingConfig(chunk_chars=chunk_size, window_chars=window)).chunk(text)
