"""Plain text extraction for uploaded study material."""
from __future__ import annotations

import io
import logging
import mimetypes
from enum import Enum
from pathlib import Path
from typing import Optional

from docx import Document
from pdfminer.high_level import extract_text as pdf_extract_text

LOGGER = logging.getLogger(__name__)


class DocumentExtractionError(RuntimeError):
    """Raised when an uploaded document cannot be turned into text."""


class UnsupportedDocumentError(DocumentExtractionError):
    """Raised for file formats the importer does not read."""


class EmptyDocumentError(DocumentExtractionError):
    """Raised when a document yields no text at all."""

    def __init__(self, file_name: str) -> None:
        super().__init__(f"{file_name}: document is empty or has no extractable text")


class DocumentFormat(str, Enum):
    """Supported document formats."""

    PDF = "pdf"
    DOCX = "docx"
    TXT = "txt"


class DocumentFormatDetector:
    """Detects the document format based on file name and optional MIME type."""

    _MIME_MAP = {
        "application/pdf": DocumentFormat.PDF,
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document": DocumentFormat.DOCX,
        "text/plain": DocumentFormat.TXT,
        "text/markdown": DocumentFormat.TXT,
    }

    @classmethod
    def detect(cls, file_name: str, mime_type: Optional[str] = None) -> DocumentFormat:
        """Return the detected document format.

        The detector first considers an explicit MIME type value, falling back to
        `mimetypes.guess_type` and finally checking the file suffix.
        """

        if mime_type and mime_type in cls._MIME_MAP:
            return cls._MIME_MAP[mime_type]

        guessed_type, _ = mimetypes.guess_type(file_name)
        if guessed_type and guessed_type in cls._MIME_MAP:
            return cls._MIME_MAP[guessed_type]

        suffix = Path(file_name).suffix.lower().lstrip(".")
        if suffix == "md":
            return DocumentFormat.TXT
        try:
            return DocumentFormat(suffix)
        except ValueError as exc:
            raise UnsupportedDocumentError(f"Unsupported file format: {file_name}") from exc


def extract_document_text(data: bytes, file_name: str, mime_type: Optional[str] = None) -> str:
    """Extract the textual content of an uploaded ``.txt``, ``.docx`` or ``.pdf`` file."""

    document_format = DocumentFormatDetector.detect(file_name, mime_type)
    LOGGER.info("Extracting text from %s (%s, %d bytes)", file_name, document_format.value, len(data))
    try:
        if document_format is DocumentFormat.PDF:
            text = _extract_pdf(data)
        elif document_format is DocumentFormat.DOCX:
            text = _extract_docx(data)
        else:
            text = _decode_text(data)
    except DocumentExtractionError:
        raise
    except Exception as error:
        LOGGER.exception("Failed to extract text from %s", file_name)
        raise DocumentExtractionError(f"Failed to read {file_name}: {error}") from error

    if not text.strip():
        raise EmptyDocumentError(file_name)
    return text


def _decode_text(data: bytes) -> str:
    if data.startswith((b"\xff\xfe", b"\xfe\xff")):
        return data.decode("utf-16")
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError:
        LOGGER.warning("Text upload is not valid UTF-8; decoding as latin-1")
        return data.decode("latin-1")


def _extract_docx(data: bytes) -> str:
    document = Document(io.BytesIO(data))
    paragraphs = [paragraph.text for paragraph in document.paragraphs if paragraph.text]
    return "\n\n".join(paragraphs)


def _extract_pdf(data: bytes) -> str:
    return pdf_extract_text(io.BytesIO(data)) or ""
