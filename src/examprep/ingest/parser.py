"""Parser turning canonical exam text into :class:`ParsedQuestion` records.

A canonical block looks like::

    [Question]
    What is 2+2?
    A. 3
    *B. 4
    C. 5
    D. 6
    [Explanation]
    Basic addition.

Options are positioned by the order they appear in the block, not by their
letter. A block with no ``*`` marker keeps ``correct = 0``.
"""
from __future__ import annotations

import logging
import re
from typing import List, Optional, Tuple

from .blocks import split_blocks
from .models import ParsedQuestion, ParseReport

LOGGER = logging.getLogger(__name__)

MAX_OPTIONS = 4

_QUESTION_MARKER_RE = re.compile(r"\[Question\]", re.IGNORECASE)
_QUESTION_BODY_RE = re.compile(r"\s*(.*?)(?=^[ \t]*(?:[A-Z]\.|\*))", re.DOTALL | re.MULTILINE)
_IMAGE_RE = re.compile(r"!\[.*?\]\((.*?)\)")
_OPTION_RE = re.compile(r"^[ \t]*(\*?)([A-D])\.[ \t]*(.*)$", re.MULTILINE)
_EXPLANATION_RE = re.compile(r"\[Explanation\]\s*(.*)$", re.IGNORECASE | re.DOTALL)


def _question_body(block: str) -> str:
    marker = _QUESTION_MARKER_RE.search(block)
    if marker is None:
        return ""
    body = _QUESTION_BODY_RE.match(block, marker.end())
    if body is None:
        return ""
    return body.group(1).strip()


def _split_image(body: str) -> Tuple[str, Optional[str]]:
    image_match = _IMAGE_RE.search(body)
    image = image_match.group(1) if image_match and image_match.group(1) else None
    return _IMAGE_RE.sub("", body).strip(), image


def _options(block: str) -> Tuple[List[str], Optional[int]]:
    options: List[str] = []
    marked: Optional[int] = None
    for match in _OPTION_RE.finditer(block):
        option_text = match.group(3).strip()
        if match.group(1) == "*" and len(options) < MAX_OPTIONS:
            marked = len(options)
        options.append(option_text)
    return options[:MAX_OPTIONS], marked


def _explanation(block: str) -> str:
    match = _EXPLANATION_RE.search(block)
    return match.group(1).strip() if match else ""


def _parse_block(block: str) -> Tuple[Optional[ParsedQuestion], bool]:
    text, image = _split_image(_question_body(block))
    options, marked = _options(block)
    if not text or not options:
        return None, False
    question = ParsedQuestion(
        text=text,
        options=options,
        correct=marked if marked is not None else 0,
        explanation=_explanation(block),
        image=image,
    )
    return question, marked is not None


def parse_question_block(block: str) -> Optional[ParsedQuestion]:
    """Parse one trimmed canonical block, returning ``None`` when it is malformed."""

    question, _ = _parse_block(block.strip())
    return question


def parse_exam_text_report(text: str) -> ParseReport:
    """Parse canonical text and report which blocks were dropped or left unmarked."""

    blocks = split_blocks(text)
    report = ParseReport(questions=[], block_count=len(blocks))
    for block_index, block in enumerate(blocks):
        question, marked = _parse_block(block)
        if question is None:
            LOGGER.debug("Dropping malformed block %s: %r", block_index, block[:80])
            report.dropped_blocks.append(block_index)
            continue
        if not marked:
            report.unmarked.append(len(report.questions))
        report.questions.append(question)
    return report


def parse_exam_text(text: str) -> List[ParsedQuestion]:
    """Parse every block of canonical exam text, silently dropping malformed ones."""

    return parse_exam_text_report(text).questions
