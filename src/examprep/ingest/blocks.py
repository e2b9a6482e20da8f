"""Splitting and joining of canonical exam text."""
from __future__ import annotations

from typing import Iterable, List

DELIMITER = "-" * 50


def split_blocks(text: str) -> List[str]:
    """Return the non-empty, trimmed blocks between delimiter lines."""

    return [block.strip() for block in text.split(DELIMITER) if block.strip()]


def join_canonical(parts: Iterable[str]) -> str:
    """Join per-chunk canonical outputs so numbering continues across chunks."""

    return f"\n{DELIMITER}\n".join(part for part in parts if part)
