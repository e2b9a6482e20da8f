import pytest

from examprep.ingest import DELIMITER
from examprep.prompt_builder import CONTENT_HEADER, SYSTEM_PROMPT_VI, build_normalization_prompt


def test_prompt_contains_format_rules_and_chunk() -> None:
    chunk = "Câu 1: Nước có công thức là gì?"

    prompt = build_normalization_prompt(chunk, "practice")

    assert prompt.startswith(SYSTEM_PROMPT_VI)
    assert DELIMITER in SYSTEM_PROMPT_VI
    assert "[Question]" in SYSTEM_PROMPT_VI and "[Explanation]" in SYSTEM_PROMPT_VI
    assert "Loại nội dung: practice" in prompt
    assert prompt.endswith(f"{CONTENT_HEADER}\n{chunk}")


def test_prompt_keeps_latex_braces() -> None:
    assert "$\\ce{H2SO4}$" in SYSTEM_PROMPT_VI
    assert "$\\frac{a}{b}$" in SYSTEM_PROMPT_VI


def test_blank_kind_is_omitted() -> None:
    prompt = build_normalization_prompt("text", "  ")

    assert "Loại nội dung" not in prompt


def test_missing_chunk_is_rejected() -> None:
    with pytest.raises(ValueError):
        build_normalization_prompt(None, "practice")  # type: ignore[arg-type]
