"""Environment driven configuration."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import List

LOGGER = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 4000
DEFAULT_CHUNK_WINDOW = 500
DEFAULT_AI_MODEL = "gemini-2.5-flash-lite"
DEFAULT_AI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_TIME_MINUTES = 50
DEFAULT_SUBJECT_ID = "toan"

_NUMBERED_KEY_VARS = ("AI_API_KEY_1", "AI_API_KEY_2", "AI_API_KEY_3")


def _int_from_env(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        LOGGER.warning("Invalid integer for %s: %s; using default %s", name, value, default)
        return default


def _float_from_env(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        LOGGER.warning("Invalid float for %s: %s; using default %s", name, value, default)
        return default


def _api_keys_from_env() -> List[str]:
    keys: List[str] = []
    combined = os.getenv("AI_API_KEYS", "")
    keys.extend(key.strip() for key in combined.split(",") if key.strip())
    for name in _NUMBERED_KEY_VARS:
        value = (os.getenv(name) or "").strip()
        if value and value not in keys:
            keys.append(value)
    return keys


@dataclass(slots=True)
class Settings:
    """Runtime settings for the import service."""

    chunk_size: int = DEFAULT_CHUNK_SIZE
    chunk_window: int = DEFAULT_CHUNK_WINDOW
    ai_api_keys: List[str] = field(default_factory=list)
    ai_model: str = DEFAULT_AI_MODEL
    ai_base_url: str = DEFAULT_AI_BASE_URL
    ai_temperature: float = 0.2
    ai_top_p: float = 0.8
    normalizer: str = "passthrough"
    exam_store: str = "memory"
    exam_persist_dir: str = "exam_store"
    default_time_minutes: int = DEFAULT_TIME_MINUTES
    default_subject_id: str = DEFAULT_SUBJECT_ID

    @classmethod
    def from_env(cls) -> "Settings":
        keys = _api_keys_from_env()
        default_normalizer = "gemini" if keys else "passthrough"
        return cls(
            chunk_size=_int_from_env("CHUNK_SIZE", DEFAULT_CHUNK_SIZE),
            chunk_window=_int_from_env("CHUNK_WINDOW", DEFAULT_CHUNK_WINDOW),
            ai_api_keys=keys,
            ai_model=os.getenv("AI_MODEL", DEFAULT_AI_MODEL),
            ai_base_url=os.getenv("AI_BASE_URL", DEFAULT_AI_BASE_URL).rstrip("/"),
            ai_temperature=_float_from_env("AI_TEMPERATURE", 0.2),
            ai_top_p=_float_from_env("AI_TOP_P", 0.8),
            normalizer=os.getenv("NORMALIZER", default_normalizer).strip().lower(),
            exam_store=os.getenv("EXAM_STORE", "memory").strip().lower(),
            exam_persist_dir=os.getenv("EXAM_PERSIST_DIR", "exam_store"),
            default_time_minutes=_int_from_env("DEFAULT_TIME_MINUTES", DEFAULT_TIME_MINUTES),
            default_subject_id=os.getenv("DEFAULT_SUBJECT_ID", DEFAULT_SUBJECT_ID),
        )
