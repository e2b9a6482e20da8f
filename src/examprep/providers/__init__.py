"""AI normaliser backends."""
from __future__ import annotations

from examprep.config import Settings

from .base import ExamNormalizer
from .errors import NormalizerConfigurationError, NormalizerError, NormalizerRateLimitedError
from .gemini import GeminiNormalizer, KeyRotationPolicy
from .passthrough import PassthroughNormalizer

__all__ = [
    "ExamNormalizer",
    "GeminiNormalizer",
    "KeyRotationPolicy",
    "NormalizerConfigurationError",
    "NormalizerError",
    "NormalizerRateLimitedError",
    "PassthroughNormalizer",
    "create_normalizer",
]


def create_normalizer(settings: Settings) -> ExamNormalizer:
    """Build the normaliser selected by ``settings.normalizer``."""

    if settings.normalizer == "passthrough":
        return PassthroughNormalizer()
    if settings.normalizer == "gemini":
        return GeminiNormalizer(
            settings.ai_api_keys,
            model=settings.ai_model,
            base_url=settings.ai_base_url,
            temperature=settings.ai_temperature,
            top_p=settings.ai_top_p,
        )
    raise NormalizerConfigurationError(f"Unknown normalizer backend: {settings.normalizer}")
