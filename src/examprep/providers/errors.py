"""Exceptions raised by AI normaliser backends."""
from __future__ import annotations


class NormalizerError(RuntimeError):
    """Raised when a normaliser call fails or returns an unusable response."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class NormalizerConfigurationError(NormalizerError):
    """Raised when the normaliser cannot be used with the current settings."""


class NormalizerRateLimitedError(NormalizerError):
    """Raised when the backend signals that a key is over quota."""
