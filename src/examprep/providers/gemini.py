"""Gemini backed normaliser with ordered API key rotation."""
from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, List, Optional, Sequence, TypeVar

import httpx

from examprep.config import DEFAULT_AI_BASE_URL, DEFAULT_AI_MODEL
from examprep.prompt_builder import build_normalization_prompt

from .base import ExamNormalizer
from .errors import NormalizerConfigurationError, NormalizerError, NormalizerRateLimitedError

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_TIMEOUT_SECONDS = 120.0
_RATE_LIMIT_STATUSES = {"RESOURCE_EXHAUSTED"}


class KeyRotationPolicy:
    """Try credentials in order, moving on only when a key is rate limited."""

    def __init__(self, keys: Sequence[str]) -> None:
        self._keys: List[str] = [key for key in keys if key]
        if not self._keys:
            raise NormalizerConfigurationError("No AI keys configured")

    def __len__(self) -> int:
        return len(self._keys)

    async def run(self, call: Callable[[str], Awaitable[T]]) -> T:
        last_error: Optional[NormalizerRateLimitedError] = None
        for position, key in enumerate(self._keys, start=1):
            try:
                return await call(key)
            except NormalizerRateLimitedError as error:
                LOGGER.warning("AI key %s/%s is rate limited: %s", position, len(self._keys), error)
                last_error = error
        raise NormalizerRateLimitedError(
            f"All {len(self._keys)} AI keys are rate limited",
            status_code=last_error.status_code if last_error else None,
        ) from last_error


class GeminiNormalizer(ExamNormalizer):
    """Ask a Gemini model to rewrite study material as canonical exam text."""

    name = "gemini"

    def __init__(
        self,
        api_keys: Sequence[str] | KeyRotationPolicy,
        *,
        model: str = DEFAULT_AI_MODEL,
        base_url: str = DEFAULT_AI_BASE_URL,
        temperature: float = 0.2,
        top_p: float = 0.8,
        client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self.keys = api_keys if isinstance(api_keys, KeyRotationPolicy) else KeyRotationPolicy(api_keys)
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.temperature = temperature
        self.top_p = top_p
        self._client = client
        self._timeout = timeout

    async def normalize(self, chunk: str, kind: str) -> str:
        prompt = build_normalization_prompt(chunk, kind)
        payload = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {"temperature": self.temperature, "topP": self.top_p},
        }
        if self._client is not None:
            return await self.keys.run(lambda key: self._generate(self._client, key, payload))
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            return await self.keys.run(lambda key: self._generate(client, key, payload))

    async def _generate(self, client: httpx.AsyncClient, key: str, payload: dict[str, Any]) -> str:
        url = f"{self.base_url}/models/{self.model}:generateContent"
        try:
            response = await client.post(url, params={"key": key}, json=payload)
        except httpx.HTTPError as error:
            raise NormalizerError(f"Gemini request failed: {error}") from error

        data = self._decode(response)
        if not response.is_success:
            error_body = data.get("error") if isinstance(data.get("error"), dict) else {}
            message = error_body.get("message") or "Gemini API call failed"
            if response.status_code == 429 or error_body.get("status") in _RATE_LIMIT_STATUSES:
                raise NormalizerRateLimitedError(message, status_code=response.status_code)
            if response.status_code == 403:
                LOGGER.error("Gemini rejected the key (403); check that the Generative Language API is enabled")
            raise NormalizerError(message, status_code=response.status_code)

        text = self._candidate_text(data)
        if not text:
            raise NormalizerError("AI failed to generate response content", status_code=response.status_code)
        return text

    @staticmethod
    def _decode(response: httpx.Response) -> dict[str, Any]:
        try:
            data = response.json()
        except ValueError:
            LOGGER.warning("Gemini returned a non-JSON body (status %s)", response.status_code)
            return {}
        return data if isinstance(data, dict) else {}

    @staticmethod
    def _candidate_text(data: dict[str, Any]) -> str | None:
        try:
            return data["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError):
            return None
