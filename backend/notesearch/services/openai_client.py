"""Async OpenAI client wrapper for the embedding capability.

Classes:
    OpenAIService: Generates a single embedding vector per text with retry, fallback and response validation.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from openai import APIConnectionError, APITimeoutError, AsyncOpenAI, InternalServerError, RateLimitError
from pydantic import ValidationError
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from notesearch.core.config import Settings, get_settings
from notesearch.core.errors import ConfigurationError, GenerationError
from notesearch.schemas.embedding import EmbeddingResponsePayload

_LOGGER = logging.getLogger(__name__)

_TRANSIENT_ERRORS = (APIConnectionError, APITimeoutError, RateLimitError, InternalServerError)


class OpenAIService:
    def __init__(self, client: Optional[AsyncOpenAI] = None, *, settings: Optional[Settings] = None) -> None:
        settings = settings or get_settings()
        api_key = settings.openai_api_key.get_secret_value() if settings.openai_api_key else None
        if client is not None:
            self._client = client
        elif api_key:
            self._client = AsyncOpenAI(api_key=api_key)
        else:
            self._client = None
        self._settings = settings

    @property
    def is_configured(self) -> bool:
        return self._client is not None

    @property
    def model(self) -> str:
        return self._settings.openai_embedding_model

    async def embed_text(self, text: str, *, model: Optional[str] = None) -> list[float]:
        if self._client is None:
            raise ConfigurationError("OpenAI client not configured. Set OPENAI_API_KEY.")

        chosen_model = model or self._settings.openai_embedding_model
        truncated = text[: self._settings.embedding_max_chars]
        payload = dict(model=chosen_model, input=truncated)

        try:
            response = await self._create_with_fallback(payload)
        except Exception as exc:
            raise GenerationError(f"Embedding request failed: {exc}") from exc

        return _parse_embedding_response(response)

    async def _create_with_fallback(self, payload: dict[str, Any]):
        try:
            return await self._create_with_retry(payload)
        except Exception:
            fallback_model = self._settings.openai_embedding_fallback_model
            if not fallback_model or fallback_model == payload["model"]:
                raise
            _LOGGER.warning(
                "Embedding model %s failed, retrying with %s", payload["model"], fallback_model
            )
            return await self._create_with_retry({**payload, "model": fallback_model})

    async def _create_with_retry(self, payload: dict[str, Any]):
        attempts = max(1, self._settings.embedding_retry_attempts)
        async for attempt in AsyncRetrying(
            wait=wait_exponential(multiplier=1, min=1, max=20),
            stop=stop_after_attempt(attempts),
            retry=retry_if_exception_type(_TRANSIENT_ERRORS),
            reraise=True,
        ):
            with attempt:
                return await self._client.embeddings.create(**payload)


def _parse_embedding_response(response: Any) -> list[float]:
    if isinstance(response, dict):
        body = response
    elif hasattr(response, "model_dump"):
        body = response.model_dump()
    else:
        raise GenerationError(f"Unexpected embedding response type: {type(response).__name__}")

    try:
        parsed = EmbeddingResponsePayload.model_validate(body)
    except ValidationError as exc:
        raise GenerationError(f"Malformed embedding response: {exc}") from exc

    datum = min(parsed.data, key=lambda item: item.index)
    return list(datum.embedding)
