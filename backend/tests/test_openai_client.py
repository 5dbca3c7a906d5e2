"""Tests for the embedding client wrapper around AsyncOpenAI."""

from __future__ import annotations

import httpx
import pytest
from openai import APIConnectionError

from notesearch.core.config import Settings
from notesearch.core.errors import ConfigurationError, GenerationError
from notesearch.services.openai_client import OpenAIService


class FakeEmbeddingsAPI:
    def __init__(self, outcomes) -> None:
        self.outcomes = list(outcomes)
        self.payloads: list[dict] = []

    async def create(self, **payload):
        self.payloads.append(payload)
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class FakeAsyncOpenAI:
    def __init__(self, outcomes) -> None:
        self.embeddings = FakeEmbeddingsAPI(outcomes)


class DumpableResponse:
    def __init__(self, body: dict) -> None:
        self._body = body

    def model_dump(self) -> dict:
        return self._body


def _settings(**overrides) -> Settings:
    values = dict(openai_api_key=None, embedding_retry_attempts=1, embedding_max_chars=10)
    values.update(overrides)
    return Settings(**values)


def _ok(vector, model="text-embedding-3-small") -> dict:
    return {"data": [{"index": 0, "embedding": vector, "object": "embedding"}], "model": model}


@pytest.mark.asyncio
async def test_embed_text_truncates_input_and_returns_vector():
    client = FakeAsyncOpenAI([DumpableResponse(_ok([0.1, 0.2, 0.3]))])
    service = OpenAIService(client=client, settings=_settings())

    vector = await service.embed_text("abcdefghijklmnopqrstuvwxyz")

    assert vector == pytest.approx([0.1, 0.2, 0.3])
    assert client.embeddings.payloads == [{"model": "text-embedding-3-small", "input": "abcdefghij"}]


@pytest.mark.asyncio
async def test_unconfigured_service_raises_configuration_error():
    service = OpenAIService(settings=_settings())
    assert service.is_configured is False
    with pytest.raises(ConfigurationError):
        await service.embed_text("hello")


def test_service_with_api_key_is_configured():
    service = OpenAIService(settings=_settings(openai_api_key="sk-test"))
    assert service.is_configured is True


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body",
    [
        {"data": []},
        {"data": [{"index": 0, "embedding": []}]},
        {"data": [{"index": 0, "embedding": "not-a-vector"}]},
        {"object": "list"},
    ],
)
async def test_malformed_response_raises_generation_error(body):
    service = OpenAIService(client=FakeAsyncOpenAI([body]), settings=_settings())
    with pytest.raises(GenerationError):
        await service.embed_text("hello")


@pytest.mark.asyncio
async def test_unexpected_response_type_raises_generation_error():
    service = OpenAIService(client=FakeAsyncOpenAI([object()]), settings=_settings())
    with pytest.raises(GenerationError):
        await service.embed_text("hello")


@pytest.mark.asyncio
async def test_transport_failure_is_wrapped():
    failure = RuntimeError("connection reset")
    service = OpenAIService(client=FakeAsyncOpenAI([failure]), settings=_settings())
    with pytest.raises(GenerationError) as excinfo:
        await service.embed_text("hello")
    assert excinfo.value.__cause__ is failure


@pytest.mark.asyncio
async def test_fallback_model_is_used_after_failure():
    client = FakeAsyncOpenAI([RuntimeError("model unavailable"), _ok([1.0, 0.0], model="fallback")])
    service = OpenAIService(client=client, settings=_settings(openai_embedding_fallback_model="fallback"))

    assert await service.embed_text("hello") == [1.0, 0.0]
    assert [payload["model"] for payload in client.embeddings.payloads] == ["text-embedding-3-small", "fallback"]


@pytest.mark.asyncio
async def test_lowest_index_embedding_is_returned():
    body = {
        "data": [
            {"index": 1, "embedding": [9.0]},
            {"index": 0, "embedding": [1.0]},
        ]
    }
    service = OpenAIService(client=FakeAsyncOpenAI([body]), settings=_settings())
    assert await service.embed_text("hello") == [1.0]


@pytest.mark.asyncio
async def test_non_transient_failure_is_not_retried():
    client = FakeAsyncOpenAI([RuntimeError("bad request"), _ok([1.0])])
    service = OpenAIService(client=client, settings=_settings(embedding_retry_attempts=3))

    with pytest.raises(GenerationError):
        await service.embed_text("hello")
    assert len(client.embeddings.payloads) == 1


@pytest.mark.asyncio
async def test_connection_error_is_retried():
    request = httpx.Request("POST", "https://api.openai.com/v1/embeddings")
    client = FakeAsyncOpenAI([APIConnectionError(request=request), _ok([0.5, 0.5])])
    service = OpenAIService(client=client, settings=_settings(embedding_retry_attempts=2))

    assert await service.embed_text("hello") == [0.5, 0.5]
    assert len(client.embeddings.payloads) == 2
