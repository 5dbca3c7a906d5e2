"""Request-scoped dependencies wiring the session, embedding client and services."""

from __future__ import annotations

from functools import lru_cache

from fastapi import Depends
from sqlmodel.ext.asyncio.session import AsyncSession

from notesearch.db.session import get_session
from notesearch.services.embeddings import EmbeddingCache, EmbeddingGenerator
from notesearch.services.notes import NoteStore
from notesearch.services.openai_client import OpenAIService
from notesearch.services.search import SearchService


@lru_cache()
def get_embedding_generator() -> EmbeddingGenerator:
    return OpenAIService()


def get_note_store(session: AsyncSession = Depends(get_session)) -> NoteStore:
    return NoteStore(session)


def get_embedding_cache(
    session: AsyncSession = Depends(get_session),
    generator: EmbeddingGenerator = Depends(get_embedding_generator),
) -> EmbeddingCache:
    return EmbeddingCache(session, generator)


def get_search_service(
    cache: EmbeddingCache = Depends(get_embedding_cache),
    store: NoteStore = Depends(get_note_store),
) -> SearchService:
    return SearchService(cache, store)
