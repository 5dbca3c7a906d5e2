"""Semantic, keyword and hybrid ranking over a note corpus.

Classes:
    SearchResult: A ranked note with its score, excerpt and producing strategy.
    SearchService: Runs the individual strategies and merges them into a hybrid ranking.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from notesearch.core.config import Settings, get_settings
from notesearch.core.errors import ConfigurationError, GenerationError
from notesearch.models import Note
from notesearch.schemas import SearchStrategy
from notesearch.services.embeddings import EmbeddingCache
from notesearch.services.excerpts import extract_excerpt
from notesearch.services.keyword import rank_by_keyword
from notesearch.services.notes import DocumentStore
from notesearch.services.similarity import cosine_similarity

_LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class SearchResult:
    note: Note
    score: float
    excerpt: Optional[str] = None
    strategy: SearchStrategy = SearchStrategy.KEYWORD


class SearchService:
    def __init__(
        self,
        cache: EmbeddingCache,
        store: Optional[DocumentStore] = None,
        *,
        settings: Optional[Settings] = None,
    ) -> None:
        self._cache = cache
        self._store = store
        self._settings = settings or get_settings()

    def select_strategies(self) -> tuple[SearchStrategy, ...]:
        """Strategies a hybrid search will attempt, in merge-priority order."""

        if self._cache.available:
            return (SearchStrategy.SEMANTIC, SearchStrategy.KEYWORD)
        return (SearchStrategy.KEYWORD,)

    async def search_by_similarity(
        self,
        query: str,
        k: Optional[int] = None,
        corpus: Optional[Sequence[Note]] = None,
    ) -> list[SearchResult]:
        if not self._cache.available:
            raise ConfigurationError("Embeddings are not available. Set OPENAI_API_KEY.")

        limit = self._limit(k)
        if limit <= 0 or not query.strip():
            return []

        query_vector = await self._cache.generate_vector(query)
        notes = await self._resolve_corpus(corpus)

        scored: list[tuple[Note, float]] = []
        for note in notes:
            try:
                note_vector = await self._cache.get_or_create(note)
            except GenerationError as exc:
                _LOGGER.warning("Failed to get embedding for note %s: %s", note.id, exc)
                continue
            score = cosine_similarity(query_vector, note_vector)
            if score > self._settings.similarity_threshold:
                scored.append((note, score))

        scored.sort(key=lambda item: item[1], reverse=True)
        return [
            self._build_result(note, score, query, SearchStrategy.SEMANTIC)
            for note, score in scored[:limit]
        ]

    async def search_by_keyword(
        self,
        query: str,
        k: Optional[int] = None,
        corpus: Optional[Sequence[Note]] = None,
    ) -> list[SearchResult]:
        limit = self._limit(k)
        if limit <= 0:
            return []

        notes = await self._resolve_corpus(corpus)
        ranked = rank_by_keyword(
            query,
            notes,
            min_token_length=self._settings.min_token_length,
            title_weight=self._settings.keyword_title_weight,
            body_match_cap=self._settings.keyword_body_match_cap,
            score_scale=self._settings.keyword_score_scale,
        )
        return [
            self._build_result(note, score, query, SearchStrategy.KEYWORD)
            for note, score in ranked[:limit]
        ]

    async def hybrid_search(
        self,
        query: str,
        k: Optional[int] = None,
        corpus: Optional[Sequence[Note]] = None,
    ) -> list[SearchResult]:
        """Interleave semantic and keyword rankings, semantic first at each rank.

        Semantic failures degrade to keyword-only results and are never raised.
        """

        limit = self._limit(k)
        if limit <= 0:
            return []

        notes = await self._resolve_corpus(corpus)
        strategies = self.select_strategies()

        semantic: list[SearchResult] = []
        if SearchStrategy.SEMANTIC in strategies:
            try:
                semantic = await self.search_by_similarity(query, limit * 2, notes)
            except (ConfigurationError, GenerationError) as exc:
                _LOGGER.warning("Semantic search failed, using keyword results only: %s", exc)

        keyword = await self.search_by_keyword(query, limit * 2, notes)
        return _interleave(semantic, keyword, limit)

    async def find_similar(self, note_id: str, k: Optional[int] = None) -> list[SearchResult]:
        """Rank other notes against this note's title and first paragraph."""

        if self._store is None:
            return []
        source = await self._store.get_by_id(note_id)
        if source is None:
            return []

        others = [note for note in await self._store.get_all() if note.id != note_id]
        first_paragraph = source.body.split("\n\n")[0] or source.body[: self._settings.similar_query_fallback_chars]
        query = f"{source.title} {first_paragraph}"

        if SearchStrategy.SEMANTIC in self.select_strategies():
            try:
                return await self.search_by_similarity(query, k, others)
            except (ConfigurationError, GenerationError) as exc:
                _LOGGER.warning("Similar-note search for %s fell back to keywords: %s", note_id, exc)
        return await self.search_by_keyword(query, k, others)

    async def notes_about(self, topic: str) -> list[SearchResult]:
        return await self.hybrid_search(topic, self._settings.topic_top_k)

    def _limit(self, k: Optional[int]) -> int:
        return self._settings.default_top_k if k is None else k

    async def _resolve_corpus(self, corpus: Optional[Sequence[Note]]) -> Sequence[Note]:
        if corpus is not None:
            return corpus
        if self._store is None:
            return []
        return await self._store.get_all()

    def _build_result(self, note: Note, score: float, query: str, strategy: SearchStrategy) -> SearchResult:
        return SearchResult(
            note=note,
            score=score,
            excerpt=extract_excerpt(
                note.body,
                query,
                self._settings.excerpt_max_length,
                min_token_length=self._settings.min_token_length,
            ),
            strategy=strategy,
        )


def _interleave(semantic: Sequence[SearchResult], keyword: Sequence[SearchResult], limit: int) -> list[SearchResult]:
    seen: set[str] = set()
    merged: list[SearchResult] = []
    for index in range(max(len(semantic), len(keyword))):
        for ranked in (semantic, keyword):
            if len(merged) >= limit:
                return merged
            if index < len(ranked) and ranked[index].note.id not in seen:
                seen.add(ranked[index].note.id)
                merged.append(ranked[index])
    return merged
