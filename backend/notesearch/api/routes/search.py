"""Search endpoints: hybrid, semantic, keyword, topic and similar-note ranking."""

from __future__ import annotations

from typing import Optional, Sequence

from fastapi import APIRouter, Depends, HTTPException, Query, status

from notesearch.api.deps import get_note_store, get_search_service
from notesearch.api.routes.notes import _to_note_read
from notesearch.core.errors import ConfigurationError, GenerationError
from notesearch.schemas import SearchRequest, SearchResultRead
from notesearch.services.notes import NoteStore
from notesearch.services.search import SearchResult, SearchService

router = APIRouter(tags=["search"])


def _to_result_read(results: Sequence[SearchResult]) -> list[SearchResultRead]:
    return [
        SearchResultRead(
            note=_to_note_read(result.note),
            score=result.score,
            excerpt=result.excerpt,
            strategy=result.strategy,
        )
        for result in results
    ]


@router.post("/search", response_model=list[SearchResultRead])
async def hybrid_search(
    payload: SearchRequest,
    service: SearchService = Depends(get_search_service),
) -> list[SearchResultRead]:
    return _to_result_read(await service.hybrid_search(payload.query, payload.k))


@router.post("/search/semantic", response_model=list[SearchResultRead])
async def semantic_search(
    payload: SearchRequest,
    service: SearchService = Depends(get_search_service),
) -> list[SearchResultRead]:
    try:
        results = await service.search_by_similarity(payload.query, payload.k)
    except (ConfigurationError, GenerationError):
        results = await service.search_by_keyword(payload.query, payload.k)
    return _to_result_read(results)


@router.post("/search/keyword", response_model=list[SearchResultRead])
async def keyword_search(
    payload: SearchRequest,
    service: SearchService = Depends(get_search_service),
) -> list[SearchResultRead]:
    return _to_result_read(await service.search_by_keyword(payload.query, payload.k))


@router.get("/search/about", response_model=list[SearchResultRead])
async def notes_about(
    topic: str = Query(..., min_length=1),
    service: SearchService = Depends(get_search_service),
) -> list[SearchResultRead]:
    return _to_result_read(await service.notes_about(topic))


@router.get("/notes/{note_id}/similar", response_model=list[SearchResultRead])
async def similar_notes(
    note_id: str,
    k: Optional[int] = Query(default=None, ge=0, le=100),
    service: SearchService = Depends(get_search_service),
    store: NoteStore = Depends(get_note_store),
) -> list[SearchResultRead]:
    if await store.get_by_id(note_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Note not found")
    return _to_result_read(await service.find_similar(note_id, k))
