"""Embedding cache management endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response, status

from notesearch.api.deps import get_embedding_cache, get_note_store
from notesearch.core.errors import ConfigurationError, GenerationError
from notesearch.schemas import (
    BulkEmbeddingRequest,
    BulkEmbeddingResponse,
    EmbeddingStatusResponse,
    VectorRequest,
    VectorResponse,
)
from notesearch.services.embeddings import EmbeddingCache
from notesearch.services.notes import NoteStore

router = APIRouter(prefix="/embeddings", tags=["embeddings"])


@router.get("/status", response_model=EmbeddingStatusResponse)
async def embedding_status(
    cache: EmbeddingCache = Depends(get_embedding_cache),
    store: NoteStore = Depends(get_note_store),
) -> EmbeddingStatusResponse:
    stats = await cache.stats(await store.get_all())
    return EmbeddingStatusResponse(available=cache.available, model=cache.model, stats=stats)


@router.post("/bulk", response_model=BulkEmbeddingResponse)
async def bulk_generate(
    payload: BulkEmbeddingRequest,
    cache: EmbeddingCache = Depends(get_embedding_cache),
    store: NoteStore = Depends(get_note_store),
) -> BulkEmbeddingResponse:
    notes = await store.get_all()
    if payload.note_ids is not None:
        wanted = set(payload.note_ids)
        notes = [note for note in notes if note.id in wanted]
    try:
        result = await cache.bulk_generate(notes)
    except ConfigurationError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    return BulkEmbeddingResponse(total=result.total, embedded=result.embedded, failed_ids=result.failed_ids)


@router.post("/vector", response_model=VectorResponse)
async def generate_vector(
    payload: VectorRequest,
    cache: EmbeddingCache = Depends(get_embedding_cache),
) -> VectorResponse:
    try:
        vector = await cache.generate_vector(payload.text)
    except ConfigurationError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    except GenerationError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
    return VectorResponse(dim=len(vector), vector=vector)


@router.delete("/{note_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_embedding(
    note_id: str,
    cache: EmbeddingCache = Depends(get_embedding_cache),
) -> Response:
    if not await cache.delete(note_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Embedding not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
