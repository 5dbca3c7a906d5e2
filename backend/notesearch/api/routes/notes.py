"""Note endpoints exposing the document store and its embedding lifecycle."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response, status

from notesearch.api.deps import get_embedding_cache, get_note_store
from notesearch.models import Note
from notesearch.schemas import NoteRead, NoteWrite
from notesearch.services.embeddings import EmbeddingCache
from notesearch.services.notes import NoteStore

router = APIRouter(prefix="/notes", tags=["notes"])


def _to_note_read(note: Note) -> NoteRead:
    return NoteRead(id=note.id, title=note.title, body=note.body, updated_at=note.updated_at)


@router.get("", response_model=list[NoteRead])
async def list_notes(store: NoteStore = Depends(get_note_store)) -> list[NoteRead]:
    return [_to_note_read(note) for note in await store.get_all()]


@router.get("/{note_id}", response_model=NoteRead)
async def get_note(note_id: str, store: NoteStore = Depends(get_note_store)) -> NoteRead:
    note = await store.get_by_id(note_id)
    if note is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Note not found")
    return _to_note_read(note)


@router.put("/{note_id}", response_model=NoteRead)
async def put_note(
    note_id: str,
    payload: NoteWrite,
    store: NoteStore = Depends(get_note_store),
) -> NoteRead:
    note = await store.save(note_id, title=payload.title, body=payload.body)
    return _to_note_read(note)


@router.delete("/{note_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_note(
    note_id: str,
    store: NoteStore = Depends(get_note_store),
    cache: EmbeddingCache = Depends(get_embedding_cache),
) -> Response:
    deleted = await store.delete(note_id)
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Note not found")
    await cache.delete(note_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
