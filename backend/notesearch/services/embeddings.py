"""Persistent per-note embedding cache.

Classes:
    EmbeddingGenerator: Protocol for the external capability that turns text into a vector.
    BulkEmbeddingResult: Summary of a sequential bulk generation pass.
    EmbeddingCache: Looks up, validates, generates and stores one vector per note.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Protocol, Sequence

import numpy as np
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from notesearch.core.config import Settings, get_settings
from notesearch.core.errors import ConfigurationError, SearchError
from notesearch.models import Note, NoteEmbedding
from notesearch.schemas import EmbeddingStats
from notesearch.utils.text import content_fingerprint, note_text
from notesearch.utils.time import utc_now

_LOGGER = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], Any]

_INSERT_BY_DIALECT = {
    "sqlite": sqlite_insert,
    "postgresql": postgresql_insert,
}


class EmbeddingGenerator(Protocol):
    @property
    def is_configured(self) -> bool: ...

    @property
    def model(self) -> str: ...

    async def embed_text(self, text: str) -> list[float]: ...


@dataclass(slots=True)
class BulkEmbeddingResult:
    total: int
    embedded: int
    failed_ids: list[str] = field(default_factory=list)


class EmbeddingCache:
    """Cache of note vectors keyed by note id and invalidated by a content fingerprint.

    A stored vector is reused only when its fingerprint equals the fingerprint of the
    note's current ``title + "\\n\\n" + body``. Concurrent writers for the same note are
    not serialised; the last commit wins.
    """

    def __init__(
        self,
        session: AsyncSession,
        generator: EmbeddingGenerator,
        *,
        settings: Optional[Settings] = None,
        bulk_delay: Optional[float] = None,
    ) -> None:
        self._session = session
        self._generator = generator
        self._settings = settings or get_settings()
        self._bulk_delay = self._settings.bulk_embedding_delay if bulk_delay is None else bulk_delay

    @property
    def available(self) -> bool:
        return self._generator.is_configured

    @property
    def model(self) -> str:
        return self._generator.model

    async def generate_vector(self, text: str) -> list[float]:
        return await self._generator.embed_text(text)

    async def get_or_create(self, note: Note) -> list[float]:
        text = note_text(note.title, note.body)
        fingerprint = content_fingerprint(text)

        # Re-read the row so a vector committed by another writer is seen.
        record = await self._session.get(NoteEmbedding, note.id, populate_existing=True)
        if record is not None and record.content_hash == fingerprint:
            cached = _deserialize_vector(record)
            if cached is not None:
                _LOGGER.debug("Embedding cache hit for note %s", note.id)
                return cached
            _LOGGER.warning("Discarding unreadable cached embedding for note %s", note.id)

        _LOGGER.debug("Embedding cache miss for note %s", note.id)
        vector = await self._generator.embed_text(text)
        arr = np.asarray(vector, dtype=np.float32)

        await self._upsert(
            {
                "note_id": note.id,
                "content_hash": fingerprint,
                "model_id": self._generator.model,
                "vector": arr.tobytes(),
                "vector_dtype": "float32",
                "dim": int(arr.size),
                "created_at": utc_now(),
            }
        )
        if record is not None:
            await self._session.refresh(record)
        return arr.tolist()

    async def _upsert(self, values: dict[str, Any]) -> None:
        """Insert or overwrite the row for ``values["note_id"]``; the last commit wins."""

        connection = await self._session.connection()
        dialect_insert = _INSERT_BY_DIALECT.get(connection.dialect.name, sqlite_insert)
        stmt = dialect_insert(NoteEmbedding).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=["note_id"],
            set_={column: stmt.excluded[column] for column in values if column != "note_id"},
        )
        try:
            await connection.execute(stmt)
            await self._session.commit()
        except SQLAlchemyError:
            await self._session.rollback()
            raise

    async def get(self, note_id: str) -> list[float] | None:
        record = await self._session.get(NoteEmbedding, note_id, populate_existing=True)
        if record is None:
            return None
        return _deserialize_vector(record)

    async def all_vectors(self) -> dict[str, list[float]]:
        result = await self._session.exec(select(NoteEmbedding).execution_options(populate_existing=True))
        vectors: dict[str, list[float]] = {}
        for record in result.all():
            vector = _deserialize_vector(record)
            if vector is not None:
                vectors[record.note_id] = vector
        return vectors

    async def delete(self, note_id: str) -> bool:
        record = await self._session.get(NoteEmbedding, note_id)
        if record is None:
            return False
        await self._session.delete(record)
        await self._session.commit()
        return True

    async def stats(self, notes: Sequence[Note]) -> EmbeddingStats:
        result = await self._session.exec(select(NoteEmbedding.note_id, NoteEmbedding.content_hash))
        hashes = {note_id: content_hash for note_id, content_hash in result.all()}

        needs_update = 0
        for note in notes:
            cached_hash = hashes.get(note.id)
            if cached_hash is None or cached_hash != content_fingerprint(note_text(note.title, note.body)):
                needs_update += 1

        return EmbeddingStats(
            total_notes=len(notes),
            embedded_notes=len(hashes),
            needs_update=needs_update,
        )

    async def bulk_generate(
        self,
        notes: Sequence[Note],
        on_progress: Optional[ProgressCallback] = None,
    ) -> BulkEmbeddingResult:
        """Embed *notes* one at a time, pausing between notes.

        A failed note is logged and left uncached; ``on_progress(completed, total)`` fires
        after every attempt regardless of outcome.
        """

        if not self.available:
            raise ConfigurationError("OpenAI client not configured. Set OPENAI_API_KEY.")

        total = len(notes)
        completed = 0
        failed_ids: list[str] = []

        for position, note in enumerate(notes):
            if position and self._bulk_delay > 0:
                await asyncio.sleep(self._bulk_delay)
            try:
                await self.get_or_create(note)
            except (SearchError, SQLAlchemyError) as exc:
                _LOGGER.warning("Failed to generate embedding for note %s: %s", note.id, exc)
                failed_ids.append(note.id)
            completed += 1
            if on_progress is not None:
                outcome = on_progress(completed, total)
                if inspect.isawaitable(outcome):
                    await outcome

        _LOGGER.info(
            "Bulk embedding finished: %d/%d embedded, %d failed",
            total - len(failed_ids),
            total,
            len(failed_ids),
        )
        return BulkEmbeddingResult(total=total, embedded=total - len(failed_ids), failed_ids=failed_ids)


def _deserialize_vector(record: NoteEmbedding) -> list[float] | None:
    try:
        arr = np.frombuffer(record.vector, dtype=np.dtype(record.vector_dtype or "float32"))
    except (TypeError, ValueError):
        return None
    if record.dim and arr.size != record.dim:
        return None
    return arr.astype(np.float32, copy=False).tolist()
