"""Embedding cache model holding one vector per note."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Column, DateTime, LargeBinary
from sqlmodel import Field, SQLModel

from notesearch.utils.time import utc_now


class NoteEmbedding(SQLModel, table=True):
    __tablename__ = "note_embeddings"

    note_id: str = Field(primary_key=True)
    content_hash: str = Field(index=True)
    model_id: str | None = Field(default=None)
    vector: bytes = Field(sa_column=Column(LargeBinary, nullable=False))
    vector_dtype: str = Field(default="float32")
    dim: int
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))
