"""Pydantic schemas for note, search and embedding payloads.
Classes:
    NoteRead, NoteWrite: Document store payloads.
    SearchRequest, SearchResultRead: Search endpoint request and result formats.
    EmbeddingStatusResponse, BulkEmbeddingRequest, BulkEmbeddingResponse: Embedding cache management.
    VectorRequest, VectorResponse: Raw vector generation.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class SearchStrategy(str, Enum):
    SEMANTIC = "semantic"
    KEYWORD = "keyword"


class NoteRead(BaseModel):
    id: str
    title: str
    body: str
    updated_at: datetime


class NoteWrite(BaseModel):
    title: str = ""
    body: str = ""


class SearchRequest(BaseModel):
    query: str
    k: Optional[int] = Field(default=None, ge=0, le=100)

    @field_validator("query")
    @classmethod
    def _strip_query(cls, value: str) -> str:
        return value.strip()


class SearchResultRead(BaseModel):
    note: NoteRead
    score: float
    excerpt: Optional[str] = None
    strategy: SearchStrategy


class EmbeddingStats(BaseModel):
    total_notes: int
    embedded_notes: int
    needs_update: int


class EmbeddingStatusResponse(BaseModel):
    available: bool
    model: str
    stats: EmbeddingStats


class BulkEmbeddingRequest(BaseModel):
    note_ids: Optional[list[str]] = None


class BulkEmbeddingResponse(BaseModel):
    total: int
    embedded: int
    failed_ids: list[str] = Field(default_factory=list)


class VectorRequest(BaseModel):
    text: str = Field(min_length=1)


class VectorResponse(BaseModel):
    dim: int
    vector: list[float]
