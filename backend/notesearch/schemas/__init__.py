"""Convenience exports for API schemas.

Re-exports the pydantic models used across the backend so consumers can import from one module.
"""

from .embedding import EmbeddingDatum, EmbeddingResponsePayload
from .search import (
    BulkEmbeddingRequest,
    BulkEmbeddingResponse,
    EmbeddingStats,
    EmbeddingStatusResponse,
    NoteRead,
    NoteWrite,
    SearchRequest,
    SearchResultRead,
    SearchStrategy,
    VectorRequest,
    VectorResponse,
)

__all__ = [
    "EmbeddingDatum",
    "EmbeddingResponsePayload",
    "NoteRead",
    "NoteWrite",
    "SearchRequest",
    "SearchResultRead",
    "SearchStrategy",
    "EmbeddingStats",
    "EmbeddingStatusResponse",
    "BulkEmbeddingRequest",
    "BulkEmbeddingResponse",
    "VectorRequest",
    "VectorResponse",
]
