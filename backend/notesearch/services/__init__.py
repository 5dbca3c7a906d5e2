"""Service layer exports.

Expose the embedding client, cache and search implementations for easy importing.
"""

from .openai_client import OpenAIService
from .embeddings import BulkEmbeddingResult, EmbeddingCache
from .notes import NoteStore
from .search import SearchResult, SearchService
from .similarity import cosine_similarity

__all__ = [
    "OpenAIService",
    "EmbeddingCache",
    "BulkEmbeddingResult",
    "NoteStore",
    "SearchResult",
    "SearchService",
    "cosine_similarity",
]
