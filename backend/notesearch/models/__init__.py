"""Convenience exports for ORM models.

Surface the SQLModel classes so calling code can import them from a single module.
"""

from .note import Note
from .embedding_cache import NoteEmbedding

__all__ = [
    "Note",
    "NoteEmbedding",
]
