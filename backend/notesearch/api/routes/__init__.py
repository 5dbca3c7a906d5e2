"""Route exports for the API layer.

Re-exports the note, search and embedding routers so callers can include every endpoint group.
"""

from .notes import router as notes_router
from .search import router as search_router
from .embeddings import router as embeddings_router

__all__ = ["notes_router", "search_router", "embeddings_router"]
