"""API router composition for the backend.

The module assembles individual route groups into a single `api_router` that can be mounted on the app.
"""

from fastapi import APIRouter

from notesearch.api.routes import embeddings_router, notes_router, search_router

api_router = APIRouter()
api_router.include_router(search_router)
api_router.include_router(notes_router)
api_router.include_router(embeddings_router)

__all__ = ["api_router"]
