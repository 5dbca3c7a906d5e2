"""Error taxonomy for the retrieval core.

Classes:
    SearchError: Base class for every failure raised by the search services.
    ConfigurationError: The embedding capability has no credential configured.
    GenerationError: A call to the embedding capability failed for a specific input.
    DimensionMismatch: Two vectors of unequal length were compared.
"""

from __future__ import annotations


class SearchError(Exception):
    """Base class for retrieval failures."""


class ConfigurationError(SearchError):
    pass


class GenerationError(SearchError):
    pass


class DimensionMismatch(SearchError, ValueError):
    def __init__(self, left: int, right: int) -> None:
        super().__init__(f"Vectors must have the same length (got {left} and {right})")
        self.left = left
        self.right = right
