"""Explicit schema for the embeddings API response body.

Classes:
    EmbeddingDatum: One embedding entry in the response ``data`` list.
    EmbeddingResponsePayload: Validated shape of a full embeddings response.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class EmbeddingDatum(BaseModel):
    model_config = ConfigDict(extra="ignore")

    index: int = 0
    embedding: list[float] = Field(min_length=1)


class EmbeddingResponsePayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    data: list[EmbeddingDatum] = Field(min_length=1)
    model: Optional[str] = None
