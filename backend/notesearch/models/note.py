"""Note persistence model.

Classes:
    Note: A document in the personal corpus. Owned by the document store; the search core only reads it.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Column, DateTime, Text
from sqlmodel import Field, SQLModel

from notesearch.utils.time import utc_now


class Note(SQLModel, table=True):
    __tablename__ = "notes"

    id: str = Field(primary_key=True)
    title: str = Field(default="")
    body: str = Field(default="", sa_column=Column(Text, nullable=False, default=""))
    updated_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))
