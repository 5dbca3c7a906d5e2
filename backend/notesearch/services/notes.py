"""Document store boundary backed by the ``notes`` table.

Classes:
    DocumentStore: Protocol the search services use to load the corpus.
    NoteStore: SQLModel implementation of the document store.
"""

from __future__ import annotations

from typing import Optional, Protocol, Sequence

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from notesearch.models import Note
from notesearch.utils.time import utc_now


class DocumentStore(Protocol):
    async def get_all(self) -> Sequence[Note]: ...

    async def get_by_id(self, note_id: str) -> Optional[Note]: ...


class NoteStore:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_all(self) -> list[Note]:
        result = await self._session.exec(select(Note).order_by(Note.updated_at.desc(), Note.id))
        return list(result.all())

    async def get_by_id(self, note_id: str) -> Optional[Note]:
        return await self._session.get(Note, note_id)

    async def save(self, note_id: str, *, title: str, body: str) -> Note:
        note = await self._session.get(Note, note_id)
        if note is None:
            note = Note(id=note_id, title=title, body=body)
        else:
            note.title = title
            note.body = body
            note.updated_at = utc_now()
        self._session.add(note)
        await self._session.commit()
        await self._session.refresh(note)
        return note

    async def delete(self, note_id: str) -> bool:
        note = await self._session.get(Note, note_id)
        if note is None:
            return False
        await self._session.delete(note)
        await self._session.commit()
        return True
