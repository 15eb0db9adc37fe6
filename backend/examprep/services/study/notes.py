"""
Study Notes Service

Saves notes (usually copied from generated study content) and lists a
learner's notes newest first. Saving a note that names a subject also
counts toward that topic's progress.

Usage:
    from examprep.services.study.notes import NoteService

    service = NoteService(db)
    saved = await service.save_note(request)
    notes = await service.list_notes("u1")
"""

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from examprep.db.models import StudyNote
from examprep.db.transaction import store_transaction
from examprep.models.study import (
    NoteItem,
    NotesResponse,
    SaveNoteRequest,
    SaveNoteResponse,
)
from examprep.services.learning.topic_tracker import TopicProgressService

logger = logging.getLogger(__name__)

NOTES_PAGE_SIZE = 50


class NoteService:
    """Service for saved study notes."""

    def __init__(
        self,
        db: AsyncSession,
        topic_service: Optional[TopicProgressService] = None,
    ):
        self.db = db
        self.topic_service = topic_service or TopicProgressService(db)

    async def save_note(self, request: SaveNoteRequest) -> SaveNoteResponse:
        """
        Store a note and, when it has a subject, track it on the topic.

        The note and the topic update are committed in one transaction.

        Raises:
            StoreUnavailableError: The note or the topic update failed;
                neither was stored.
        """
        tracked = None
        async with store_transaction(self.db, "Save note"):
            note = StudyNote(
                user_id=request.user_id,
                topic=request.topic,
                subject=request.subject,
                content=request.content,
                tags=list(request.tags),
            )
            self.db.add(note)
            await self.db.flush()

            if request.subject:
                tracked = await self.topic_service.apply_note_saved(
                    request.user_id, request.subject, request.topic
                )

        logger.info(f"Saved note {note.id} on '{request.topic}' for {request.user_id}")

        if tracked is None:
            return SaveNoteResponse(note_id=note.id)
        return SaveNoteResponse(
            note_id=note.id,
            notes_count=tracked.notes_count,
            strength_score=tracked.strength_score,
        )

    async def list_notes(
        self, user_id: str, limit: int = NOTES_PAGE_SIZE
    ) -> NotesResponse:
        """Return the learner's most recent notes, newest first."""
        async with store_transaction(self.db, "List notes", commit=False):
            result = await self.db.execute(
                select(StudyNote)
                .where(StudyNote.user_id == user_id)
                .order_by(StudyNote.created_at.desc(), StudyNote.id.desc())
                .limit(limit)
            )
            notes = list(result.scalars().all())

        return NotesResponse(notes=[NoteItem.model_validate(n) for n in notes])
