"""
Notes API Router

Endpoints:
- POST /api/notes - Save a note (tracks the topic when a subject is given)
- GET /api/notes/{user_id} - Latest notes, newest first
"""

import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from examprep.db.base import get_db
from examprep.middleware.error_handling import handle_endpoint_errors
from examprep.models.study import NotesResponse, SaveNoteRequest, SaveNoteResponse
from examprep.services.study import NoteService
from examprep.services.study.notes import NOTES_PAGE_SIZE

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/notes", tags=["notes"])


async def get_note_service(
    db: AsyncSession = Depends(get_db),
) -> NoteService:
    """Get note service."""
    return NoteService(db)


@router.post("", response_model=SaveNoteResponse)
@handle_endpoint_errors("Save note")
async def save_note(
    body: SaveNoteRequest,
    service: NoteService = Depends(get_note_service),
) -> SaveNoteResponse:
    """Save a note."""
    return await service.save_note(body)


@router.get("/{user_id}", response_model=NotesResponse)
@handle_endpoint_errors("List notes")
async def list_notes(
    user_id: str,
    limit: int = Query(NOTES_PAGE_SIZE, ge=1, le=NOTES_PAGE_SIZE),
    service: NoteService = Depends(get_note_service),
) -> NotesResponse:
    """List the learner's notes, newest first."""
    return await service.list_notes(user_id, limit=limit)
