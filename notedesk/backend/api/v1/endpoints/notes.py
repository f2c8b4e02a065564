"""
Notes API Endpoints.

REST API endpoints for note management. Every route is scoped to the
owner identified by the Bearer token.
"""

from fastapi import APIRouter

from notedesk.backend.core.dependencies import CurrentOwner, DbSession, RateLimited, RequestId
from notedesk.backend.schemas.base import ApiResponse, ResponseMetadata
from notedesk.backend.schemas.note import NoteCreate, NoteResponse, NoteUpdate
from notedesk.backend.services.note import NoteService

router = APIRouter()


@router.get(
    "",
    response_model=ApiResponse[list[NoteResponse]],
    summary="List notes",
    description="List the caller's notes, pinned first, then most recently updated.",
)
async def list_notes(
    owner_id: CurrentOwner,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[list[NoteResponse]]:
    """List notes with their tags."""
    service = NoteService(db)
    notes = await service.list_notes(owner_id)
    return ApiResponse(
        data=[NoteResponse.model_validate(note) for note in notes],
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.post(
    "",
    response_model=ApiResponse[NoteResponse],
    status_code=201,
    dependencies=[RateLimited],
    summary="Create a note",
    description=(
        "Create a note. Omit `tags` to create it untagged; "
        "tag names that do not exist yet are created."
    ),
)
async def create_note(
    data: NoteCreate,
    owner_id: CurrentOwner,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[NoteResponse]:
    """Create a new note."""
    service = NoteService(db)
    note = await service.create_note(owner_id, data)
    return ApiResponse(
        data=NoteResponse.model_validate(note),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.get(
    "/{note_id}",
    response_model=ApiResponse[NoteResponse],
    summary="Get a note",
    description="Get a single note by ID.",
)
async def get_note(
    note_id: str,
    owner_id: CurrentOwner,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[NoteResponse]:
    """Get a note by ID."""
    service = NoteService(db)
    note = await service.get_note(owner_id, note_id)
    return ApiResponse(
        data=NoteResponse.model_validate(note),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.patch(
    "/{note_id}",
    response_model=ApiResponse[NoteResponse],
    dependencies=[RateLimited],
    summary="Update a note",
    description=(
        "Update an existing note. Only provided fields are updated. "
        "`tags: []` removes every tag; omitting `tags` leaves them unchanged."
    ),
)
async def update_note(
    note_id: str,
    data: NoteUpdate,
    owner_id: CurrentOwner,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[NoteResponse]:
    """Update a note."""
    service = NoteService(db)
    note = await service.update_note(owner_id, note_id, data)
    return ApiResponse(
        data=NoteResponse.model_validate(note),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.delete(
    "/{note_id}",
    status_code=204,
    dependencies=[RateLimited],
    summary="Delete a note",
    description="Permanently delete a note. Its tags are kept.",
)
async def delete_note(
    note_id: str,
    owner_id: CurrentOwner,
    db: DbSession,
) -> None:
    """Delete a note."""
    service = NoteService(db)
    await service.delete_note(owner_id, note_id)
