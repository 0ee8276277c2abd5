"""Note endpoints - every route is scoped to the signed-in user's notes"""
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.core.dependencies import get_db
from app.errors.exceptions import NotFoundException
from app.errors.response_codes import SuccessCode, paginated_response, success_response
from app.middleware.auth import get_current_user
from app.models.note import Note
from app.models.user import User
from app.schemas.note_schemas import NoteCreate, NoteResponse, NoteUpdate
from app.services import note_service

router = APIRouter()


def _serialize(note: Note) -> dict:
    return NoteResponse.model_validate(note).model_dump(by_alias=True, mode="json")


@router.post("", status_code=status.HTTP_201_CREATED)
def create_note(
    body: NoteCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    ## Create a note

    ### Required fields (JSON body)
    | Field    | Type     | Description                         |
    |----------|----------|-------------------------------------|
    | title    | string   | 1-100 characters                    |
    | content  | string   | 1-10000 characters                  |
    | tags     | string[] | Optional                            |
    | color    | string   | Optional, one of the palette colors |
    | isPinned | bool     | Optional, default false             |
    """
    note = note_service.create_note(db, current_user.id, body)
    return success_response(SuccessCode.NOTE_CREATED, data={"note": _serialize(note)})


@router.get("")
def list_notes(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    search: Optional[str] = Query(None, max_length=200),
    tag: Optional[str] = Query(None, max_length=50),
    sort_by: Literal["updatedAt", "createdAt", "title"] = Query("updatedAt", alias="sortBy"),
    sort_order: Literal["asc", "desc"] = Query("desc", alias="sortOrder"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    ## List notes

    ### Query parameters
    | Param     | Default   | Description                               |
    |-----------|-----------|-------------------------------------------|
    | page      | 1         | 1-based page                              |
    | limit     | 20        | Page size (max 100)                       |
    | search    | null      | Case-insensitive match on title/content   |
    | tag       | null      | Only notes carrying this tag              |
    | sortBy    | updatedAt | `updatedAt`, `createdAt` or `title`       |
    | sortOrder | desc      | `asc` or `desc`                           |

    Pinned notes are listed first when sorting by `updatedAt`.
    """
    notes, total = note_service.list_notes(
        db,
        current_user.id,
        page=page,
        limit=limit,
        search=search,
        tag=tag,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return paginated_response("notes", [_serialize(n) for n in notes], total, page, limit)


@router.get("/tags")
def list_tags(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Distinct tags used across the user's notes"""
    return success_response(SuccessCode.RETRIEVED, data={"tags": note_service.list_tags(db, current_user.id)})


@router.get("/{note_id}")
def get_note(
    note_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    note = note_service.get_note(db, note_id, current_user.id)
    if note is None:
        raise NotFoundException(detail="Note not found")
    return success_response(SuccessCode.RETRIEVED, data={"note": _serialize(note)})


@router.put("/{note_id}")
def update_note(
    note_id: str,
    body: NoteUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Partial update; fields left out of the body are unchanged"""
    note = note_service.update_note(db, note_id, current_user.id, body)
    if note is None:
        raise NotFoundException(detail="Note not found")
    return success_response(SuccessCode.UPDATED, message="Note updated successfully", data={"note": _serialize(note)})


@router.delete("/{note_id}")
def delete_note(
    note_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if not note_service.delete_note(db, note_id, current_user.id):
        raise NotFoundException(detail="Note not found")
    return success_response(SuccessCode.DELETED, message="Note deleted successfully")


@router.put("/{note_id}/pin")
def toggle_pin(
    note_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Flip the pinned flag"""
    note = note_service.toggle_pin(db, note_id, current_user.id)
    if note is None:
        raise NotFoundException(detail="Note not found")
    state = "pinned" if note.is_pinned else "unpinned"
    return success_response(SuccessCode.UPDATED, message=f"Note {state} successfully", data={"note": _serialize(note)})
