"""CRUD, search and pagination for notes"""
from typing import List, Optional, Tuple

from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.models.note import DEFAULT_NOTE_COLOR, Note, NoteTag
from app.schemas.note_schemas import NoteCreate, NoteUpdate
from app.utils.clock import utcnow

SORTABLE_FIELDS = {
    "updatedAt": Note.updated_at,
    "createdAt": Note.created_at,
    "title": Note.title,
}


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def create_note(db: Session, user_id: str, data: NoteCreate) -> Note:
    """
    Create a new note owned by *user_id*
    """
    note = Note(
        user_id=user_id,
        title=data.title,
        content=data.content,
        color=data.color or DEFAULT_NOTE_COLOR,
        is_pinned=data.is_pinned,
    )
    note.tags = data.tags
    db.add(note)
    db.commit()
    db.refresh(note)
    return note


def get_note(db: Session, note_id: str, user_id: str) -> Optional[Note]:
    """
    Get a note by ID, only if it belongs to *user_id*
    """
    return db.query(Note).filter(Note.id == note_id, Note.user_id == user_id).first()


def list_notes(
    db: Session,
    user_id: str,
    page: int = 1,
    limit: int = 20,
    search: Optional[str] = None,
    tag: Optional[str] = None,
    sort_by: str = "updatedAt",
    sort_order: str = "desc",
) -> Tuple[List[Note], int]:
    """
    Get one page of the user's notes plus the total match count.

    search matches title or content, case-insensitively.
    When sorting by updatedAt, pinned notes come first.
    """
    query = db.query(Note).filter(Note.user_id == user_id)

    if search:
        pattern = f"%{_escape_like(search.strip())}%"
        query = query.filter(or_(
            Note.title.ilike(pattern, escape="\\"),
            Note.content.ilike(pattern, escape="\\"),
        ))

    if tag:
        query = query.filter(Note.tag_rows.any(NoteTag.name == tag.strip()))

    total = query.count()

    column = SORTABLE_FIELDS.get(sort_by, Note.updated_at)
    ordering = [column.desc() if sort_order == "desc" else column.asc()]
    if sort_by == "updatedAt":
        ordering.insert(0, Note.is_pinned.desc())
    ordering.append(Note.id)

    notes = query.order_by(*ordering).offset((page - 1) * limit).limit(limit).all()
    return notes, total


def update_note(db: Session, note_id: str, user_id: str, data: NoteUpdate) -> Optional[Note]:
    """
    Apply the supplied fields; returns None when the note is not the user's
    """
    note = get_note(db, note_id, user_id)
    if note is None:
        return None

    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    for field_name, value in changes.items():
        setattr(note, field_name, value)
    note.updated_at = utcnow()

    db.commit()
    db.refresh(note)
    return note


def toggle_pin(db: Session, note_id: str, user_id: str) -> Optional[Note]:
    note = get_note(db, note_id, user_id)
    if note is None:
        return None
    note.is_pinned = not note.is_pinned
    db.commit()
    db.refresh(note)
    return note


def delete_note(db: Session, note_id: str, user_id: str) -> bool:
    """
    Delete a note by ID. Returns False when nothing of the user's matched.
    """
    note = get_note(db, note_id, user_id)
    if note is None:
        return False
    db.delete(note)
    db.commit()
    return True


def list_tags(db: Session, user_id: str) -> List[str]:
    """Distinct tags across the user's notes, alphabetical"""
    rows = (
        db.query(NoteTag.name)
        .join(Note, Note.id == NoteTag.note_id)
        .filter(Note.user_id == user_id)
        .distinct()
        .order_by(NoteTag.name)
        .all()
    )
    return [name for (name,) in rows]
