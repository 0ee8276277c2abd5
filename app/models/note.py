"""Note database models"""
import uuid

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from app.db.base import Base
from app.utils.clock import utcnow

NOTE_COLORS = (
    "#ffffff", "#f28b82", "#fbbd04", "#fff475", "#ccff90", "#a7ffeb",
    "#aecbfa", "#d7aefb", "#fdcfe8", "#e6c9a8", "#e8eaed",
)
DEFAULT_NOTE_COLOR = NOTE_COLORS[0]


def _new_note_id() -> str:
    return uuid.uuid4().hex


class NoteTag(Base):
    """A single tag attached to a note"""
    __tablename__ = "note_tags"

    id = Column(Integer, primary_key=True, autoincrement=True)
    note_id = Column(String(32), ForeignKey("notes.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(50), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)

    def __repr__(self):
        return f"<NoteTag(note_id={self.note_id}, name='{self.name}')>"


class Note(Base):
    """
    A personal note. Owned by exactly one user and removed with that user.
    """
    __tablename__ = "notes"

    id = Column(String(32), primary_key=True, default=_new_note_id)
    user_id = Column(String(32), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(100), nullable=False)
    content = Column(Text, nullable=False)
    is_pinned = Column(Boolean, default=False, nullable=False, index=True)
    color = Column(String(7), nullable=False, default=DEFAULT_NOTE_COLOR)

    # Client-side timestamps keep sub-second ordering on every backend
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False, index=True)

    owner = relationship("User", back_populates="notes")
    tag_rows = relationship(
        "NoteTag",
        cascade="all, delete-orphan",
        order_by=NoteTag.position,
        lazy="selectin",
        passive_deletes=True,
    )

    @property
    def tags(self) -> list:
        return [row.name for row in self.tag_rows]

    @tags.setter
    def tags(self, names) -> None:
        seen = []
        for name in names or []:
            cleaned = name.strip()
            if cleaned and cleaned not in seen:
                seen.append(cleaned)
        self.tag_rows = [NoteTag(name=name, position=index) for index, name in enumerate(seen)]

    def __repr__(self):
        return f"<Note(id={self.id}, user_id={self.user_id}, title='{self.title}')>"
