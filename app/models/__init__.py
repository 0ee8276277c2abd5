"""Database models"""
from app.models.user import User, AuthMethod
from app.models.note import Note, NoteTag, NOTE_COLORS, DEFAULT_NOTE_COLOR

__all__ = [
    "User", "AuthMethod",
    "Note", "NoteTag", "NOTE_COLORS", "DEFAULT_NOTE_COLOR",
]
