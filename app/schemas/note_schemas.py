"""Note Pydantic schemas"""
from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from app.models.note import NOTE_COLORS
from app.utils.clock import as_utc
from app.schemas.auth_schemas import CamelModel


def _validate_color(value: Optional[str]) -> Optional[str]:
    if value is not None and value not in NOTE_COLORS:
        raise ValueError(f"Color must be one of: {', '.join(NOTE_COLORS)}")
    return value


def _clean_tags(value: Optional[List[str]]) -> Optional[List[str]]:
    if value is None:
        return value
    cleaned = [tag.strip() for tag in value if tag and tag.strip()]
    for tag in cleaned:
        if len(tag) > 50:
            raise ValueError("Tags cannot exceed 50 characters")
    return cleaned


class NoteCreate(CamelModel):
    """Schema for creating a note"""
    title: str = Field(..., max_length=200)
    content: str = Field(..., max_length=20000)
    tags: List[str] = Field(default_factory=list)
    color: Optional[str] = None
    is_pinned: bool = False

    @field_validator("title")
    @classmethod
    def _validate_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Title and content are required")
        if len(v) > 100:
            raise ValueError("Title cannot exceed 100 characters")
        return v

    @field_validator("content")
    @classmethod
    def _validate_content(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Title and content are required")
        if len(v) > 10000:
            raise ValueError("Content cannot exceed 10000 characters")
        return v

    @field_validator("tags")
    @classmethod
    def _validate_tags(cls, v):
        return _clean_tags(v)

    @field_validator("color")
    @classmethod
    def _validate_color(cls, v):
        return _validate_color(v)


class NoteUpdate(CamelModel):
    """Partial update; only supplied fields change"""
    title: Optional[str] = Field(None, max_length=200)
    content: Optional[str] = Field(None, max_length=20000)
    tags: Optional[List[str]] = None
    color: Optional[str] = None
    is_pinned: Optional[bool] = None

    @field_validator("title")
    @classmethod
    def _validate_title(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Title cannot be empty")
        if len(v) > 100:
            raise ValueError("Title cannot exceed 100 characters")
        return v

    @field_validator("content")
    @classmethod
    def _validate_content(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Content cannot be empty")
        if len(v) > 10000:
            raise ValueError("Content cannot exceed 10000 characters")
        return v

    @field_validator("tags")
    @classmethod
    def _validate_tags(cls, v):
        return _clean_tags(v)

    @field_validator("color")
    @classmethod
    def _validate_color(cls, v):
        return _validate_color(v)


class NoteResponse(CamelModel):
    """Schema for note response from database"""
    id: str
    user_id: str
    title: str
    content: str
    is_pinned: bool
    tags: List[str]
    color: str
    created_at: datetime
    updated_at: datetime

    @field_validator("created_at", "updated_at")
    @classmethod
    def _timestamps_utc(cls, v: datetime) -> datetime:
        return as_utc(v)
