"""Pydantic models for notes and the HTTP request/response bodies."""

import locale
import logging
from datetime import UTC, datetime

from pydantic import BaseModel, Field

from notes_api.errors import ValidationError

logger = logging.getLogger(__name__)


class Note(BaseModel):
    """A single note as stored by the data service."""

    id: int = Field(..., description="Store-assigned identifier")
    title: str = Field(..., description="Note title")
    content: str = Field(..., description="Note content")
    date: str = Field(..., description="Locale-formatted creation/update date")
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        description="Server-managed creation timestamp, used for ordering",
    )


class NoteIn(BaseModel):
    """Request body for creating or updating a note."""

    title: str
    content: str


class SummaryOut(BaseModel):
    """Response body for POST /summarize."""

    summary: str


def validate_note_fields(title: str, content: str) -> None:
    """Raise ValidationError if title or content is blank after trimming."""
    if not title or not title.strip():
        raise ValidationError("Title is empty or whitespace-only.")
    if not content or not content.strip():
        raise ValidationError("Content is empty or whitespace-only.")


def display_date(now: datetime | None = None) -> str:
    """Format a date for display using the current locale (``%x``)."""
    return (now or datetime.now()).strftime("%x")


def use_system_locale() -> str | None:
    """Switch LC_TIME to the environment's locale so ``%x`` follows it.

    Returns the locale name, or None if the environment names a locale that
    is not installed (dates then stay in the C locale).
    """
    try:
        return locale.setlocale(locale.LC_TIME, "")
    except locale.Error as e:
        logger.warning("System locale unavailable, dates use the C locale: %s", e)
        return None
