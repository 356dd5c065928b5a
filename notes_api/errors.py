"""Exception hierarchy shared by the store, the summarizer and the API."""

from __future__ import annotations


class NotesError(Exception):
    """Base class for every error raised by the notes service."""


class ValidationError(NotesError):
    """A note was submitted with an empty title or content."""


class StoreError(NotesError):
    """The backing data service failed or returned an error payload."""


class NoteNotFoundError(StoreError):
    """No note exists with the requested id."""

    def __init__(self, note_id: int) -> None:
        super().__init__(f"Note {note_id} not found")
        self.note_id = note_id


class SummarizationError(NotesError):
    """The summarize request was malformed or the transform failed."""
