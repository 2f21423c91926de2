"""Exceptions raised by note-store collaborators."""

from typing import Optional


class NoteStoreError(Exception):
    """Base exception for note store failures."""

    def __init__(self, message: str, identifier: Optional[str] = None):
        """Initialize note store error.

        Args:
            message: Error message
            identifier: Note the failing call was about (optional)
        """
        self.identifier = identifier
        super().__init__(message)


class NoteNotFoundError(NoteStoreError):
    """Raised when the requested note does not exist."""
    pass


class NoteStoreUnavailableError(NoteStoreError):
    """Raised when the note store cannot be reached."""
    pass


__all__ = ["NoteStoreError", "NoteNotFoundError", "NoteStoreUnavailableError"]
