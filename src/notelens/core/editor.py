"""Edit session state for the note being edited."""

from __future__ import annotations

import logging
from typing import Optional

logger = logging.getLogger(__name__)


class EditSession:
    """Tracks the note being edited and whether it has unsaved changes.

    Persisting the edit is the note store's job; this only holds the
    original and edited text so callers can tell when a save is due.
    """

    def __init__(self) -> None:
        self._identifier: Optional[str] = None
        self._original = ""
        self._edited = ""

    @property
    def is_active(self) -> bool:
        return self._identifier is not None

    @property
    def identifier(self) -> Optional[str]:
        return self._identifier

    @property
    def original_content(self) -> str:
        return self._original

    @property
    def edited_content(self) -> str:
        return self._edited

    @property
    def is_dirty(self) -> bool:
        return self.is_active and self._edited != self._original

    def begin(self, identifier: str, content: str) -> None:
        if not identifier:
            raise ValueError("identifier is required to start editing")
        self._identifier = identifier
        self._original = content
        self._edited = content

    def update(self, content: str) -> None:
        if not self.is_active:
            raise RuntimeError("No note is being edited")
        self._edited = content

    def mark_saved(self) -> None:
        self._original = self._edited

    def exit(self) -> Optional[str]:
        """Leave edit mode, returning the identifier that was being edited."""
        identifier = self._identifier
        if identifier is not None and self.is_dirty:
            logger.info(f"Discarding unsaved edits to {identifier}")
        self._identifier = None
        self._original = ""
        self._edited = ""
        return identifier


__all__ = ["EditSession"]
