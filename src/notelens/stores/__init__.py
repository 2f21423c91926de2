"""Note store collaborators for the search core."""

from .http import HttpNoteStore
from .memory import InMemoryNoteStore

__all__ = ["HttpNoteStore", "InMemoryNoteStore"]
