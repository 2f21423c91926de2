"""Incremental search and content synchronization core.

Components, leaves first:
- highlight.py: HighlightEngine, query highlighting behind a bounded cache
- search.py: SearchCoordinator, debounced and superseding searches
- selection.py: SelectionController, selected index normalization
- content.py: ContentLoader, selected note content with supersession
- scheduler.py: EffectScheduler, fixed reactions in a deterministic order
- browser.py: NoteBrowser, the UI-facing facade
"""

from .browser import NoteBrowser
from .content import ContentLoader
from .editor import EditSession
from .errors import NoteNotFoundError, NoteStoreError, NoteStoreUnavailableError
from .highlight import HighlightEngine
from .interfaces import INoteStore
from .models import BrowserSnapshot, Change, ChangeKind, EscapeAction
from .scheduler import EffectScheduler
from .search import SearchCoordinator
from .selection import SelectionController

__all__ = [
    "NoteBrowser",
    "ContentLoader",
    "EditSession",
    "NoteStoreError",
    "NoteNotFoundError",
    "NoteStoreUnavailableError",
    "HighlightEngine",
    "INoteStore",
    "BrowserSnapshot",
    "Change",
    "ChangeKind",
    "EscapeAction",
    "EffectScheduler",
    "SearchCoordinator",
    "SelectionController",
]
