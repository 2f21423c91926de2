"""Value objects, change records and the read-only view snapshot.

Requests carry a generation number; a response is applied only when its
generation is still the owner's current one.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

ResultSet = Tuple[str, ...]


# ============================================================================
# Enumerations
# ============================================================================

class ChangeKind(str, Enum):
    """What part of the published state changed."""
    QUERY_TEXT = "query_text"  # User edited the search input
    RESULTS = "results"  # Result set replaced
    SELECTION = "selection"  # Selected index changed
    CONTENT = "content"  # Displayed content replaced
    HIGHLIGHTS = "highlights"  # Highlight visibility toggled


class HighlightVisibility(str, Enum):
    SHOWN = "shown"
    SUPPRESSED = "suppressed"


class EscapeAction(str, Enum):
    """Outcome of the escape key cascade."""
    HIGHLIGHTS_DISMISSED = "highlights_dismissed"
    SEARCH_CLEARED = "search_cleared"
    FOCUS_SEARCH = "focus_search"


# ============================================================================
# Requests and events
# ============================================================================

@dataclass
class SearchRequest:
    query: str
    generation: int
    cancelled: bool = False


@dataclass
class ContentRequest:
    identifier: str
    generation: int
    cancelled: bool = False


@dataclass(frozen=True)
class Change:
    """A single published state change queued for the scheduler."""
    kind: ChangeKind
    value: object = None


@dataclass
class HighlightCacheEntry:
    key: str
    markup: str
    last_access: float
    access_count: int = 1


@dataclass
class CacheStats:
    size: int = 0
    hits: int = 0
    misses: int = 0
    evictions: int = 0
    expirations: int = 0


# ============================================================================
# Snapshot
# ============================================================================

class BrowserSnapshot(BaseModel):
    """Consistent read-only view handed to the UI collaborator."""

    model_config = ConfigDict(frozen=True)

    result_set: ResultSet = Field(default=(), description="Note identifiers in display order")
    selected_index: Optional[int] = Field(None, description="Resolved selection, None when unselected")
    selected_identifier: Optional[str] = Field(None, description="Identifier at the selected index")
    content: str = Field("", description="Displayed content of the selected note")
    highlighted_content: str = Field("", description="Content with query matches marked")
    is_loading: bool = False
    last_error: Optional[str] = None
    highlights_suppressed: bool = False
    query_text: str = Field("", description="Current search input")
    query: str = Field("", description="Query of the last applied search")


__all__ = [
    "ResultSet",
    "ChangeKind",
    "HighlightVisibility",
    "EscapeAction",
    "SearchRequest",
    "ContentRequest",
    "Change",
    "HighlightCacheEntry",
    "CacheStats",
    "BrowserSnapshot",
]
