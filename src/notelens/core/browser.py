"""Note browser facade: the entry points a UI drives and the view it reads."""

from __future__ import annotations

import logging
from typing import Optional

from notelens.config import Settings, get_settings
from notelens.core.content import ContentLoader
from notelens.core.editor import EditSession
from notelens.core.highlight import HighlightEngine
from notelens.core.interfaces import INoteStore
from notelens.core.models import BrowserSnapshot, EscapeAction, ResultSet
from notelens.core.scheduler import EffectScheduler, Listener
from notelens.core.search import SearchCoordinator
from notelens.core.selection import SelectionController

logger = logging.getLogger(__name__)

# Typed-but-unsearched input shorter than this is dropped by escape.
SHORT_INPUT_LENGTH = 3


class NoteBrowser:
    """Incremental search over a note store with a consistent selected view.

    Collaborators are built from ``settings`` unless passed in. All methods
    must be called from the event loop thread; the async ones are the only
    points where the browser waits on the note store.

    Example:
        async with NoteBrowser(store) as browser:
            await browser.initialize()
            browser.set_query_text("world")
            await browser.settle()
            print(browser.snapshot().highlighted_content)
    """

    def __init__(
        self,
        store: INoteStore,
        settings: Optional[Settings] = None,
        highlighter: Optional[HighlightEngine] = None,
        editor: Optional[EditSession] = None,
    ):
        self.settings = settings or get_settings()
        self.store = store

        self.highlighter = highlighter or HighlightEngine(
            capacity=self.settings.highlight_cache_size,
            ttl_seconds=self.settings.highlight_ttl_seconds,
            key_prefix_length=self.settings.highlight_key_prefix,
            css_class=self.settings.highlight_class,
        )
        self.search = SearchCoordinator(store, debounce_seconds=self.settings.debounce_seconds)
        self.selection = SelectionController()
        self.content = ContentLoader(store)
        self.editor = editor or EditSession()
        self.scheduler = EffectScheduler(
            store,
            self.search,
            self.selection,
            self.content,
            self.highlighter,
            self.editor,
        )

    async def __aenter__(self) -> "NoteBrowser":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.dispose()
        await self.settle()

    async def initialize(self) -> ResultSet:
        """Load the unfiltered note list."""
        return await self.search.search_now("")

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    def set_query_text(self, text: str) -> None:
        self.scheduler.set_query_text(text)

    async def search_now(self, text: str) -> ResultSet:
        return await self.search.search_now(text)

    def clear_search(self) -> None:
        self.scheduler.clear_search()

    def dismiss_highlights(self) -> None:
        self.scheduler.dismiss_highlights()

    def handle_escape(self) -> EscapeAction:
        """Step back one level: highlights, then the search, then focus."""
        has_query = bool(self.search.query.strip())

        if has_query and not self.scheduler.highlights_suppressed:
            self.dismiss_highlights()
            return EscapeAction.HIGHLIGHTS_DISMISSED

        if has_query:
            self.clear_search()
            return EscapeAction.SEARCH_CLEARED

        text = self.search.query_text
        if text.strip() and len(text) < SHORT_INPUT_LENGTH:
            self.clear_search()
            return EscapeAction.SEARCH_CLEARED

        return EscapeAction.FOCUS_SEARCH

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def set_selection_index(self, index: int) -> None:
        self.selection.set_index(index)

    def select_next(self) -> None:
        self.selection.select_next(len(self.search.results))

    def select_previous(self) -> None:
        self.selection.select_previous(len(self.search.results))

    # ------------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------------

    def begin_edit(self) -> bool:
        """Start editing the selected note with its displayed content."""
        identifier = self.scheduler.selected_identifier
        if identifier is None:
            return False
        self.editor.begin(identifier, self.content.content)
        return True

    def exit_edit(self) -> Optional[str]:
        return self.editor.exit()

    async def refresh_after_external_save(self, identifier: str, current_query: str) -> None:
        await self.scheduler.refresh_after_save(identifier, current_query)

    # ------------------------------------------------------------------
    # View
    # ------------------------------------------------------------------

    def snapshot(self) -> BrowserSnapshot:
        return BrowserSnapshot(
            result_set=self.search.results,
            selected_index=self.scheduler.selected_index,
            selected_identifier=self.scheduler.selected_identifier,
            content=self.content.content,
            highlighted_content=self.scheduler.highlighted_content(),
            is_loading=self.search.is_loading,
            last_error=self.search.error or self.content.error,
            highlights_suppressed=self.scheduler.highlights_suppressed,
            query_text=self.search.query_text,
            query=self.search.query,
        )

    def subscribe(self, listener: Listener):
        return self.scheduler.subscribe(listener)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def settle(self) -> None:
        await self.scheduler.settle()

    def dispose(self) -> None:
        self.scheduler.dispose()
        logger.debug("Note browser disposed")


__all__ = ["NoteBrowser", "SHORT_INPUT_LENGTH"]
