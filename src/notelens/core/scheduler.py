"""Effect scheduler wiring the search core into one ordered pipeline.

Components publish ``Change`` records through ``publish``. The scheduler
drains them first-in first-out on the calling thread and runs a fixed
reaction for each kind:

- QUERY_TEXT: restart the search debounce, show highlights again
- RESULTS: normalize the selection (leaving edit mode on reset), sync content
- SELECTION: load content for the newly selected note, or clear it
- CONTENT / HIGHLIGHTS: nothing to drive; listeners re-render

A change published from inside a reaction is queued behind the current one,
so reactions never nest.
"""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from typing import Callable, Deque, List, Optional

from notelens.core.content import ContentLoader
from notelens.core.editor import EditSession
from notelens.core.highlight import HighlightEngine
from notelens.core.interfaces import INoteStore
from notelens.core.models import Change, ChangeKind, HighlightVisibility
from notelens.core.search import SearchCoordinator
from notelens.core.selection import SelectionController

logger = logging.getLogger(__name__)

Listener = Callable[[Change], None]


class EffectScheduler:
    """Single authority reacting to state changes, in a fixed order."""

    def __init__(
        self,
        store: INoteStore,
        search: SearchCoordinator,
        selection: SelectionController,
        content: ContentLoader,
        highlighter: HighlightEngine,
        editor: Optional[EditSession] = None,
    ):
        self.store = store
        self.search = search
        self.selection = selection
        self.content = content
        self.highlighter = highlighter
        self.editor = editor or EditSession()

        self._queue: Deque[Change] = deque()
        self._draining = False
        self._disposed = False
        self._visibility = HighlightVisibility.SHOWN
        self._listeners: List[Listener] = []

        for component in (search, selection, content):
            component.bind(self.publish)

    # ------------------------------------------------------------------
    # Queue
    # ------------------------------------------------------------------

    def publish(self, change: Change) -> None:
        if self._disposed:
            return
        self._queue.append(change)
        if self._draining:
            return
        self._drain()

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener called after each change is handled."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _drain(self) -> None:
        self._draining = True
        try:
            while self._queue:
                change = self._queue.popleft()
                self._dispatch(change)
                self._emit(change)
        finally:
            self._draining = False

    def _dispatch(self, change: Change) -> None:
        if change.kind is ChangeKind.QUERY_TEXT:
            self._on_query_text(str(change.value or ""))
        elif change.kind is ChangeKind.RESULTS:
            self._on_results()
        elif change.kind is ChangeKind.SELECTION:
            self._sync_content()

    def _emit(self, change: Change) -> None:
        for listener in list(self._listeners):
            try:
                listener(change)
            except Exception:
                logger.exception(f"Listener failed while handling {change.kind.value}")

    # ------------------------------------------------------------------
    # Reactions
    # ------------------------------------------------------------------

    def _on_query_text(self, text: str) -> None:
        self.search.set_query_text(text)
        self._set_visibility(HighlightVisibility.SHOWN)

    def _on_results(self) -> None:
        reset = self.selection.normalize(len(self.search.results))
        if reset and self.editor.is_active:
            identifier = self.editor.exit()
            logger.info(f"Selection reset; left edit mode for {identifier}")
        self._sync_content()

    def _sync_content(self) -> None:
        self.content.load_for(self.selected_identifier)

    def _set_visibility(self, visibility: HighlightVisibility) -> None:
        if visibility is self._visibility:
            return
        self._visibility = visibility
        self.publish(Change(ChangeKind.HIGHLIGHTS, visibility))

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def set_query_text(self, text: str) -> None:
        self.publish(Change(ChangeKind.QUERY_TEXT, text))

    def clear_search(self) -> None:
        self.search.clear()
        self.publish(Change(ChangeKind.QUERY_TEXT, ""))

    def dismiss_highlights(self) -> None:
        self._set_visibility(HighlightVisibility.SUPPRESSED)

    async def refresh_after_save(self, identifier: str, query: str) -> None:
        """Invalidate the store, re-run ``query`` and reload ``identifier``.

        The steps run strictly in order: the search may drop ``identifier``
        from the results, in which case the selection reaction has already
        loaded whatever is selected now and no reload is issued.
        """
        try:
            await self.store.invalidate_cache()
        except Exception as e:
            logger.warning(f"Cache invalidation failed before refresh: {e}")

        await self.search.search_now(query)

        if self.selected_identifier != identifier:
            logger.debug(f"{identifier} is no longer selected after refresh; skipping reload")
            return
        await self.content.reload(identifier)

    # ------------------------------------------------------------------
    # Derived state
    # ------------------------------------------------------------------

    @property
    def highlights_suppressed(self) -> bool:
        return self._visibility is HighlightVisibility.SUPPRESSED

    @property
    def selected_index(self) -> Optional[int]:
        return self.selection.resolve(len(self.search.results))

    @property
    def selected_identifier(self) -> Optional[str]:
        index = self.selected_index
        if index is None:
            return None
        return self.search.results[index]

    def highlighted_content(self) -> str:
        return self.highlighter.render(
            self.content.content,
            self.search.query_text,
            suppressed=self.highlights_suppressed,
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def settle(self) -> None:
        """Wait until no debounce window or backend call is outstanding."""
        while True:
            tasks = self.search.pending() | self.content.pending()
            if not tasks:
                return
            await asyncio.wait(tasks)

    def dispose(self) -> None:
        self.search.abort()
        self.content.abort()
        self._queue.clear()
        self._listeners.clear()
        self._disposed = True


__all__ = ["EffectScheduler", "Listener"]
