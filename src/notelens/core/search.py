"""Debounced, cancellable search against the note store.

Typing restarts a debounce window; only the text present when the window
elapses is searched. Each execution supersedes the previous one by
generation: a response is applied only while its request is still the live
one, so completions may arrive in any order.

Cancelling a request is a local filter. The backend call may still finish;
its result is simply dropped. Debounced requests run in a task owned by this
coordinator and that task is cancelled too, which lets the transport abort.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Coroutine, Optional, Set

from notelens.core.interfaces import INoteStore
from notelens.core.models import Change, ChangeKind, ResultSet, SearchRequest

logger = logging.getLogger(__name__)

Notify = Callable[[Change], None]

DEFAULT_DEBOUNCE_SECONDS = 0.1


def _ignore(change: Change) -> None:
    return None


class SearchCoordinator:
    """Owns the query text, debounce timer, live search request and result set.

    Attributes:
        store: Note store collaborator
        debounce_seconds: Quiet period before a typed query is executed
    """

    def __init__(
        self,
        store: INoteStore,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
        notify: Optional[Notify] = None,
    ):
        self.store = store
        self.debounce_seconds = debounce_seconds
        self._notify: Notify = notify or _ignore

        self._query_text = ""
        self._query = ""
        self._results: ResultSet = ()
        self._is_loading = False
        self._error: Optional[str] = None

        self._generation = 0
        self._live: Optional[SearchRequest] = None
        self._debounce_task: Optional[asyncio.Task] = None
        self._tasks: Set[asyncio.Task] = set()

    def bind(self, notify: Notify) -> None:
        self._notify = notify

    @property
    def query_text(self) -> str:
        """Current, possibly not yet searched, input."""
        return self._query_text

    @property
    def query(self) -> str:
        """Query whose response produced the current result set."""
        return self._query

    @property
    def results(self) -> ResultSet:
        return self._results

    @property
    def is_loading(self) -> bool:
        return self._is_loading

    @property
    def error(self) -> Optional[str]:
        return self._error

    @property
    def generation(self) -> int:
        return self._generation

    def set_query_text(self, text: str) -> None:
        """Record new input and restart the debounce window.

        Must be called from inside a running event loop.
        """
        if text == self._query_text:
            return

        self._query_text = text
        self._cancel_debounce()
        self._cancel_live()
        self._debounce_task = self._spawn(self._debounced(text))

    async def search_now(self, query: str) -> ResultSet:
        """Execute ``query`` immediately, bypassing the debounce window."""
        await self._execute(query)
        return self._results

    def abort(self) -> None:
        """Cancel the pending debounce window and any live request."""
        self._cancel_debounce()
        self._cancel_live()
        self._is_loading = False

    def clear(self) -> None:
        """Abort, forget the query text and debounce a search for everything."""
        self.abort()
        self._query_text = ""
        self._query = ""
        self._debounce_task = self._spawn(self._debounced(""))

    def pending(self) -> Set[asyncio.Task]:
        return {task for task in self._tasks if not task.done()}

    async def _debounced(self, text: str) -> None:
        await asyncio.sleep(self.debounce_seconds)
        await self._execute(text)

    async def _execute(self, query: str) -> None:
        self._cancel_live()
        self._generation += 1
        request = SearchRequest(query=query, generation=self._generation)
        self._live = request
        self._is_loading = True

        try:
            notes = await self.store.search(query)
        except asyncio.CancelledError:
            if self._is_current(request):
                self._live = None
                self._is_loading = False
            raise
        except Exception as e:
            if not self._is_current(request):
                logger.debug(f"Discarding stale search failure (generation {request.generation})")
                return
            logger.warning(f"Search failed for '{query}': {e}")
            self._apply(request, (), error=f"Search failed: {e}")
            return

        if not self._is_current(request):
            logger.debug(
                f"Discarding stale search results for '{query}' "
                f"(generation {request.generation}, current {self._generation})"
            )
            return

        self._apply(request, tuple(notes), error=None)

    def _apply(self, request: SearchRequest, results: ResultSet, error: Optional[str]) -> None:
        self._live = None
        self._is_loading = False
        self._error = error
        self._query = request.query
        self._results = results
        logger.debug(f"Applied {len(results)} results for '{request.query}'")
        self._notify(Change(ChangeKind.RESULTS, results))

    def _is_current(self, request: SearchRequest) -> bool:
        return (
            self._live is not None
            and not request.cancelled
            and self._live.generation == request.generation
        )

    def _cancel_live(self) -> None:
        if self._live is not None:
            self._live.cancelled = True
            self._live = None
            self._is_loading = False

    def _cancel_debounce(self) -> None:
        task = self._debounce_task
        self._debounce_task = None
        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()

    def _spawn(self, coro: Coroutine) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task


__all__ = ["SearchCoordinator", "DEFAULT_DEBOUNCE_SECONDS", "Notify"]
