"""Content loading for the selected note with request supersession."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Coroutine, Optional, Set

from notelens.core.interfaces import INoteStore
from notelens.core.models import Change, ChangeKind, ContentRequest

logger = logging.getLogger(__name__)

ERROR_PREFIX = "Error loading note"


class ContentLoader:
    """Owns the displayed content and the live content request.

    Only the most recently requested identifier may publish content. A
    failed load degrades to an error message shown in place of the content.
    """

    def __init__(self, store: INoteStore, notify: Optional[Callable[[Change], None]] = None):
        self.store = store
        self._notify = notify or (lambda change: None)

        self._identifier: Optional[str] = None
        self._content = ""
        self._error: Optional[str] = None

        self._generation = 0
        self._live: Optional[ContentRequest] = None
        self._live_task: Optional[asyncio.Task] = None
        self._tasks: Set[asyncio.Task] = set()

    def bind(self, notify: Callable[[Change], None]) -> None:
        self._notify = notify

    @property
    def identifier(self) -> Optional[str]:
        """Identifier whose content is displayed or being fetched."""
        return self._identifier

    @property
    def content(self) -> str:
        return self._content

    @property
    def error(self) -> Optional[str]:
        return self._error

    @property
    def is_loading(self) -> bool:
        return self._live is not None

    @property
    def generation(self) -> int:
        return self._generation

    def load_for(self, identifier: Optional[str], force: bool = False) -> Optional[asyncio.Task]:
        """Start loading ``identifier``, superseding any load in flight.

        ``None`` clears the content without a backend call. Asking again for
        the identifier already targeted does nothing unless ``force`` is set.
        """
        if identifier is None:
            self.clear()
            return None
        if identifier == self._identifier and not force:
            return None

        self._cancel_live()
        self._identifier = identifier
        self._generation += 1
        request = ContentRequest(identifier=identifier, generation=self._generation)
        self._live = request
        task = self._spawn(self._fetch(request))
        self._live_task = task
        return task

    async def reload(self, identifier: str) -> str:
        """Fetch ``identifier`` again and wait for the outcome."""
        task = self.load_for(identifier, force=True)
        if task is not None:
            # wait() rather than await: a superseded task ends cancelled.
            await asyncio.wait({task})
        return self._content

    def clear(self) -> None:
        self._cancel_live()
        self._identifier = None
        self._error = None
        if self._content:
            self._publish("")

    def abort(self) -> None:
        self._cancel_live()

    def pending(self) -> Set[asyncio.Task]:
        return {task for task in self._tasks if not task.done()}

    async def _fetch(self, request: ContentRequest) -> None:
        try:
            content = await self.store.get_content(request.identifier)
        except asyncio.CancelledError:
            if self._is_current(request):
                self._live = None
            raise
        except Exception as e:
            if not self._is_current(request):
                logger.debug(f"Discarding stale content failure for {request.identifier}")
                return
            logger.warning(f"Failed to load note content for {request.identifier}: {e}")
            self._live = None
            self._error = str(e)
            self._publish(f"{ERROR_PREFIX}: {e}")
            return

        if not self._is_current(request):
            logger.debug(
                f"Discarding stale content for {request.identifier} "
                f"(generation {request.generation}, current {self._generation})"
            )
            return

        self._live = None
        self._error = None
        self._publish(content)

    def _publish(self, content: str) -> None:
        self._content = content
        self._notify(Change(ChangeKind.CONTENT, self._identifier))

    def _is_current(self, request: ContentRequest) -> bool:
        return (
            self._live is not None
            and not request.cancelled
            and self._live.generation == request.generation
        )

    def _cancel_live(self) -> None:
        if self._live is not None:
            self._live.cancelled = True
            self._live = None
        task = self._live_task
        self._live_task = None
        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()

    def _spawn(self, coro: Coroutine) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task


__all__ = ["ContentLoader", "ERROR_PREFIX"]
