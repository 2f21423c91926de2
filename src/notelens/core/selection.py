"""Selected-index bookkeeping for the result list."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from notelens.core.models import Change, ChangeKind

logger = logging.getLogger(__name__)


class SelectionController:
    """Owns the selected index. ``None`` means nothing is selected.

    The index is only forced back into range by ``normalize``, which runs
    whenever the result set changes. ``resolve`` gives the index a reader
    should use in the meantime.
    """

    def __init__(self, notify: Optional[Callable[[Change], None]] = None):
        self._index: Optional[int] = None
        self._notify = notify or (lambda change: None)

    def bind(self, notify: Callable[[Change], None]) -> None:
        self._notify = notify

    @property
    def index(self) -> Optional[int]:
        return self._index

    def set_index(self, index: Optional[int]) -> bool:
        """Select ``index`` (clamped to be non-negative).

        Returns False when the selection did not change.
        """
        if index is not None:
            index = max(0, index)
        if index == self._index:
            return False
        self._index = index
        self._notify(Change(ChangeKind.SELECTION, index))
        return True

    def normalize(self, length: int) -> bool:
        """Bring the index back into ``[0, length)``.

        Returns True when an invalid index was reset to 0, so callers can
        leave any view bound to the vanished selection.
        """
        if length == 0:
            self.set_index(None)
            return False
        if self._index is None or self._index >= length:
            logger.debug(f"Resetting selection {self._index} for {length} results")
            self.set_index(0)
            return True
        return False

    def resolve(self, length: int) -> Optional[int]:
        if length == 0:
            return None
        if self._index is None or self._index >= length:
            return 0
        return self._index

    def select_next(self, length: int) -> bool:
        if length == 0:
            return False
        current = self._index
        if current is None:
            return self.set_index(0)
        return self.set_index(min(length - 1, current + 1))

    def select_previous(self, length: int) -> bool:
        if length == 0:
            return False
        current = self._index
        if current is None:
            return self.set_index(0)
        return self.set_index(max(0, min(current, length - 1) - 1))

    def reset(self) -> None:
        self.set_index(None)


__all__ = ["SelectionController"]
