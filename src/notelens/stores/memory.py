"""In-process note store.

Keeps notes in insertion order and answers searches with a case-insensitive
substring match over the note name and body. Optional latency makes the
asynchronous behaviour of a remote store observable.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Dict, List, Mapping, Optional

from notelens.core.errors import NoteNotFoundError, NoteStoreError
from notelens.core.interfaces import INoteStore

logger = logging.getLogger(__name__)


class InMemoryNoteStore(INoteStore):
    """Note store backed by a dict of identifier -> content.

    Attributes:
        latency: Seconds each call sleeps before answering
        search_calls: Queries received, in call order
        content_calls: Identifiers fetched, in call order
        invalidations: Number of invalidate_cache calls
    """

    def __init__(self, notes: Optional[Mapping[str, str]] = None, latency: float = 0.0):
        self._notes: Dict[str, str] = dict(notes or {})
        self.latency = latency
        self.fail_with: Optional[str] = None
        self.search_calls: List[str] = []
        self.content_calls: List[str] = []
        self.invalidations = 0

    @classmethod
    def from_directory(cls, root: Path, pattern: str = "*.md") -> "InMemoryNoteStore":
        """Load every file matching ``pattern`` under ``root``."""
        root = root.expanduser().resolve()
        if not root.is_dir():
            raise NoteStoreError(f"Not a directory: {root}")
        notes = {}
        for path in sorted(root.rglob(pattern)):
            if path.is_file():
                notes[path.relative_to(root).as_posix()] = path.read_text(encoding="utf-8")
        logger.info(f"Loaded {len(notes)} notes from {root}")
        return cls(notes)

    def put(self, identifier: str, content: str) -> None:
        self._notes[identifier] = content

    def delete(self, identifier: str) -> None:
        self._notes.pop(identifier, None)

    async def search(self, query: str) -> List[str]:
        self.search_calls.append(query)
        await self._wait()
        needle = query.strip().lower()
        if not needle:
            return list(self._notes)
        return [
            identifier
            for identifier, body in self._notes.items()
            if needle in identifier.lower() or needle in body.lower()
        ]

    async def get_content(self, identifier: str) -> str:
        self.content_calls.append(identifier)
        await self._wait()
        try:
            return self._notes[identifier]
        except KeyError:
            raise NoteNotFoundError(f"Note not found: {identifier}", identifier=identifier) from None

    async def invalidate_cache(self) -> None:
        self.invalidations += 1

    async def _wait(self) -> None:
        if self.latency:
            await asyncio.sleep(self.latency)
        if self.fail_with:
            raise NoteStoreError(self.fail_with)


__all__ = ["InMemoryNoteStore"]
