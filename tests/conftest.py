"""Shared fixtures: a note store whose responses the test releases by hand."""

import asyncio
from typing import Dict, List, Sequence, Tuple

import pytest

from notelens import config as config_module
from notelens.config import Settings
from notelens.core.interfaces import INoteStore


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class ControlledNoteStore(INoteStore):
    """Every call blocks until the test resolves or fails it."""

    def __init__(self):
        self.search_calls: List[str] = []
        self.content_calls: List[str] = []
        self.invalidations = 0
        self._searches: List[Tuple[str, asyncio.Future]] = []
        self._contents: List[Tuple[str, asyncio.Future]] = []

    async def search(self, query: str) -> Sequence[str]:
        self.search_calls.append(query)
        future = asyncio.get_running_loop().create_future()
        self._searches.append((query, future))
        return await future

    async def get_content(self, identifier: str) -> str:
        self.content_calls.append(identifier)
        future = asyncio.get_running_loop().create_future()
        self._contents.append((identifier, future))
        return await future

    async def invalidate_cache(self) -> None:
        self.invalidations += 1

    def resolve_search(self, query: str, results: Sequence[str]) -> bool:
        return self._settle(self._searches, query, result=list(results))

    def fail_search(self, query: str, error: Exception) -> bool:
        return self._settle(self._searches, query, error=error)

    def resolve_content(self, identifier: str, content: str) -> bool:
        return self._settle(self._contents, identifier, result=content)

    def fail_content(self, identifier: str, error: Exception) -> bool:
        return self._settle(self._contents, identifier, error=error)

    @staticmethod
    def _settle(waiters, key, result=None, error=None) -> bool:
        """Release the oldest outstanding call for ``key``.

        Returns False when that call was already cancelled by its caller.
        """
        for index, (pending_key, future) in enumerate(waiters):
            if pending_key != key:
                continue
            del waiters[index]
            if future.done():
                return False
            if error is not None:
                future.set_exception(error)
            else:
                future.set_result(result)
            return True
        raise AssertionError(f"No outstanding call for {key!r}")


async def run_ready(rounds: int = 10) -> None:
    """Let every ready task run until it blocks again."""
    for _ in range(rounds):
        await asyncio.sleep(0)


@pytest.fixture(autouse=True)
def restore_settings_cache():
    """
    Ensure cached settings do not leak between tests.
    """
    config_module.reload_settings()
    yield
    config_module.reload_settings()


@pytest.fixture
def settings() -> Settings:
    return Settings(debounce_ms=20)


@pytest.fixture
def controlled_store() -> ControlledNoteStore:
    return ControlledNoteStore()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


NOTES: Dict[str, str] = {
    "alpha.md": "Alpha world notes",
    "beta.md": "Beta world draft",
    "gamma.md": "Hello world",
    "delta.md": "Delta world plan",
    "epsilon.md": "Epsilon world list",
}
