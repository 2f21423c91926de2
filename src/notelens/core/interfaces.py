from abc import ABC, abstractmethod
from typing import Sequence


class INoteStore(ABC):
    """Note store collaborator consumed by the search core.

    Every call may be slow and completions may arrive in any order.
    Failures are raised as NoteStoreError subclasses.
    """

    @abstractmethod
    async def search(self, query: str) -> Sequence[str]:
        """Return matching note identifiers in display order. No partial results."""
        ...

    @abstractmethod
    async def get_content(self, identifier: str) -> str:
        """Return the displayable content of a note."""
        ...

    @abstractmethod
    async def invalidate_cache(self) -> None:
        """Fire-and-forget signal that stored notes changed."""
        ...
