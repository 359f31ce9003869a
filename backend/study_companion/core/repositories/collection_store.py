from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class CollectionStore(ABC):
    """Abstract key-value persistence for lists of JSON records.

    Each key holds one whole collection; reads and writes replace the list as
    a unit. Implementations perform I/O and therefore expose async methods.
    Callers await `ready()` before touching a collection.
    """

    @abstractmethod
    async def ready(self) -> None:  # pragma: no cover - interface only
        """Resolve once the backend can serve reads and writes."""

    @abstractmethod
    async def get_collection(self, key: str) -> list[dict[str, Any]]:  # pragma: no cover
        """Return the stored records for `key`, or an empty list."""

    @abstractmethod
    async def set_collection(self, key: str, items: list[dict[str, Any]]) -> None:  # pragma: no cover
        """Replace the records stored under `key`."""
