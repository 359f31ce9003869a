from __future__ import annotations

import copy
from typing import Any

from study_companion.core.repositories.collection_store import CollectionStore


class InMemoryCollectionStore(CollectionStore):
    """Process-local store. Records are deep-copied in and out.

    Keeps read/write counters so callers can check how often the backend was
    touched.
    """

    def __init__(self, initial: dict[str, list[dict[str, Any]]] | None = None) -> None:
        self._collections: dict[str, list[dict[str, Any]]] = copy.deepcopy(initial or {})
        self.reads = 0
        self.writes = 0

    async def ready(self) -> None:
        return None

    async def get_collection(self, key: str) -> list[dict[str, Any]]:
        self.reads += 1
        return copy.deepcopy(self._collections.get(key, []))

    async def set_collection(self, key: str, items: list[dict[str, Any]]) -> None:
        self.writes += 1
        self._collections[key] = copy.deepcopy(list(items))
