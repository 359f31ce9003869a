from __future__ import annotations

import asyncio
import json
import os
from pathlib import Path
from typing import Any

from study_companion.core.repositories.collection_store import CollectionStore
from study_companion.utils.logging import get_logger

logger = get_logger(__name__)


class JsonFileCollectionStore(CollectionStore):
    """All collections in one JSON document: {"<key>": [...], ...}.

    Writes go to a temporary file that replaces the document, so a collection
    is either fully written or not at all. Blocking file I/O runs in a worker
    thread.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._lock = asyncio.Lock()

    async def ready(self) -> None:
        await self._run(lambda: self.path.parent.mkdir(parents=True, exist_ok=True))

    async def get_collection(self, key: str) -> list[dict[str, Any]]:
        data = await self._run(self._read)
        items = data.get(key, [])
        if not isinstance(items, list):
            raise ValueError(f"Collection {key!r} in {self.path} is not a list")
        return items

    async def set_collection(self, key: str, items: list[dict[str, Any]]) -> None:
        async with self._lock:
            def _update() -> None:
                data = self._read()
                data[key] = list(items)
                self._write(data)

            await self._run(_update)
        logger.debug("Wrote %d records to collection %s (file=%s)", len(items), key, self.path)

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Expected a JSON object in {self.path}")
        return data

    def _write(self, data: dict[str, Any]) -> None:
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        os.replace(tmp, self.path)

    @staticmethod
    async def _run(func):
        return await asyncio.to_thread(func)
