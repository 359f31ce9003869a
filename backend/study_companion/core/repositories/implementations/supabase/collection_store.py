from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

from study_companion.core.repositories.collection_store import CollectionStore
from study_companion.utils.logging import get_logger

logger = get_logger(__name__)

if TYPE_CHECKING:
    from collections.abc import Callable

    from supabase import Client


class SupabaseCollectionStore(CollectionStore):
    """Supabase implementation of the CollectionStore.

    Assumes a table (default `collections`) with a text primary key column
    `key` and a jsonb column `items` holding the whole collection.
    """

    def __init__(self, client: Client, table_name: str = "collections") -> None:
        self._client: Client = client
        self.table_name = table_name

    async def ready(self) -> None:
        # The client is constructed eagerly; nothing to wait for.
        return None

    async def get_collection(self, key: str) -> list[dict[str, Any]]:
        resp = await self._run(
            lambda: self._client.table(self.table_name)
            .select("items")
            .eq("key", key)
            .limit(1)
            .execute()
        )
        rows = resp.data or []
        if not rows:
            return []
        items = rows[0].get("items")
        return items if isinstance(items, list) else []

    async def set_collection(self, key: str, items: list[dict[str, Any]]) -> None:
        await self._run(
            lambda: self._client.table(self.table_name)
            .upsert({"key": key, "items": list(items)}, on_conflict="key")
            .execute()
        )
        logger.debug("Upserted %d records into collection %s", len(items), key)

    @staticmethod
    async def _run(func: Callable[[], Any]) -> Any:
        return await asyncio.to_thread(func)
