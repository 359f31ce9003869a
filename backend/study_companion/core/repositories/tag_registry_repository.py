from __future__ import annotations

from typing import TYPE_CHECKING, Any

from study_companion.config import settings
from study_companion.core.models.base import utcnow
from study_companion.core.models.tag_registry import ModuleTagRegistry
from study_companion.utils.logging import get_logger

if TYPE_CHECKING:
    from study_companion.core.repositories.collection_store import CollectionStore

logger = get_logger(__name__)


class TagRegistryRepository:
    """Per-module tag registries stored together in one collection.

    The store is not partitioned by module; lookups scan the collection for the
    matching `moduleId`. Records of other modules are written back untouched.
    Storage errors are not handled here.
    """

    def __init__(
        self,
        store: CollectionStore,
        *,
        collection_key: str | None = None,
        version: str | None = None,
    ) -> None:
        self._store = store
        self.collection_key = collection_key or settings.registry_collection_key
        self.version = version or settings.registry_version

    async def get(self, module_id: str) -> ModuleTagRegistry:
        """Return the module's registry, or a fresh empty one if none is stored."""
        records = await self._load_all()
        for record in records:
            if self._module_id_of(record) == module_id:
                return ModuleTagRegistry.model_validate(record)
        return self.empty(module_id)

    async def save(self, registry: ModuleTagRegistry) -> ModuleTagRegistry:
        """Upsert by module id and stamp `last_updated_at`."""
        records = await self._load_all()
        registry.last_updated_at = utcnow()
        record = registry.to_record()

        for idx, existing in enumerate(records):
            if self._module_id_of(existing) == registry.module_id:
                records[idx] = record
                break
        else:
            records.append(record)

        await self._save_all(records)
        logger.debug(
            "Saved tag registry for module %s (%d entries)", registry.module_id, len(registry.entries)
        )
        return registry

    async def delete(self, module_id: str) -> bool:
        """Delete a module's registry. Return True if one was removed."""
        records = await self._load_all()
        remaining = [r for r in records if self._module_id_of(r) != module_id]
        if len(remaining) == len(records):
            return False
        await self._save_all(remaining)
        logger.info("Deleted tag registry for module %s", module_id)
        return True

    def empty(self, module_id: str) -> ModuleTagRegistry:
        return ModuleTagRegistry(module_id=module_id, entries=[], version=self.version)

    async def _load_all(self) -> list[dict[str, Any]]:
        await self._store.ready()
        return list(await self._store.get_collection(self.collection_key))

    async def _save_all(self, records: list[dict[str, Any]]) -> None:
        await self._store.ready()
        await self._store.set_collection(self.collection_key, records)

    @staticmethod
    def _module_id_of(record: Any) -> Any:
        if not isinstance(record, dict):
            return None
        return record.get("moduleId", record.get("module_id"))
