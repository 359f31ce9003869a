from __future__ import annotations

import asyncio
from collections.abc import Mapping
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from study_companion.config import settings
from study_companion.core.exceptions import TagEntryNotFoundError
from study_companion.core.models.tag_registry import ModuleTagRegistry, TagRegistryEntry
from study_companion.core.schemas.normalization import (
    MappedSynonym,
    MigrationStats,
    NormalizedTagsResult,
)
from study_companion.core.tagging.keys import clean_label, registry_key
from study_companion.core.tagging.synonyms import (
    SynonymTable,
    are_canonical_keys_synonyms,
    get_default_synonym_table,
)
from study_companion.utils.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Awaitable, Callable, Iterable

    from study_companion.core.repositories.tag_registry_repository import TagRegistryRepository

    UpdateTask = Callable[[str, dict[str, list[str]]], Awaitable[Any]]


logger = get_logger(__name__)


class TagRegistryService:
    """Canonicalizes free-text tags against each module's tag registry.

    Every read-modify-write cycle loads the registry once and saves it once.
    Concurrent calls for the same module are last-write-wins unless
    `serialize_module_writes` is enabled, which queues them on a per-module
    lock. Locking covers one process running one event loop at a time.
    """

    def __init__(
        self,
        repo: TagRegistryRepository,
        *,
        synonyms: SynonymTable | None = None,
        overlap_threshold: float | None = None,
        serialize_module_writes: bool | None = None,
    ) -> None:
        self._repo = repo
        self._synonyms = synonyms if synonyms is not None else get_default_synonym_table()
        self._overlap_threshold = overlap_threshold
        self._serialize = (
            settings.serialize_module_writes if serialize_module_writes is None else serialize_module_writes
        )
        self._locks: dict[str, asyncio.Lock] = {}
        self._lock_users: dict[str, int] = {}

    @asynccontextmanager
    async def _module_guard(self, module_id: str) -> AsyncIterator[None]:
        """Hold the module's lock when writes are serialized.

        Locks exist only while some call holds or waits for them, so a
        contended lock never outlives the event loop it was bound to.
        """
        if not self._serialize:
            yield
            return
        lock = self._locks.setdefault(module_id, asyncio.Lock())
        self._lock_users[module_id] = self._lock_users.get(module_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[module_id] -= 1
            if not self._lock_users[module_id]:
                del self._lock_users[module_id]
                del self._locks[module_id]

    # ----------------- registry access -----------------
    async def get_module_tag_registry(self, module_id: str) -> ModuleTagRegistry:
        return await self._repo.get(module_id)

    async def save_module_tag_registry(self, registry: ModuleTagRegistry) -> ModuleTagRegistry:
        return await self._repo.save(registry)

    async def delete_module_tag_registry(self, module_id: str) -> bool:
        """Drop a module's registry, e.g. after the module itself was deleted."""
        async with self._module_guard(module_id):
            return await self._repo.delete(module_id)

    async def get_module_allowed_tags(self, module_id: str) -> list[str]:
        """Registered labels, most used first, for biasing LLM prompts."""
        registry = await self._repo.get(module_id)
        ranked = sorted(registry.entries, key=lambda e: e.usage_count, reverse=True)
        return [e.label for e in ranked]

    # ----------------- normalization -----------------
    def find_matching_entry(self, tag_key: str, registry: ModuleTagRegistry) -> TagRegistryEntry | None:
        """Exact key first, then a stored synonym's key, then fuzzy equivalence."""
        entry = registry.find_entry(tag_key)
        if entry is not None:
            return entry

        for entry in registry.entries:
            if any(registry_key(s) == tag_key for s in entry.synonyms):
                return entry

        for entry in registry.entries:
            if are_canonical_keys_synonyms(
                entry.canonical_key,
                tag_key,
                synonyms=self._synonyms,
                overlap_threshold=self._overlap_threshold,
            ):
                return entry
        return None

    async def normalize_tags(self, tags: Iterable[Any] | None, module_id: str) -> NormalizedTagsResult:
        """Map raw tags onto the module registry, creating entries as needed.

        Returns the canonical labels in first-occurrence order together with
        the inputs that were folded into existing entries and the labels that
        created new ones. Input without a usable tag never touches storage.
        """
        candidates: list[tuple[str, str]] = []
        for raw in tags or []:
            if not isinstance(raw, str):
                continue
            cleaned = clean_label(raw)
            if cleaned:
                candidates.append((cleaned, registry_key(cleaned)))

        result = NormalizedTagsResult()
        if not candidates:
            return result

        async with self._module_guard(module_id):
            registry = await self._repo.get(module_id)
            seen_keys: set[str] = set()

            for cleaned, key in candidates:
                if key in seen_keys:
                    continue
                seen_keys.add(key)

                entry = self.find_matching_entry(key, registry)
                if entry is None:
                    registry.entries.append(
                        TagRegistryEntry(canonical_key=key, label=cleaned, usage_count=1)
                    )
                    result.tags.append(cleaned)
                    result.new_entries.append(cleaned)
                    logger.debug("New tag entry %r (key=%r) in module %s", cleaned, key, module_id)
                    continue

                if entry.label not in result.tags:
                    result.tags.append(entry.label)
                if entry.canonical_key != key:
                    result.mapped_synonyms.append(MappedSynonym(original=cleaned, mapped_to=entry.label))
                    logger.debug("Mapped tag %r -> %r in module %s", cleaned, entry.label, module_id)
                entry.touch()
                entry.add_synonym(cleaned)

            await self._repo.save(registry)

        logger.info(
            "Normalized %d tags for module %s (mapped=%d, new=%d)",
            len(result.tags), module_id, len(result.mapped_synonyms), len(result.new_entries),
        )
        return result

    # ----------------- administrative -----------------
    async def merge_tag_entries(self, module_id: str, keep_key: str, merge_key: str) -> TagRegistryEntry:
        """Fold the entry `merge_key` into `keep_key` and delete it.

        Labels and synonyms are unioned and usage counts summed.
        """
        if keep_key == merge_key:
            raise ValueError("Cannot merge a tag entry into itself")

        async with self._module_guard(module_id):
            registry = await self._repo.get(module_id)
            keep = registry.find_entry(keep_key)
            if keep is None:
                raise TagEntryNotFoundError(module_id, keep_key)
            merged = registry.find_entry(merge_key)
            if merged is None:
                raise TagEntryNotFoundError(module_id, merge_key)

            keep.add_synonym(merged.label)
            for synonym in merged.synonyms:
                keep.add_synonym(synonym)
            keep.usage_count += merged.usage_count
            keep.last_used_at = max(keep.last_used_at, merged.last_used_at)

            registry.remove_entry(merge_key)
            await self._repo.save(registry)

        logger.info("Merged tag %r into %r in module %s", merge_key, keep_key, module_id)
        return keep

    async def rename_tag_label(self, module_id: str, key: str, new_label: str) -> TagRegistryEntry:
        """Change an entry's display label, keeping the old label as synonym."""
        label = clean_label(new_label)
        if not label:
            raise ValueError("New tag label must not be empty")

        async with self._module_guard(module_id):
            registry = await self._repo.get(module_id)
            entry = registry.find_entry(key)
            if entry is None:
                raise TagEntryNotFoundError(module_id, key)

            old_label = entry.label
            entry.label = label
            entry.synonyms = [s for s in entry.synonyms if s != label]
            entry.add_synonym(old_label)
            await self._repo.save(registry)

        logger.info("Renamed tag %r -> %r in module %s", old_label, label, module_id)
        return entry

    # ----------------- migration -----------------
    async def migrate_existing_tags(self, tasks: Iterable[Any], update_task: UpdateTask) -> MigrationStats:
        """Re-normalize stored task tags and write back the ones that changed.

        Tasks may be `Task`-like objects or raw records with camelCase keys.
        A failing or malformed task is recorded in `errors` and does not stop
        the batch.
        """
        stats = MigrationStats()

        tasks_by_module: dict[str, list[tuple[Any, list[str]]]] = {}
        for task in tasks:
            task_id = _task_field(task, "id", "id") or "?"
            tags = _task_field(task, "tags", "tags")
            if not tags:
                continue
            module_id = _task_field(task, "module_id", "moduleId")
            if not isinstance(module_id, str) or not module_id:
                self._record_migration_error(stats, task_id, "missing module id")
                continue
            if not isinstance(tags, (list, tuple)):
                self._record_migration_error(stats, task_id, f"tags must be a list, got {type(tags).__name__}")
                continue
            tasks_by_module.setdefault(module_id, []).append((task_id, list(tags)))

        for module_id, module_tasks in tasks_by_module.items():
            for task_id, current in module_tasks:
                try:
                    result = await self.normalize_tags(current, module_id)
                    if result.tags != current:
                        await update_task(task_id, {"tags": result.tags})
                        stats.tags_normalized += len(result.mapped_synonyms)
                    stats.tasks_processed += 1
                except Exception as err:
                    self._record_migration_error(stats, task_id, err)

        logger.info(
            "Tag migration finished: processed=%d normalized=%d errors=%d",
            stats.tasks_processed, stats.tags_normalized, len(stats.errors),
        )
        return stats

    @staticmethod
    def _record_migration_error(stats: MigrationStats, task_id: Any, err: object) -> None:
        logger.warning("Tag migration failed for task %s: %s", task_id, err)
        stats.errors.append(f"Task {task_id}: {err}")


def _task_field(task: Any, name: str, record_key: str) -> Any:
    """Read a field from a Task-like object or a raw camelCase record."""
    if isinstance(task, Mapping):
        return task.get(record_key, task.get(name))
    return getattr(task, name, None)
