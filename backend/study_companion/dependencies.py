from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import TYPE_CHECKING

from study_companion.config import settings
from study_companion.core.repositories.tag_registry_repository import TagRegistryRepository
from study_companion.core.services.tag_registry_service import TagRegistryService
from study_companion.utils.logging import get_logger

logger = get_logger(__name__)

if TYPE_CHECKING:
    from study_companion.core.repositories.collection_store import CollectionStore


def create_collection_store(backend: str | None = None) -> CollectionStore:
    """Build the configured collection store backend."""
    backend = (backend or settings.storage_backend).lower()
    logger.debug("Creating collection store (backend=%s)", backend)

    if backend == "memory":
        from study_companion.core.repositories.implementations.memory.collection_store import (
            InMemoryCollectionStore,
        )
        return InMemoryCollectionStore()

    if backend == "json":
        from study_companion.core.repositories.implementations.json_file.collection_store import (
            JsonFileCollectionStore,
        )
        return JsonFileCollectionStore(Path(settings.storage_path))

    if backend == "supabase":
        from study_companion.core.repositories.implementations.supabase.collection_store import (
            SupabaseCollectionStore,
        )
        from study_companion.db.base import get_supabase_admin_client
        return SupabaseCollectionStore(get_supabase_admin_client(), settings.supabase_collections_table)

    raise RuntimeError(f"Unknown storage backend: {backend}")


@lru_cache(maxsize=1)
def get_collection_store() -> CollectionStore:
    return create_collection_store()


def get_tag_registry_repository(store: CollectionStore | None = None) -> TagRegistryRepository:
    return TagRegistryRepository(store or get_collection_store())


@lru_cache(maxsize=1)
def get_tag_registry_service() -> TagRegistryService:
    """Process-wide service so per-module locks are shared between callers."""
    return TagRegistryService(get_tag_registry_repository())
