from __future__ import annotations

from typing import TYPE_CHECKING, Any

from study_companion.dependencies import get_tag_registry_service
from study_companion.utils.logging import get_logger

logger = get_logger(__name__)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Iterable

    from study_companion.core.schemas.normalization import MigrationStats
    from study_companion.core.services.tag_registry_service import TagRegistryService


async def run_tag_migration(
    *,
    tasks: Iterable[Any],
    update_task: Callable[[str, dict[str, list[str]]], Awaitable[Any]],
    service: TagRegistryService | None = None,
) -> MigrationStats:
    """One-off job that rewrites legacy task tags to their canonical labels."""
    tasks = list(tasks)
    logger.info("Starting tag migration for %d tasks", len(tasks))

    service = service or get_tag_registry_service()
    stats = await service.migrate_existing_tags(tasks, update_task)

    for error in stats.errors:
        logger.warning("Tag migration error: %s", error)
    return stats
