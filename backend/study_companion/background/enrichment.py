from __future__ import annotations

from typing import TYPE_CHECKING, Any

from study_companion.core.services.tag_enrichment_service import suggest_task_tags
from study_companion.core.tagging.keys import clean_label, registry_key
from study_companion.dependencies import get_tag_registry_service
from study_companion.utils.logging import get_logger

logger = get_logger(__name__)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from openai import AsyncOpenAI

    from study_companion.core.models.task import Task
    from study_companion.core.services.tag_registry_service import TagRegistryService


def merge_task_tags(suggested: list[str], current: list[str]) -> list[str]:
    """Suggested tags first, then current ones, unique by canonical key."""
    merged: list[str] = []
    seen: set[str] = set()
    for tag in [*suggested, *current]:
        if not isinstance(tag, str) or not tag.strip():
            continue
        key = registry_key(clean_label(tag))
        if key in seen:
            continue
        seen.add(key)
        merged.append(tag)
    return merged


async def enrich_and_store_task_tags(
    *,
    task: Task,
    update_task: Callable[[str, dict[str, list[str]]], Awaitable[Any]],
    service: TagRegistryService | None = None,
    client: AsyncOpenAI | None = None,
) -> list[str] | None:
    """Background job to suggest canonical tags for a task and persist them.

    Returns the stored tag list, or None if nothing was written. Errors are
    logged, never raised, since no caller is waiting on the job.
    """
    logger.info("Starting tag enrichment job for task %s (module: %s)", task.id, task.module_id)

    try:
        service = service or get_tag_registry_service()
        suggestion = await suggest_task_tags(
            module_id=task.module_id,
            title=task.title,
            content=task.question,
            service=service,
            client=client,
        )
        logger.debug("Suggested tags for task %s: %s", task.id, suggestion.tags)

        merged_tags = merge_task_tags(suggestion.tags, list(task.tags))
        if merged_tags == list(task.tags):
            logger.info("No tag changes for task %s, skipping update", task.id)
            return None

        await update_task(task.id, {"tags": merged_tags})
        logger.info("Updated task %s with tags %s", task.id, merged_tags)
        return merged_tags

    except Exception as err:
        logger.error("Tag enrichment job failed for task %s: %s", task.id, err)
        logger.error("Error type: %s", type(err).__name__)
        return None
