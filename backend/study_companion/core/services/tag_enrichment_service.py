from __future__ import annotations

from typing import TYPE_CHECKING

from study_companion.config import settings
from study_companion.core.schemas.enrichment import TagEnrichmentResult
from study_companion.core.schemas.normalization import NormalizedTagsResult
from study_companion.core.tagging.prompt import format_allowed_tags_for_prompt
from study_companion.utils.logging import get_logger
from study_companion.utils.openai_client import get_openai_client

if TYPE_CHECKING:
    from openai import AsyncOpenAI

    from study_companion.core.services.tag_registry_service import TagRegistryService

logger = get_logger(__name__)


def build_task_text(title: str | None, content: str | None) -> str:
    """Concatenate title and content into the text sent to the model."""
    safe_title = (title or "").strip()
    safe_content = (content or "").strip()
    if safe_title and safe_content:
        return f"{safe_title}\n\n{safe_content}"
    return safe_title or safe_content


def build_instructions(allowed_tags_section: str) -> str:
    instructions = (
        "Du vergibst kurze Themen-Tags für eine Übungsaufgabe aus einer Lehrveranstaltung. "
        "Antworte nur mit JSON gemäß dem vorgegebenen Schema.\n"
        f"- Höchstens {settings.enrichment_max_tags} Tags, jeweils ein Fachbegriff ohne Satzzeichen am Ende.\n"
        "- Keine generischen Tags wie \"Aufgabe\" oder \"Allgemein\"."
    )
    if allowed_tags_section:
        instructions += "\n\n" + allowed_tags_section
    return instructions


async def request_tag_suggestions(
    *,
    text: str,
    allowed_tags: list[str],
    client: AsyncOpenAI | None = None,
) -> list[str]:
    """Ask the model for raw tag suggestions. Returns [] on refusal or API errors."""
    client = client or get_openai_client()
    instructions = build_instructions(format_allowed_tags_for_prompt(allowed_tags))

    try:
        logger.info("Requesting tag suggestions (text length: %d, allowed tags: %d)", len(text), len(allowed_tags))
        response = await client.responses.parse(
            model=settings.enrichment_model,
            input=[
                {"role": "system", "content": instructions},
                {"role": "user", "content": text},
            ],
            reasoning={"effort": settings.enrichment_model_reasoning},
            text={"verbosity": "low"},
            text_format=TagEnrichmentResult,
        )
    except Exception as err:
        logger.error("Failed to request tag suggestions: %s", err)
        logger.error("Error type: %s", type(err).__name__)
        return []

    if getattr(response, "refusal", None):
        logger.warning("Model refused to suggest tags: %s", response.refusal)
        return []

    result = response.output_parsed
    if result is None:
        logger.warning("Model returned no parsable tag suggestions")
        return []

    logger.debug("Raw tag suggestions: %s", result.tags)
    return [t for t in result.tags if isinstance(t, str)]


async def suggest_task_tags(
    *,
    module_id: str,
    title: str | None,
    content: str | None,
    service: TagRegistryService,
    client: AsyncOpenAI | None = None,
) -> NormalizedTagsResult:
    """Generate tags for a task and canonicalize them against the module registry.

    The prompt lists the module's registered labels so the model reuses them;
    whatever comes back is still normalized. Registry storage errors propagate.
    """
    text = build_task_text(title, content)
    if not text:
        logger.warning("No text content available for tag suggestions")
        return NormalizedTagsResult()

    allowed_tags = await service.get_module_allowed_tags(module_id)
    raw_tags = await request_tag_suggestions(text=text, allowed_tags=allowed_tags, client=client)
    if not raw_tags:
        return NormalizedTagsResult()

    return await service.normalize_tags(raw_tags, module_id)
