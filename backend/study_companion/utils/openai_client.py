from __future__ import annotations

from functools import lru_cache

from openai import AsyncOpenAI

from study_companion.config import settings
from study_companion.utils.logging import get_logger

logger = get_logger(__name__)


@lru_cache(maxsize=1)
def get_openai_client() -> AsyncOpenAI:
    """Shared client for tag suggestions.

    Enrichment runs in background jobs, so requests use a bounded timeout and
    retry budget from settings. Without `APP_OPENAI_API_KEY` the SDK falls back
    to `OPENAI_API_KEY`.
    """
    options = {
        "timeout": settings.enrichment_timeout_seconds,
        "max_retries": settings.enrichment_max_retries,
    }
    if settings.openai_api_key:
        options["api_key"] = settings.openai_api_key
    logger.debug(
        "Creating OpenAI client (explicit key: %s, timeout: %ss, retries: %d)",
        "api_key" in options, options["timeout"], options["max_retries"],
    )
    return AsyncOpenAI(**options)
