from __future__ import annotations

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="APP_",
        extra="ignore",
        case_sensitive=False,
    )

    # Application
    debug: bool = False
    log_level: str = "INFO"

    # Storage
    storage_backend: Literal["memory", "json", "supabase"] = "memory"
    storage_path: str = "data/collections.json"
    supabase_collections_table: str = "collections"

    # Tag registry
    registry_collection_key: str = "module_tag_registries"
    registry_version: str = "1.0.0"
    synonym_overlap_threshold: float = 0.5
    known_synonyms_path: str | None = None
    canonical_topics_path: str | None = None
    prompt_max_allowed_tags: int = 30
    serialize_module_writes: bool = False  # per-module asyncio.Lock, single process only

    # Supabase
    supabase_url: str | None = None
    supabase_service_role_key: str | None = None

    # OpenAI
    openai_api_key: str | None = None
    enrichment_model: str = "gpt-5-nano"
    enrichment_model_reasoning: str = "medium"
    enrichment_max_tags: int = 5
    enrichment_timeout_seconds: float = 30.0
    enrichment_max_retries: int = 2


settings = Settings()
