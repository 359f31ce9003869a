from __future__ import annotations

from datetime import datetime

from pydantic import Field, field_validator, model_validator

from .base import AppBaseModel, utcnow


class TagRegistryEntry(AppBaseModel):
    """Registry record mapping one canonical key to its preferred label.

    Persisted with camelCase field names so stored registries keep the layout
    written by the study companion client.
    """

    canonical_key: str = Field(alias="canonicalKey", description="Normalized matching key")
    label: str = Field(min_length=1, description="Preferred display label")
    synonyms: list[str] = Field(default_factory=list, description="Observed alternative forms")
    usage_count: int = Field(default=0, ge=0, alias="usageCount")
    last_used_at: datetime = Field(default_factory=utcnow, alias="lastUsedAt")

    @field_validator("synonyms")
    @classmethod
    def dedupe_synonyms(cls, v: list[str]) -> list[str]:
        """Keep synonyms an ordered set."""
        unique: list[str] = []
        for synonym in v:
            if synonym not in unique:
                unique.append(synonym)
        return unique

    def touch(self) -> None:
        self.usage_count += 1
        self.last_used_at = utcnow()

    def add_synonym(self, synonym: str) -> bool:
        """Append `synonym` unless it is already known or equals the label."""
        if not synonym or synonym == self.label or synonym in self.synonyms:
            return False
        self.synonyms.append(synonym)
        return True


class ModuleTagRegistry(AppBaseModel):
    """All tag registry entries of one module."""

    module_id: str = Field(alias="moduleId")
    entries: list[TagRegistryEntry] = Field(default_factory=list)
    last_updated_at: datetime = Field(default_factory=utcnow, alias="lastUpdatedAt")
    version: str = "1.0.0"

    @model_validator(mode="after")
    def validate_unique_keys(self) -> ModuleTagRegistry:
        seen: set[str] = set()
        for entry in self.entries:
            if entry.canonical_key in seen:
                raise ValueError(
                    f"Duplicate canonical key {entry.canonical_key!r} in registry {self.module_id!r}"
                )
            seen.add(entry.canonical_key)
        return self

    def find_entry(self, canonical_key: str) -> TagRegistryEntry | None:
        for entry in self.entries:
            if entry.canonical_key == canonical_key:
                return entry
        return None

    def remove_entry(self, canonical_key: str) -> None:
        self.entries = [e for e in self.entries if e.canonical_key != canonical_key]

    def to_record(self) -> dict:
        """Serialize for the collection store."""
        return self.model_dump(mode="json", by_alias=True)
