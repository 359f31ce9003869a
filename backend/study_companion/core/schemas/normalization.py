from __future__ import annotations

from typing import Any

from pydantic import Field

from study_companion.core.models.base import AppBaseModel


class MappedSynonym(AppBaseModel):
    """A raw tag that resolved to an entry with a different canonical key."""

    original: str
    mapped_to: str


class NormalizedTagsResult(AppBaseModel):
    """Outcome of one `normalize_tags` call.

    - tags: canonical labels in first-occurrence order of distinct keys
    - mapped_synonyms: inputs that were folded into an existing entry
    - new_entries: labels that created a registry entry
    """

    tags: list[str] = Field(default_factory=list)
    mapped_synonyms: list[MappedSynonym] = Field(default_factory=list)
    new_entries: list[str] = Field(default_factory=list)


class MigrationStats(AppBaseModel):
    tasks_processed: int = 0
    tags_normalized: int = 0
    errors: list[str] = Field(default_factory=list)


class TaskTag(AppBaseModel):
    key: str
    label: str


class TopicGroup(AppBaseModel):
    """Tasks sharing one canonical topic key."""

    label: str
    tasks: list[Any] = Field(default_factory=list)


class TagGroup(AppBaseModel):
    """Items sharing one canonical tag key."""

    label: str
    items: list[Any] = Field(default_factory=list)
