from __future__ import annotations

from pydantic import Field

from study_companion.core.models.base import AppBaseModel


class CanonicalTopicMatch(AppBaseModel):
    """Lookup result of a topic against the canonical topic map.

    An empty `canonical_key` marks a noise topic that callers should drop.
    """

    canonical_key: str
    display_label: str
    matched: bool = False
    matched_from: str | None = None


class NormalizedTopics(AppBaseModel):
    canonical_topics: list[str] = Field(default_factory=list)
    display_topics: list[str] = Field(default_factory=list)
    topic_mapping: dict[str, str] = Field(default_factory=dict, description="raw topic -> canonical key")
