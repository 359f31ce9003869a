"""Topic normalization against a catalog of known course topics.

Topics produced by document analysis drift between runs ("kv-diagramm",
"KV - Diagramm", "Karnaugh-Veitch"). The catalog maps them to one canonical
key with a preferred display label and filters out structural noise such as
"Kapitel 3" or "Zusammenfassung".
"""
from __future__ import annotations

import re
from collections.abc import Iterable, Mapping, Sequence

from study_companion.config import settings
from study_companion.core.schemas.topics import CanonicalTopicMatch, NormalizedTopics

from .keys import fold_diacritics
from .vocabulary import NOISE_TOPICS, load_canonical_topics

MIN_TOPIC_LENGTH = 3
MAX_PARTIAL_LENGTH_DIFF = 5

_APOSTROPHES = re.compile(r"[‘’´`]")
_QUOTES = re.compile(r"[“”„]")
_PARENTHESES = re.compile(r"\([^)]*\)")
_DASHES = re.compile(r"\s*[-–—]\s*")
_WHITESPACE = re.compile(r"\s+")
_EDGE_PUNCTUATION = re.compile(r"^[.,;:!?]+|[.,;:!?]+$")
_PAGE_NUMBER = re.compile(r"^(seite|page)?\s*\d+$")
_CHAPTER_MARKER = re.compile(r"^(kapitel|chapter)\s*\d+")


def normalize_topic_key(topic: object) -> str:
    """Lowercase matching form of a topic; parenthesized details are dropped."""
    if not isinstance(topic, str) or not topic:
        return ""

    text = topic.lower().strip()
    text = _APOSTROPHES.sub("'", text)
    text = _QUOTES.sub('"', text)
    text = _PARENTHESES.sub(" ", text)
    text = _DASHES.sub("-", text)
    text = _WHITESPACE.sub(" ", text)
    text = _EDGE_PUNCTUATION.sub("", text).strip()
    return fold_diacritics(text)


def to_display_case(topic: str) -> str:
    return " ".join(w[:1].upper() + w[1:].lower() for w in topic.strip().split())


class TopicCatalog:
    """Canonical topics with their aliases plus the noise vocabulary."""

    def __init__(
        self,
        topics: Mapping[str, Sequence[str]],
        noise: Iterable[str] = NOISE_TOPICS,
    ) -> None:
        self._topics: dict[str, list[str]] = {k: list(v) for k, v in topics.items() if v}
        self._aliases: dict[str, list[tuple[str, str]]] = {
            key: [(alias, normalize_topic_key(alias)) for alias in aliases]
            for key, aliases in self._topics.items()
        }
        self._noise = frozenset(normalize_topic_key(n) for n in noise)

    @classmethod
    def from_settings(cls) -> TopicCatalog:
        return cls(load_canonical_topics(settings.canonical_topics_path))

    def is_noise(self, topic: str) -> bool:
        normalized = normalize_topic_key(topic)
        if normalized in self._noise:
            return True
        if len(normalized) < MIN_TOPIC_LENGTH:
            return True
        if _PAGE_NUMBER.match(normalized):
            return True
        return bool(_CHAPTER_MARKER.match(normalized))

    def find(self, topic: str) -> CanonicalTopicMatch:
        normalized = normalize_topic_key(topic)
        raw = topic.strip() if isinstance(topic, str) else ""

        if len(normalized) < MIN_TOPIC_LENGTH:
            return CanonicalTopicMatch(canonical_key=normalized, display_label=raw)

        if self.is_noise(normalized):
            return CanonicalTopicMatch(canonical_key="", display_label="")

        for key, aliases in self._aliases.items():
            display = self._topics[key][0]
            if normalized == key or normalized == normalize_topic_key(key):
                return CanonicalTopicMatch(
                    canonical_key=key, display_label=display, matched=True, matched_from=key
                )

            for alias, normalized_alias in aliases:
                if normalized == normalized_alias:
                    return CanonicalTopicMatch(
                        canonical_key=key, display_label=display, matched=True, matched_from=alias
                    )
                # short aliases such as "or" would match inside unrelated words
                if len(normalized_alias) < MIN_TOPIC_LENGTH:
                    continue
                contains = normalized_alias in normalized or normalized in normalized_alias
                if contains and abs(len(normalized) - len(normalized_alias)) <= MAX_PARTIAL_LENGTH_DIFF:
                    return CanonicalTopicMatch(
                        canonical_key=key, display_label=display, matched=True, matched_from=alias
                    )

        return CanonicalTopicMatch(canonical_key=normalized, display_label=to_display_case(raw))

    def display_label(self, canonical_key: str) -> str:
        aliases = self._topics.get(canonical_key)
        if aliases:
            return aliases[0]
        return to_display_case(canonical_key.replace("-", " "))


_default_catalog: TopicCatalog | None = None


def get_default_topic_catalog() -> TopicCatalog:
    global _default_catalog
    if _default_catalog is None:
        _default_catalog = TopicCatalog.from_settings()
    return _default_catalog


def is_noise_topic(topic: str, catalog: TopicCatalog | None = None) -> bool:
    return (catalog or get_default_topic_catalog()).is_noise(topic)


def find_canonical_topic(topic: str, catalog: TopicCatalog | None = None) -> CanonicalTopicMatch:
    """Resolve a topic to its catalog entry, or to its own normalized key."""
    return (catalog or get_default_topic_catalog()).find(topic)


def get_topic_display_label(canonical_key: str, catalog: TopicCatalog | None = None) -> str:
    return (catalog or get_default_topic_catalog()).display_label(canonical_key)


def normalize_topics(topics: Iterable[str], catalog: TopicCatalog | None = None) -> NormalizedTopics:
    """Resolve a list of topics, dropping noise and collapsing duplicates."""
    catalog = catalog or get_default_topic_catalog()
    display_by_key: dict[str, str] = {}
    mapping: dict[str, str] = {}

    for topic in topics:
        if not isinstance(topic, str):
            continue
        match = catalog.find(topic)
        if len(match.canonical_key) < MIN_TOPIC_LENGTH:
            continue
        display_by_key[match.canonical_key] = match.display_label
        mapping[topic] = match.canonical_key

    return NormalizedTopics(
        canonical_topics=list(display_by_key),
        display_topics=list(display_by_key.values()),
        topic_mapping=mapping,
    )
