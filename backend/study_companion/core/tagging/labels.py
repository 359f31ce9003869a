from __future__ import annotations

import re
from collections.abc import Sequence
from typing import Any

from study_companion.core.schemas.normalization import TaskTag

from .keys import canonical_key, clean_label

FALLBACK_TAG = "Allgemein"

LENGTH_PENALTY = 0.1
PARENTHESES_PENALTY = 10.0
UPPERCASE_BONUS = 5.0
HYPHEN_PENALTY = 2.0
DIACRITIC_BONUS = 3.0

_LEADING_UPPER = re.compile(r"^[A-ZÄÖÜ]")
_GERMAN_DIACRITIC = re.compile(r"[äöüßÄÖÜ]")


def score_label(label: str) -> float:
    """Higher is better. Expects a cleaned label."""
    score = -len(label) * LENGTH_PENALTY
    if "(" in label:
        score -= PARENTHESES_PENALTY
    if _LEADING_UPPER.match(label):
        score += UPPERCASE_BONUS
    score -= label.count("-") * HYPHEN_PENALTY
    if _GERMAN_DIACRITIC.search(label):
        score += DIACRITIC_BONUS
    return score


def select_best_label(candidates: Sequence[str]) -> str:
    """Pick the display label among observed variants of one concept.

    Prefers short labels without parentheses or many hyphens, starting with a
    capital letter, and German spellings. Ties keep input order.
    """
    cleaned = [clean_label(c) for c in candidates if isinstance(c, str)]
    if not cleaned:
        return ""
    if len(cleaned) == 1:
        return cleaned[0]
    # sorted() is stable, so equal scores keep their input order
    return sorted(cleaned, key=score_label, reverse=True)[0]


def format_tag_label(tag: str | None) -> str:
    """Title-case a tag for badges and filters, e.g. "kv-diagramm" -> "Kv Diagramm"."""
    cleaned = clean_label(tag or FALLBACK_TAG)
    base = (cleaned or FALLBACK_TAG).replace("-", " ").strip()
    if not base:
        return FALLBACK_TAG
    return " ".join(word[:1].upper() + word[1:] for word in base.split())


def extract_task_tags(task: Any) -> list[TaskTag]:
    """Unique key/label pairs for a task's tags.

    Falls back to the task topic, then to the generic fallback tag.
    """
    tags = getattr(task, "tags", None) or []
    topic = getattr(task, "topic", None)
    source = list(tags) if tags else [topic] if topic else [FALLBACK_TAG]

    unique: dict[str, str] = {}
    for tag in source:
        key = canonical_key(tag) or canonical_key(FALLBACK_TAG)
        if key not in unique:
            unique[key] = format_tag_label(tag if isinstance(tag, str) else None)
    return [TaskTag(key=k, label=v) for k, v in unique.items()]
