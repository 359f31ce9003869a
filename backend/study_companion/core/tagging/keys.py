"""Canonical keys for tag and topic labels.

A canonical key is the identity used to group labels that only differ in
casing, punctuation, diacritics, stop words or token order:

    >>> canonical_key("Minimierung (Quine-McCluskey)")
    'mccluskey minimierung quine'
    >>> canonical_key("Quine-McCluskey Minimierung")
    'mccluskey minimierung quine'

`canonical_key` is composed of small stages so each step can be tested on
its own.
"""
from __future__ import annotations

import re

from .vocabulary import STOP_WORDS

_PARENTHESES = re.compile(r"\(([^)]+)\)")
_SEPARATORS = re.compile(r"[-_/]")
_PUNCTUATION = re.compile(r"[^a-z0-9_\säöüß]")
_WHITESPACE = re.compile(r"\s+")
_HYPHEN_SPACING = re.compile(r"\s*-\s*")

_DIACRITICS = {
    "ä": "ae",
    "ö": "oe",
    "ü": "ue",
    "ß": "ss",
}


def expand_parentheses(text: str) -> str:
    """Turn "a (b)" into "a  b " so parenthesized content becomes token material."""
    return _PARENTHESES.sub(r" \1 ", text)


def unify_separators(text: str) -> str:
    return _SEPARATORS.sub(" ", text)


def strip_punctuation(text: str) -> str:
    """Drop everything but ascii letters, digits, whitespace and German umlauts.

    Expects lowercase input.
    """
    return _PUNCTUATION.sub("", text)


def fold_diacritics(text: str) -> str:
    for char, replacement in _DIACRITICS.items():
        text = text.replace(char, replacement)
    return text


def tokenize(text: str) -> list[str]:
    return [t for t in _WHITESPACE.split(text) if t]


_FOLDED_STOP_WORDS = frozenset(fold_diacritics(w) for w in STOP_WORDS)


def remove_stop_words(tokens: list[str]) -> list[str]:
    """Remove stop words unless that would leave nothing."""
    if len(tokens) <= 1:
        return list(tokens)
    kept = [t for t in tokens if t not in _FOLDED_STOP_WORDS]
    return kept or list(tokens)


def sort_tokens(tokens: list[str]) -> list[str]:
    return sorted(tokens)


def canonical_key(tag: object) -> str:
    """Return the canonical matching key for `tag`.

    Non-string or blank input yields an empty key.
    """
    if not isinstance(tag, str) or not tag:
        return ""

    text = tag.lower().strip()
    text = expand_parentheses(text)
    text = unify_separators(text)
    text = strip_punctuation(text)
    text = fold_diacritics(text)
    tokens = remove_stop_words(tokenize(text))
    return " ".join(sort_tokens(tokens))


def get_topic_canonical_key(topic: object) -> str:
    """Key used to put tasks with differently phrased topics into one group."""
    return canonical_key(topic)


def clean_label(tag: object) -> str:
    """Whitespace cleanup for display labels; casing is preserved."""
    if not isinstance(tag, str) or not tag:
        return ""
    text = _WHITESPACE.sub(" ", tag.strip())
    return _HYPHEN_SPACING.sub("-", text)


def registry_key(label: str) -> str:
    """Key under which a cleaned label is stored in a tag registry.

    Labels without latin letters or digits (Cyrillic, "C#"-like symbols only)
    have an empty canonical key; they fall back to their lowercased form so
    they are still registered and never dropped.
    """
    return canonical_key(label) or _WHITESPACE.sub(" ", label.lower().strip())
