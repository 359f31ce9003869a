from __future__ import annotations

from collections.abc import Iterable, Mapping

from study_companion.config import settings

from .vocabulary import load_known_synonyms


class SynonymTable:
    """Groups of tokens known to denote the same concept.

    Built from a mapping of primary token to variant tokens; each group is the
    primary token plus its variants.
    """

    def __init__(self, mapping: Mapping[str, Iterable[str]]) -> None:
        self._groups: list[tuple[str, ...]] = []
        for primary, variants in mapping.items():
            forms = [primary, *variants]
            self._groups.append(tuple(f for f in forms if f))

    @classmethod
    def from_settings(cls) -> SynonymTable:
        return cls(load_known_synonyms(settings.known_synonyms_path))

    @property
    def groups(self) -> list[tuple[str, ...]]:
        return list(self._groups)

    def __len__(self) -> int:
        return len(self._groups)

    def share_group(self, key1: str, key2: str) -> bool:
        """True if both keys mention a form of the same group."""
        tokens1 = key1.split(" ")
        tokens2 = key2.split(" ")
        for forms in self._groups:
            if _mentions_any(key1, tokens1, forms) and _mentions_any(key2, tokens2, forms):
                return True
        return False


def _mentions_any(key: str, tokens: list[str], forms: tuple[str, ...]) -> bool:
    return any(form in key or any(form in t for t in tokens) for form in forms)


_default_table: SynonymTable | None = None


def get_default_synonym_table() -> SynonymTable:
    global _default_table
    if _default_table is None:
        _default_table = SynonymTable.from_settings()
    return _default_table


def token_overlap(key1: str, key2: str) -> float:
    """Shared tokens relative to the smaller token set; 0.0 if either is empty."""
    tokens1 = set(key1.split(" "))
    tokens2 = set(key2.split(" "))
    smaller = min(len(tokens1), len(tokens2))
    if smaller == 0:
        return 0.0
    return len(tokens1 & tokens2) / smaller


def are_canonical_keys_synonyms(
    key1: str,
    key2: str,
    *,
    synonyms: SynonymTable | None = None,
    overlap_threshold: float | None = None,
) -> bool:
    """Decide whether two canonical keys name the same concept.

    First match wins: identical keys, a shared synonym group, then token
    overlap of at least `overlap_threshold` (default from settings).
    """
    if key1 == key2:
        return True

    table = synonyms if synonyms is not None else get_default_synonym_table()
    if table.share_group(key1, key2):
        return True

    threshold = settings.synonym_overlap_threshold if overlap_threshold is None else overlap_threshold
    return token_overlap(key1, key2) >= threshold
