import pytest

from study_companion.core.tagging.synonyms import (
    SynonymTable,
    are_canonical_keys_synonyms,
    token_overlap,
)
from study_companion.core.tagging.vocabulary import KNOWN_SYNONYMS

TABLE = SynonymTable(KNOWN_SYNONYMS)


@pytest.mark.parametrize("key", ["", "diagramm kv", "mccluskey quine", "x y z"])
def test_reflexive(key):
    assert are_canonical_keys_synonyms(key, key, synonyms=TABLE)


def test_synonym_group_matches_variant_tokens():
    assert are_canonical_keys_synonyms("karnaugh veitch", "kmap", synonyms=TABLE)
    assert are_canonical_keys_synonyms("mccluskey quine", "qmc verfahren", synonyms=TABLE)


def test_token_overlap_against_smaller_key():
    assert are_canonical_keys_synonyms("mccluskey quine", "mccluskey minimierung quine", synonyms=SynonymTable({}))
    assert are_canonical_keys_synonyms("algebra lineare", "algebra lineare matrizen", synonyms=TABLE)


def test_unrelated_keys_are_not_synonyms():
    assert not are_canonical_keys_synonyms("analysis", "stochastik", synonyms=TABLE)
    assert not are_canonical_keys_synonyms("diagramm kv", "kmap", synonyms=TABLE)


def test_overlap_threshold_is_configurable():
    assert are_canonical_keys_synonyms("algebra boolesche", "algebra lineare", synonyms=TABLE, overlap_threshold=0.5)
    assert not are_canonical_keys_synonyms(
        "algebra boolesche", "algebra lineare", synonyms=TABLE, overlap_threshold=0.75
    )


def test_custom_synonym_table():
    table = SynonymTable({"hash": ["digest"]})
    assert are_canonical_keys_synonyms("digest", "funktion hash", synonyms=table)
    assert not are_canonical_keys_synonyms("digest", "hashwert", synonyms=SynonymTable({}))
    assert len(table) == 1
    assert table.groups == [("hash", "digest")]


def test_token_overlap():
    assert token_overlap("a b", "a c d") == 0.5
    assert token_overlap("a", "b") == 0.0
