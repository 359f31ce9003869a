import json
import logging

import pytest

from study_companion.config import Settings, settings
from study_companion.core.repositories.implementations.json_file.collection_store import (
    JsonFileCollectionStore,
)
from study_companion.core.repositories.implementations.memory.collection_store import (
    InMemoryCollectionStore,
)
from study_companion.core.tagging.vocabulary import (
    KNOWN_SYNONYMS,
    load_canonical_topics,
    load_known_synonyms,
)
from study_companion.dependencies import create_collection_store
from study_companion.utils.logging import setup_logging
from study_companion.utils.openai_client import get_openai_client


def test_settings_defaults():
    config = Settings(_env_file=None)
    assert config.storage_backend == "memory"
    assert config.registry_collection_key == "module_tag_registries"
    assert config.synonym_overlap_threshold == 0.5


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("APP_STORAGE_BACKEND", "json")
    monkeypatch.setenv("APP_SYNONYM_OVERLAP_THRESHOLD", "0.75")
    monkeypatch.setenv("APP_SERIALIZE_MODULE_WRITES", "true")

    config = Settings(_env_file=None)

    assert config.storage_backend == "json"
    assert config.synonym_overlap_threshold == 0.75
    assert config.serialize_module_writes is True


def test_create_collection_store():
    assert isinstance(create_collection_store("memory"), InMemoryCollectionStore)
    assert isinstance(create_collection_store("JSON"), JsonFileCollectionStore)
    with pytest.raises(RuntimeError):
        create_collection_store("bogus")


def test_load_known_synonyms(tmp_path):
    assert load_known_synonyms() == KNOWN_SYNONYMS

    path = tmp_path / "synonyms.json"
    path.write_text(json.dumps({"sql": ["structuredquerylanguage"]}), encoding="utf-8")
    assert load_known_synonyms(path) == {"sql": ["structuredquerylanguage"]}

    path.write_text(json.dumps({"sql": "nope"}), encoding="utf-8")
    with pytest.raises(ValueError):
        load_known_synonyms(path)


def test_load_canonical_topics_requires_display_label(tmp_path):
    path = tmp_path / "topics.json"
    path.write_text(json.dumps({"sql": []}), encoding="utf-8")
    with pytest.raises(ValueError):
        load_canonical_topics(path)


def test_setup_logging_quiets_http_clients():
    setup_logging()

    assert logging.getLogger("httpx").level == logging.WARNING
    assert logging.getLogger("openai").level == logging.WARNING


def test_openai_client_uses_enrichment_limits(monkeypatch):
    monkeypatch.setattr(settings, "openai_api_key", "sk-test")
    monkeypatch.setattr(settings, "enrichment_max_retries", 5)
    get_openai_client.cache_clear()
    try:
        client = get_openai_client()
        assert client.api_key == "sk-test"
        assert client.max_retries == 5
    finally:
        get_openai_client.cache_clear()
