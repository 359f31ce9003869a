from study_companion.core.models.tag_registry import ModuleTagRegistry, TagRegistryEntry
from conftest import run


def test_get_missing_registry_returns_empty_without_writing(repo, store):
    registry = run(repo.get("M1"))

    assert registry.module_id == "M1"
    assert registry.entries == []
    assert registry.version == "1.0.0"
    assert store.writes == 0


def test_save_and_get_round_trip(repo):
    registry = ModuleTagRegistry(
        module_id="M1",
        entries=[TagRegistryEntry(canonical_key="diagramm kv", label="KV-Diagramm", usage_count=2)],
    )
    run(repo.save(registry))

    loaded = run(repo.get("M1"))
    assert loaded.entries[0].label == "KV-Diagramm"
    assert loaded.entries[0].usage_count == 2


def test_save_stamps_last_updated_at(repo):
    registry = run(repo.get("M1"))
    before = registry.last_updated_at

    saved = run(repo.save(registry))

    assert saved.last_updated_at >= before


def test_records_use_camel_case_layout(repo, store):
    registry = ModuleTagRegistry(
        module_id="M1",
        entries=[TagRegistryEntry(canonical_key="automaten", label="Automaten", usage_count=1)],
    )
    run(repo.save(registry))

    [record] = run(store.get_collection("module_tag_registries"))
    assert record["moduleId"] == "M1"
    assert set(record) == {"moduleId", "entries", "lastUpdatedAt", "version"}
    assert set(record["entries"][0]) == {"canonicalKey", "label", "synonyms", "usageCount", "lastUsedAt"}


def test_save_upserts_and_keeps_other_modules(repo, store):
    foreign = {"moduleId": "other", "entries": [], "lastUpdatedAt": "2024-01-01T00:00:00Z", "version": "0.9"}
    run(store.set_collection("module_tag_registries", [foreign]))

    run(repo.save(ModuleTagRegistry(module_id="M1")))
    run(repo.save(ModuleTagRegistry(module_id="M1", entries=[TagRegistryEntry(canonical_key="x", label="X")])))

    records = run(store.get_collection("module_tag_registries"))
    assert [r["moduleId"] for r in records] == ["other", "M1"]
    assert records[0] == foreign
    assert len(records[1]["entries"]) == 1


def test_delete(repo):
    run(repo.save(ModuleTagRegistry(module_id="M1")))
    run(repo.save(ModuleTagRegistry(module_id="M2")))

    assert run(repo.delete("M1")) is True
    assert run(repo.delete("M1")) is False
    assert run(repo.get("M2")).module_id == "M2"
    assert run(repo.get("M1")).entries == []
