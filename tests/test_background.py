from conftest import run, stub_openai_client
from study_companion.background import enrich_and_store_task_tags, run_tag_migration
from study_companion.background.enrichment import merge_task_tags
from study_companion.core.models.task import Task
from study_companion.core.schemas.enrichment import TagEnrichmentResult


class Recorder:
    def __init__(self):
        self.calls = []

    async def __call__(self, task_id, patch):
        self.calls.append((task_id, patch))


def test_merge_task_tags():
    assert merge_task_tags(["KV-Diagramm", "Automaten"], ["automaten", "Zweierkomplement"]) == [
        "KV-Diagramm",
        "Automaten",
        "Zweierkomplement",
    ]
    assert merge_task_tags([], ["", "  ", "A"]) == ["A"]


def test_enrichment_job_updates_task(service):
    task = Task(id="t1", module_id="M1", title="KV", question="Minimiere mit KV-Diagramm", tags=["Automaten"])
    client = stub_openai_client(parsed=TagEnrichmentResult(tags=["KV-Diagramm"]))
    update_task = Recorder()

    stored = run(enrich_and_store_task_tags(task=task, update_task=update_task, service=service, client=client))

    assert stored == ["KV-Diagramm", "Automaten"]
    assert update_task.calls == [("t1", {"tags": ["KV-Diagramm", "Automaten"]})]


def test_enrichment_job_skips_unchanged_tags(service):
    run(service.normalize_tags(["QMC"], "M1"))
    task = Task(id="t1", module_id="M1", title="Tabellenverfahren", tags=["QMC"])
    client = stub_openai_client(parsed=TagEnrichmentResult(tags=["qmc"]))
    update_task = Recorder()

    stored = run(enrich_and_store_task_tags(task=task, update_task=update_task, service=service, client=client))

    assert stored is None
    assert update_task.calls == []


def test_enrichment_job_swallows_errors(service):
    task = Task(id="t1", module_id="M1", title="KV")
    client = stub_openai_client(parsed=TagEnrichmentResult(tags=["KV-Diagramm"]))

    async def update_task(task_id, patch):
        raise RuntimeError("task store offline")

    assert run(enrich_and_store_task_tags(task=task, update_task=update_task, service=service, client=client)) is None


def test_run_tag_migration(service):
    tasks = [
        Task(id="t1", module_id="M1", tags=["Quine-McCluskey"]),
        Task(id="t2", module_id="M1", tags=["QMC"]),
    ]
    update_task = Recorder()

    stats = run(run_tag_migration(tasks=tasks, update_task=update_task, service=service))

    assert stats.tasks_processed == 2
    assert stats.tags_normalized == 1
    assert update_task.calls == [("t2", {"tags": ["Quine-McCluskey"]})]
