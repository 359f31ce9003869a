from conftest import run, stub_openai_client
from study_companion.core.schemas.enrichment import TagEnrichmentResult
from study_companion.core.services.tag_enrichment_service import (
    build_task_text,
    request_tag_suggestions,
    suggest_task_tags,
)


def test_build_task_text():
    assert build_task_text(" Titel ", " Inhalt ") == "Titel\n\nInhalt"
    assert build_task_text(None, "Inhalt") == "Inhalt"
    assert build_task_text("Titel", None) == "Titel"
    assert build_task_text(None, "  ") == ""


def test_suggestions_are_normalized_against_registry(service):
    run(service.normalize_tags(["Quine-McCluskey"], "M1"))
    client = stub_openai_client(parsed=TagEnrichmentResult(tags=["QMC", "Primimplikanten"]))

    result = run(suggest_task_tags(
        module_id="M1",
        title="Minimiere f",
        content="Bestimme alle Primimplikanten mit dem Tabellenverfahren.",
        service=service,
        client=client,
    ))

    assert result.tags == ["Quine-McCluskey", "Primimplikanten"]
    assert result.new_entries == ["Primimplikanten"]

    [call] = client.responses.calls
    system_prompt = call["input"][0]["content"]
    assert '- "Quine-McCluskey"' in system_prompt
    assert call["input"][1]["content"].startswith("Minimiere f\n\n")
    assert call["text_format"] is TagEnrichmentResult


def test_prompt_without_registry_has_no_allowed_tags_section(service):
    client = stub_openai_client(parsed=TagEnrichmentResult(tags=["Automaten"]))

    run(suggest_task_tags(module_id="M1", title="DFA", content=None, service=service, client=client))

    assert "Bevorzugte Tags" not in client.responses.calls[0]["input"][0]["content"]


def test_refusal_yields_no_tags(service, store):
    client = stub_openai_client(refusal="nope")

    result = run(suggest_task_tags(module_id="M1", title="x", content="y", service=service, client=client))

    assert result.tags == []
    assert store.writes == 0


def test_api_error_yields_no_tags(service, store):
    client = stub_openai_client(error=RuntimeError("rate limited"))

    assert run(request_tag_suggestions(text="x", allowed_tags=[], client=client)) == []
    result = run(suggest_task_tags(module_id="M1", title="x", content="y", service=service, client=client))
    assert result.tags == []
    assert store.writes == 0


def test_unparsed_response_yields_no_tags():
    client = stub_openai_client(parsed=None)
    assert run(request_tag_suggestions(text="x", allowed_tags=["A"], client=client)) == []


def test_empty_task_text_skips_model(service, store):
    client = stub_openai_client(parsed=TagEnrichmentResult(tags=["Automaten"]))

    result = run(suggest_task_tags(module_id="M1", title=None, content="   ", service=service, client=client))

    assert result.tags == []
    assert client.responses.calls == []
    assert store.reads == 0
