from study_companion.core.models.task import Task
from study_companion.core.tagging.labels import (
    extract_task_tags,
    format_tag_label,
    score_label,
    select_best_label,
)


def test_select_best_label_prefers_label_without_parentheses():
    assert select_best_label(["Minimierung (Quine-McCluskey)", "Quine-McCluskey"]) == "Quine-McCluskey"


def test_select_best_label_prefers_capitalized():
    assert select_best_label(["kv diagramm", "KV-Diagramm"]) == "KV-Diagramm"


def test_select_best_label_prefers_german_spelling():
    assert select_best_label(["Zahlensysteme", "Binärsystem"]) == "Binärsystem"


def test_select_best_label_ties_keep_input_order():
    assert score_label("Abc") == score_label("Xyz")
    assert select_best_label(["Abc", "Xyz"]) == "Abc"
    assert select_best_label(["Xyz", "Abc"]) == "Xyz"


def test_select_best_label_single_and_empty():
    assert select_best_label(["  foo   bar "]) == "foo bar"
    assert select_best_label([]) == ""


def test_format_tag_label():
    assert format_tag_label("kv-diagramm") == "Kv Diagramm"
    assert format_tag_label("boolesche algebra") == "Boolesche Algebra"
    assert format_tag_label("") == "Allgemein"
    assert format_tag_label("   ") == "Allgemein"
    assert format_tag_label(None) == "Allgemein"


def test_extract_task_tags_dedupes_by_canonical_key():
    task = Task(id="t1", module_id="ti", tags=["KV-Diagramm", "kv diagramm", "Automaten"])
    pairs = [(t.key, t.label) for t in extract_task_tags(task)]
    assert pairs == [("diagramm kv", "KV Diagramm"), ("automaten", "Automaten")]


def test_extract_task_tags_falls_back_to_topic_then_default():
    with_topic = Task(id="t1", module_id="ti", topic="Zahlensysteme")
    bare = Task(id="t2", module_id="ti")

    assert [(t.key, t.label) for t in extract_task_tags(with_topic)] == [("zahlensysteme", "Zahlensysteme")]
    assert [(t.key, t.label) for t in extract_task_tags(bare)] == [("allgemein", "Allgemein")]
