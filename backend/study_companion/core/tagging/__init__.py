from .grouping import group_by_canonical_tag, group_tasks_by_canonical_topic
from .keys import canonical_key, clean_label, get_topic_canonical_key, registry_key
from .labels import extract_task_tags, format_tag_label, select_best_label
from .prompt import format_allowed_tags_for_prompt
from .synonyms import SynonymTable, are_canonical_keys_synonyms
from .topics import (
    TopicCatalog,
    find_canonical_topic,
    get_topic_display_label,
    is_noise_topic,
    normalize_topic_key,
    normalize_topics,
)

__all__ = [
    "SynonymTable",
    "TopicCatalog",
    "are_canonical_keys_synonyms",
    "canonical_key",
    "clean_label",
    "extract_task_tags",
    "find_canonical_topic",
    "format_allowed_tags_for_prompt",
    "format_tag_label",
    "get_topic_canonical_key",
    "get_topic_display_label",
    "group_by_canonical_tag",
    "group_tasks_by_canonical_topic",
    "is_noise_topic",
    "normalize_topic_key",
    "normalize_topics",
    "registry_key",
    "select_best_label",
]
