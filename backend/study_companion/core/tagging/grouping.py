from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from study_companion.core.schemas.normalization import TagGroup, TopicGroup

from .keys import canonical_key, clean_label
from .labels import select_best_label


def group_tasks_by_canonical_topic(tasks: Iterable[Any]) -> dict[str, TopicGroup]:
    """Group tasks whose topics share a canonical key.

    The group label is re-selected from all member topics as the group grows.
    Tasks without a topic are skipped; topics themselves are left untouched.
    """
    groups: dict[str, TopicGroup] = {}
    for task in tasks:
        topic = getattr(task, "topic", None)
        if not isinstance(topic, str) or not topic:
            continue

        key = canonical_key(topic)
        group = groups.get(key)
        if group is None:
            groups[key] = TopicGroup(label=clean_label(topic), tasks=[task])
            continue

        group.tasks.append(task)
        group.label = select_best_label([t.topic for t in group.tasks if t.topic])
    return groups


def group_by_canonical_tag(items: Iterable[Any]) -> dict[str, TagGroup]:
    """Group items by the canonical keys of their tags.

    An item appears once in every group one of its tags maps to.
    """
    groups: dict[str, TagGroup] = {}
    for item in items:
        tags = getattr(item, "tags", None)
        if not tags:
            continue

        item_keys: set[str] = set()
        for tag in tags:
            key = canonical_key(tag)
            if key in item_keys:
                continue
            item_keys.add(key)

            group = groups.get(key)
            if group is None:
                groups[key] = TagGroup(label=clean_label(tag), items=[item])
            else:
                group.items.append(item)
    return groups
