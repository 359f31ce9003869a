from __future__ import annotations

from collections.abc import Sequence

from study_companion.config import settings


def format_allowed_tags_for_prompt(allowed_tags: Sequence[str], limit: int | None = None) -> str:
    """Render registered labels as a prompt section that biases tag generation.

    Returns an empty string when there is nothing to suggest.
    """
    if not allowed_tags:
        return ""

    max_tags = settings.prompt_max_allowed_tags if limit is None else limit
    lines = "\n".join(f'- "{tag}"' for tag in list(allowed_tags)[:max_tags])
    return (
        "Bevorzugte Tags (verwende diese wenn passend):\n"
        f"{lines}\n"
        "\n"
        "Wichtig: Verwende bevorzugt Tags aus dieser Liste. "
        "Erstelle nur neue Tags, wenn kein passender existiert."
    )
