from __future__ import annotations

from pydantic import Field

from study_companion.core.models.base import AppBaseModel


class TagEnrichmentResult(AppBaseModel):
    """Validated LLM output for tag suggestions."""

    tags: list[str] = Field(
        description="List of topic tags for the task, maximum 5 tags",
        max_length=5,
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "tags": ["Quine-McCluskey", "Minimierung", "Primimplikanten"]
                }
            ]
        }
    }
