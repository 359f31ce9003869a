from __future__ import annotations

from pydantic import Field, field_validator

from .base import TimestampedModel


class Task(TimestampedModel):
    """Practice task as seen by the tag engine.

    Tasks are owned and persisted elsewhere; only the fields relevant for tag
    normalization and topic grouping are modelled here.
    """

    id: str = Field(min_length=1, description="Task identifier")
    module_id: str = Field(min_length=1, description="Owning module")
    title: str | None = Field(default=None, description="Short task title")
    question: str | None = Field(default=None, description="Task statement")
    topic: str | None = Field(default=None, description="Free-text topic label")
    tags: list[str] = Field(default_factory=list, description="Canonical tag labels")

    @field_validator("tags", mode="before")
    @classmethod
    def coerce_missing_tags(cls, v: object) -> object:
        return [] if v is None else v

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "id": "task-1",
                    "module_id": "ti",
                    "title": "Minimiere die Funktion",
                    "topic": "Minimierung (Quine-McCluskey)",
                    "tags": ["Quine-McCluskey", "KV-Diagramm"],
                }
            ]
        }
    }
