from .enrichment import enrich_and_store_task_tags
from .migration import run_tag_migration

__all__ = [
    "enrich_and_store_task_tags",
    "run_tag_migration",
]
