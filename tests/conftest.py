from __future__ import annotations

import asyncio
from types import SimpleNamespace

import pytest

from study_companion.core.repositories.implementations.memory.collection_store import (
    InMemoryCollectionStore,
)
from study_companion.core.repositories.tag_registry_repository import TagRegistryRepository
from study_companion.core.services.tag_registry_service import TagRegistryService
from study_companion.core.tagging.synonyms import SynonymTable
from study_companion.core.tagging.vocabulary import KNOWN_SYNONYMS


def run(coro):
    return asyncio.run(coro)


@pytest.fixture
def store() -> InMemoryCollectionStore:
    return InMemoryCollectionStore()


@pytest.fixture
def repo(store) -> TagRegistryRepository:
    return TagRegistryRepository(store, collection_key="module_tag_registries", version="1.0.0")


@pytest.fixture
def service(repo) -> TagRegistryService:
    return TagRegistryService(
        repo,
        synonyms=SynonymTable(KNOWN_SYNONYMS),
        overlap_threshold=0.5,
        serialize_module_writes=False,
    )


class StubResponses:
    """Stands in for `AsyncOpenAI().responses`."""

    def __init__(self, *, parsed=None, refusal=None, error: Exception | None = None) -> None:
        self.parsed = parsed
        self.refusal = refusal
        self.error = error
        self.calls: list[dict] = []

    async def parse(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return SimpleNamespace(refusal=self.refusal, output_parsed=self.parsed)


def stub_openai_client(**kwargs) -> SimpleNamespace:
    return SimpleNamespace(responses=StubResponses(**kwargs))
