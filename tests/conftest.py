"""Shared fixtures for docs_nav tests.

The fixtures build small in-memory document sets and a store wrapper that
counts fetches and yields to the event loop, so tests can observe single-flight
loading and interleaved resolver requests without touching the filesystem.
"""

from __future__ import annotations

import asyncio
import collections
import typing as typ

import pytest

from docs_nav.repository import DocumentRepository
from docs_nav.resolver import TopicResolver
from docs_nav.store import DocumentKey, DocumentNotFoundError, MemoryDocumentStore

if typ.TYPE_CHECKING:
    import collections.abc as cabc

SAMPLE_DOCUMENTS: dict[str, str] = {
    "en/index.md": "# Welcome\n\nStart here.\n",
    "en/001_intro.md": "# Introduction\r\n\r\nLine one<br>\r\nLine two\r\n## Install\r\n",
    "en/010-advanced.md": "# Advanced Usage\n\n## Caching\n",
    "en/readme.md": "Plain notes without a heading.\n",
    "ko/index.md": "# 환영합니다\n",
}


class CountingStore:
    """Memory store that counts fetches and suspends before returning."""

    def __init__(
        self,
        documents: cabc.Mapping[str, str],
        *,
        failing: cabc.Iterable[str] = (),
        delays: cabc.Mapping[str, int] | None = None,
    ) -> None:
        self._inner = MemoryDocumentStore(documents)
        self.failing = {DocumentKey.parse(path) for path in failing}
        self.delays = {DocumentKey.parse(k): v for k, v in (delays or {}).items()}
        self.fetches: collections.Counter[DocumentKey] = collections.Counter()

    def keys(self) -> list[DocumentKey]:
        return self._inner.keys()

    async def fetch(self, key: DocumentKey) -> str:
        self.fetches[key] += 1
        for _ in range(self.delays.get(key, 1)):
            await asyncio.sleep(0)
        if key in self.failing:
            raise DocumentNotFoundError(key, "simulated read failure")
        return await self._inner.fetch(key)


@pytest.fixture
def counting_store() -> CountingStore:
    """Return a counting store over the sample documents."""
    return CountingStore(SAMPLE_DOCUMENTS)


@pytest.fixture
def repository(counting_store: CountingStore) -> DocumentRepository:
    """Return a repository over the counting store."""
    return DocumentRepository(counting_store)


@pytest.fixture
def resolver(repository: DocumentRepository) -> TopicResolver:
    """Return a resolver over the sample repository."""
    return TopicResolver(repository)
