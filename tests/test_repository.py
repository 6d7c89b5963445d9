"""Unit tests for document enumeration, ordering, and cached loading."""

from __future__ import annotations

import asyncio
import math

import pytest

from docs_nav.repository import (
    CachedDocument,
    DocumentRepository,
    derive_entry,
    fallback_title,
)
from docs_nav.store import DocumentKey, DocumentNotFoundError, MemoryDocumentStore

from .conftest import CountingStore


def _repo(*filenames: str, language: str = "en") -> DocumentRepository:
    documents = {f"{language}/{name}": f"# {name}\n" for name in filenames}
    return DocumentRepository(MemoryDocumentStore(documents))


def test_reference_ordering() -> None:
    """Index first, numeric prefixes ascending, unprefixed documents last."""
    repo = _repo("readme.md", "010-advanced.md", "index.md", "001_intro.md")
    slugs = [entry.display_slug for entry in repo.list_documents("en")]
    assert slugs == ["index", "intro", "advanced", "readme"], (
        f"Unexpected order {slugs!r}"
    )


def test_unprefixed_documents_sort_by_title_case_insensitively() -> None:
    """Equal orders tie-break on the fallback title ignoring case."""
    repo = _repo("zeta.md", "Alpha.md", "beta.md")
    slugs = [entry.display_slug for entry in repo.list_documents("en")]
    assert slugs == ["Alpha", "beta", "zeta"], f"Unexpected order {slugs!r}"


def test_listing_is_scoped_to_language() -> None:
    """Only keys under the requested namespace are listed."""
    store = MemoryDocumentStore({"en/index.md": "", "ko/index.md": "", "ko/02_a.md": ""})
    repo = DocumentRepository(store)
    assert [e.key.path for e in repo.list_documents("ko")] == ["ko/index.md", "ko/02_a.md"]
    assert repo.list_documents("fr") == [], "Unknown languages list nothing"


@pytest.mark.parametrize(
    ("filename", "order", "display_slug", "title"),
    [
        ("index.md", -math.inf, "index", "Index"),
        ("001_intro.md", 1, "intro", "Intro"),
        ("120-getting-started.md", 120, "getting-started", "Getting Started"),
        ("1_short.md", math.inf, "1_short", "1 Short"),
        ("1234_long.md", math.inf, "1234_long", "1234 Long"),
        ("١٢_intro.md", math.inf, "١٢_intro", "١٢ Intro"),
        ("release_notes.md", math.inf, "release_notes", "Release Notes"),
    ],
)
def test_derive_entry(
    filename: str, order: float, display_slug: str, title: str
) -> None:
    """Order prefixes need two or three digits followed by ``_`` or ``-``."""
    entry = derive_entry(DocumentKey("en", filename))
    assert entry.order == order, f"Unexpected order for {filename}"
    assert entry.display_slug == display_slug, f"Unexpected slug for {filename}"
    assert entry.fallback_title == title, f"Unexpected title for {filename}"
    assert entry.slug == filename.removesuffix(".md")


def test_fallback_title_reference() -> None:
    """Separators become spaces and every word is capitalized."""
    assert fallback_title("getting-started") == "Getting Started"


def test_load_document_normalizes_and_extracts_title(
    repository: DocumentRepository,
) -> None:
    """Loaded documents are normalized and carry their first H1."""
    document = asyncio.run(repository.load_document(DocumentKey("en", "001_intro.md")))
    assert document == CachedDocument(
        normalized_text="# Introduction\n\nLine one\n\nLine two\n## Install\n",
        extracted_title="Introduction",
    ), f"Unexpected cached document {document!r}"


def test_concurrent_loads_share_one_fetch(
    repository: DocumentRepository, counting_store: CountingStore
) -> None:
    """Concurrent callers for one key collapse into a single fetch."""
    key = DocumentKey("en", "index.md")

    async def _load_many() -> list[CachedDocument]:
        return await asyncio.gather(*(repository.load_document(key) for _ in range(5)))

    results = asyncio.run(_load_many())
    assert counting_store.fetches[key] == 1, "Expected exactly one underlying fetch"
    assert all(result is results[0] for result in results), (
        "All callers should receive the same cached object"
    )


def test_loaded_documents_are_memoized(
    repository: DocumentRepository, counting_store: CountingStore
) -> None:
    """Later loads reuse the cached result."""
    key = DocumentKey("en", "readme.md")

    async def _load_twice() -> None:
        await repository.load_document(key)
        await repository.load_document(key)

    asyncio.run(_load_twice())
    assert counting_store.fetches[key] == 1, "Second load should hit the cache"
    assert key in repository.cached_keys()


def test_unknown_key_raises_not_found(repository: DocumentRepository) -> None:
    """Unknown keys fail with DocumentNotFoundError."""
    with pytest.raises(DocumentNotFoundError, match="en/missing.md"):
        asyncio.run(repository.load_document(DocumentKey("en", "missing.md")))


def test_failed_loads_are_not_cached() -> None:
    """A failing fetch is retried on the next call."""
    store = CountingStore({"en/index.md": "# Home"}, failing=["en/index.md"])
    repo = DocumentRepository(store)
    key = DocumentKey("en", "index.md")

    async def _attempt_twice() -> None:
        for _ in range(2):
            with pytest.raises(DocumentNotFoundError):
                await repo.load_document(key)

    asyncio.run(_attempt_twice())
    assert store.fetches[key] == 2, "Each failed load should trigger a new fetch"
    assert repo.cached_keys() == [], "Failures must not be cached"


class _BrokenDiskStore(MemoryDocumentStore):
    """Memory store whose fetch fails with a raw ``OSError``."""

    async def fetch(self, key: DocumentKey) -> str:
        msg = "disk read failed"
        raise OSError(msg)


def test_store_errors_are_wrapped_as_not_found() -> None:
    """Arbitrary store failures surface as DocumentNotFoundError."""
    repo = DocumentRepository(_BrokenDiskStore({"en/index.md": "# Home"}))
    with pytest.raises(DocumentNotFoundError, match="disk read failed") as excinfo:
        asyncio.run(repo.load_document(DocumentKey("en", "index.md")))
    assert isinstance(excinfo.value.__cause__, OSError), "Expected the cause chained"
    assert repo.cached_keys() == [], "Wrapped failures must not be cached"
