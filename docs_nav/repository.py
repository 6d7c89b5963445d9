"""Enumerate, order, and lazily load the documents of a language.

:class:`DocumentRepository` wraps a :class:`~docs_nav.store.DocumentStore` and
derives navigation metadata from storage keys alone: numeric filename prefixes
become the sort order, the remainder becomes the display slug, and a
title-cased fallback title is computed for every entry. Content is fetched on
demand, normalized, and memoized per key for the repository's lifetime.

Concurrent loads of the same key share a single pending task, so a burst of
navigation requests triggers at most one fetch per document.

Example
-------
>>> import asyncio
>>> from docs_nav.repository import DocumentRepository
>>> from docs_nav.store import MemoryDocumentStore
>>> store = MemoryDocumentStore(
...     {"en/index.md": "# Home", "en/010-setup.md": "# Setup", "en/faq.md": ""}
... )
>>> repo = DocumentRepository(store)
>>> [entry.display_slug for entry in repo.list_documents("en")]
['index', 'setup', 'faq']
>>> asyncio.run(repo.load_document(repo.list_documents("en")[0].key)).extracted_title
'Home'
"""

from __future__ import annotations

import asyncio
import dataclasses as dc
import logging
import math
import re
import typing as typ

from ._constants import INDEX_SLUG
from .markdown_parser import extract_title
from .normalizer import normalize
from .store import DocumentNotFoundError

if typ.TYPE_CHECKING:
    from .store import DocumentKey, DocumentStore

log = logging.getLogger(__name__)

ORDER_PREFIX_PATTERN = re.compile(r"^([0-9]{2,3})[_-](.+)$")
_SEPARATOR_PATTERN = re.compile(r"[-_]")
_WORD_START_PATTERN = re.compile(r"\b\w")


@dc.dataclass(slots=True, frozen=True)
class DocumentEntry:
    """Navigation metadata derived from a document's storage key.

    Attributes
    ----------
    key : DocumentKey
        Storage key the entry was derived from.
    slug : str
        Filename stem (for example ``"001_intro"``).
    display_slug : str
        Stem with any numeric order prefix stripped (for example ``"intro"``).
    order : float
        Sort key: the numeric prefix, ``-inf`` for ``index``, or ``+inf`` for
        unprefixed documents.
    fallback_title : str
        Title derived from ``display_slug`` when the document has no heading.
    """

    key: DocumentKey
    slug: str
    display_slug: str
    order: float
    fallback_title: str


@dc.dataclass(slots=True, frozen=True)
class CachedDocument:
    """Normalized document content and its first level-one heading."""

    normalized_text: str
    extracted_title: str | None = None


def fallback_title(display_slug: str) -> str:
    """Return a human title for ``display_slug``.

    >>> fallback_title("getting-started")
    'Getting Started'
    """
    spaced = _SEPARATOR_PATTERN.sub(" ", display_slug)
    return _WORD_START_PATTERN.sub(lambda match: match.group(0).upper(), spaced)


def derive_entry(key: DocumentKey) -> DocumentEntry:
    """Build the :class:`DocumentEntry` for ``key`` from its filename stem."""
    stem = key.stem
    order = math.inf
    display_slug = stem
    match = ORDER_PREFIX_PATTERN.match(stem)
    if match:
        order = float(int(match.group(1), 10))
        display_slug = match.group(2)
    elif stem == INDEX_SLUG:
        order = -math.inf
        display_slug = INDEX_SLUG
    return DocumentEntry(
        key=key,
        slug=stem,
        display_slug=display_slug,
        order=order,
        fallback_title=fallback_title(display_slug),
    )


def _entry_sort_key(entry: DocumentEntry) -> tuple[float, str, str]:
    """Return ``(order, folded title, title)`` for a stable total order."""
    title = entry.fallback_title
    return (entry.order, title.casefold(), title)


class DocumentRepository:
    """List a store's documents per language and cache their loaded content.

    The repository is created once per process (or per test) and never torn
    down; its cache is bounded by the number of stored documents.
    """

    def __init__(self, store: DocumentStore) -> None:
        self.store = store
        self._cache: dict[DocumentKey, asyncio.Future[CachedDocument]] = {}

    def known_keys(self) -> set[DocumentKey]:
        """Return every key the underlying store currently exposes."""
        return set(self.store.keys())

    def has_key(self, key: DocumentKey) -> bool:
        """Return ``True`` when ``key`` exists in the underlying store."""
        return key in self.known_keys()

    def list_documents(self, language: str) -> list[DocumentEntry]:
        """Return the ordered document entries under ``language``.

        Parameters
        ----------
        language : str
            Language namespace to enumerate.

        Returns
        -------
        list[DocumentEntry]
            Entries sorted by order prefix, with ``index`` first and
            unprefixed documents last; equal orders tie-break on the fallback
            title, case-insensitively.
        """
        entries = [
            derive_entry(key) for key in self.store.keys() if key.language == language
        ]
        entries.sort(key=_entry_sort_key)
        return entries

    async def load_document(self, key: DocumentKey) -> CachedDocument:
        """Return the normalized document for ``key``, loading it at most once.

        Concurrent callers awaiting the same key share one pending fetch.
        Successful results are memoized; failures are evicted so the next call
        retries.

        Raises
        ------
        DocumentNotFoundError
            If the key is unknown to the store or its fetch fails for any
            reason; other store errors are chained as the cause.
        """
        pending = self._cache.get(key)
        if pending is None:
            pending = asyncio.ensure_future(self._fetch_and_normalize(key))
            self._cache[key] = pending
            pending.add_done_callback(lambda task: self._evict_failed(key, task))
        elif pending.done():
            return pending.result()
        return await asyncio.shield(pending)

    def cached_keys(self) -> list[DocumentKey]:
        """Return keys whose loads have completed successfully."""
        return [
            key
            for key, task in self._cache.items()
            if task.done() and not task.cancelled() and task.exception() is None
        ]

    async def _fetch_and_normalize(self, key: DocumentKey) -> CachedDocument:
        log.debug("Fetching document %s", key.path)
        try:
            raw = await self.store.fetch(key)
        except DocumentNotFoundError:
            raise
        except Exception as exc:
            raise DocumentNotFoundError(key, str(exc)) from exc
        normalized = normalize(raw)
        return CachedDocument(
            normalized_text=normalized, extracted_title=extract_title(normalized)
        )

    def _evict_failed(
        self, key: DocumentKey, task: asyncio.Future[CachedDocument]
    ) -> None:
        if task.cancelled() or task.exception() is not None:
            if self._cache.get(key) is task:
                del self._cache[key]


__all__ = [
    "ORDER_PREFIX_PATTERN",
    "CachedDocument",
    "DocumentEntry",
    "DocumentRepository",
    "derive_entry",
    "fallback_title",
]
