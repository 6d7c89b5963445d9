"""Resolve a language and topic slug into published navigation state.

:class:`TopicResolver` is the stateful heart of a docs viewer. Each call to
:meth:`TopicResolver.resolve` runs a small asynchronous pipeline:

1. Publish the ordered topic list immediately, using fallback titles.
2. Select the requested document (display slug, then direct
   ``language/slug.md`` key, then the not-found placeholder), load it, and
   publish its content.
3. Load every document of the language concurrently and republish the topic
   list once, with titles upgraded to each document's first heading.

Every call takes a new generation token. Continuations compare their token
with the resolver's current generation before publishing, so a superseded
request never overwrites the state of a newer one. Listeners registered with
:meth:`TopicResolver.subscribe` receive a :class:`ResolverEvent` per publish.

Example
-------
>>> import asyncio
>>> from docs_nav.repository import DocumentRepository
>>> from docs_nav.resolver import TopicResolver
>>> from docs_nav.store import MemoryDocumentStore
>>> store = MemoryDocumentStore({"en/index.md": "# Welcome\\nHello"})
>>> resolver = TopicResolver(DocumentRepository(store))
>>> result = asyncio.run(resolver.resolve("en", "index"))
>>> result.content
'# Welcome\\nHello'
>>> [topic.title for topic in result.topics]
['Welcome']
"""

from __future__ import annotations

import asyncio
import dataclasses as dc
import enum
import logging
import typing as typ

from ._constants import INDEX_SLUG, NOT_FOUND_TEMPLATE
from .markdown_parser import extract_outline
from .navigation import DocumentView, TopicSummary, find_neighbours, topic_index
from .store import DocumentKey, DocumentNotFoundError

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .repository import DocumentEntry, DocumentRepository

log = logging.getLogger(__name__)


def not_found_content(language: str, slug: str) -> str:
    """Return the placeholder document shown for a missing topic."""
    return NOT_FOUND_TEMPLATE.format(language=language, slug=slug)


class ResolverStage(enum.Enum):
    """Publish points emitted while resolving a topic."""

    TOPICS = "topics"
    CONTENT = "content"
    TITLES = "titles"


@dc.dataclass(slots=True, frozen=True)
class ResolverEvent:
    """Notification delivered to resolver listeners after each publish."""

    stage: ResolverStage
    generation: int
    language: str
    slug: str
    topics: list[TopicSummary]
    content: str | None


@dc.dataclass(slots=True)
class ResolvedTopic:
    """Outcome of one :meth:`TopicResolver.resolve` call.

    Attributes
    ----------
    language : str
        Requested language.
    slug : str
        Requested topic slug.
    content : str
        Normalized Markdown or the not-found placeholder.
    topics : list[TopicSummary]
        Ordered topics with enriched titles.
    selected_index : int
        Position of the last topic carrying the requested slug, or ``-1``.
    key : DocumentKey | None
        Storage key the content was loaded from, if any.
    not_found : bool
        ``True`` when ``content`` is the placeholder.
    current : bool
        ``False`` when a newer request superseded this one before it settled.
    """

    language: str
    slug: str
    content: str
    topics: list[TopicSummary]
    selected_index: int
    key: DocumentKey | None = None
    not_found: bool = False
    current: bool = True


@dc.dataclass(slots=True)
class _PublishedState:
    language: str = ""
    slug: str = INDEX_SLUG
    content: str = ""
    topics: list[TopicSummary] = dc.field(default_factory=list)
    not_found: bool = False


Listener = typ.Callable[[ResolverEvent], None]


class TopicResolver:
    """Select, load, and publish topics for a docs viewer."""

    def __init__(self, repository: DocumentRepository) -> None:
        self.repository = repository
        self._generation = 0
        self._state = _PublishedState()
        self._listeners: list[Listener] = []

    @property
    def generation(self) -> int:
        """Return the token of the most recent request."""
        return self._generation

    @property
    def content(self) -> str:
        """Return the most recently published content."""
        return self._state.content

    @property
    def topics(self) -> list[TopicSummary]:
        """Return the most recently published topic list."""
        return list(self._state.topics)

    def subscribe(self, listener: Listener) -> typ.Callable[[], None]:
        """Register ``listener`` and return a callable that unregisters it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def start(self, language: str, slug: str | None = None) -> asyncio.Task[ResolvedTopic]:
        """Schedule :meth:`resolve` on the running loop and return its task."""
        return asyncio.ensure_future(self.resolve(language, slug))

    async def resolve(self, language: str, slug: str | None = None) -> ResolvedTopic:
        """Resolve ``slug`` in ``language`` and publish the result in stages.

        Parameters
        ----------
        language : str
            Language namespace to resolve in.
        slug : str, optional
            Requested topic slug; ``None`` or empty means ``"index"``.

        Returns
        -------
        ResolvedTopic
            Content and enriched topics for this request. ``current`` is
            ``False`` when a newer request started before this one settled;
            such results were not published.

        Notes
        -----
        Missing or unreadable documents never raise; the placeholder from
        :func:`not_found_content` is substituted instead.
        """
        requested = slug or INDEX_SLUG
        self._generation += 1
        token = self._generation
        entries = self.repository.list_documents(language)
        topics = [
            TopicSummary(slug=entry.display_slug, title=entry.fallback_title)
            for entry in entries
        ]
        self._publish(
            token, ResolverStage.TOPICS, language, requested, topics=topics
        )

        key = self._select_key(language, requested, entries)
        content, not_found = await self._load_content(key, language, requested)
        self._publish(
            token,
            ResolverStage.CONTENT,
            language,
            requested,
            content=content,
            not_found=not_found,
        )

        enriched = await self._enrich_titles(entries)
        self._publish(
            token, ResolverStage.TITLES, language, requested, topics=enriched
        )
        return ResolvedTopic(
            language=language,
            slug=requested,
            content=content,
            topics=enriched,
            selected_index=topic_index(enriched, requested),
            key=key,
            not_found=not_found,
            current=self._is_current(token),
        )

    def view(self) -> DocumentView:
        """Return the published state as a :class:`DocumentView`."""
        state = self._state
        previous, following = find_neighbours(state.topics, state.slug)
        return DocumentView(
            language=state.language,
            current_slug=state.slug,
            content=state.content,
            topics=list(state.topics),
            toc=extract_outline(state.content),
            previous=previous,
            next=following,
            not_found=state.not_found,
        )

    def _is_current(self, token: int) -> bool:
        return token == self._generation

    def _select_key(
        self, language: str, requested: str, entries: cabc.Sequence[DocumentEntry]
    ) -> DocumentKey | None:
        """Return the key for ``requested`` or ``None`` when nothing matches."""
        matches = [entry.key for entry in entries if entry.display_slug == requested]
        if matches:
            if len(matches) > 1:
                log.warning(
                    "Display slug %r is ambiguous in %s; using %s",
                    requested,
                    language,
                    matches[-1].path,
                )
            return matches[-1]
        direct = DocumentKey.for_topic(language, requested)
        if self.repository.has_key(direct):
            log.debug("Resolved %s/%s through its direct key", language, requested)
            return direct
        return None

    async def _load_content(
        self, key: DocumentKey | None, language: str, requested: str
    ) -> tuple[str, bool]:
        if key is None:
            log.debug("No document matches %s/%s", language, requested)
            return not_found_content(language, requested), True
        try:
            document = await self.repository.load_document(key)
        except DocumentNotFoundError as exc:
            log.debug("Falling back to placeholder for %s/%s: %s", language, requested, exc)
            return not_found_content(language, requested), True
        return document.normalized_text, False

    async def _enrich_titles(
        self, entries: cabc.Sequence[DocumentEntry]
    ) -> list[TopicSummary]:
        results = await asyncio.gather(
            *(self.repository.load_document(entry.key) for entry in entries),
            return_exceptions=True,
        )
        topics: list[TopicSummary] = []
        for entry, result in zip(entries, results, strict=True):
            title = entry.fallback_title
            if isinstance(result, DocumentNotFoundError):
                log.debug("Keeping fallback title for %s: %s", entry.key.path, result)
            elif isinstance(result, BaseException):
                raise result
            elif result.extracted_title:
                title = result.extracted_title
            topics.append(TopicSummary(slug=entry.display_slug, title=title))
        return topics

    def _publish(
        self,
        token: int,
        stage: ResolverStage,
        language: str,
        slug: str,
        *,
        topics: list[TopicSummary] | None = None,
        content: str | None = None,
        not_found: bool = False,
    ) -> None:
        if not self._is_current(token):
            log.debug("Dropping stale %s publish for %s/%s", stage.value, language, slug)
            return
        state = self._state
        if state.language != language or state.slug != slug:
            self._state = state = _PublishedState(
                language=language, slug=slug, topics=list(state.topics)
            )
        if topics is not None:
            state.topics = list(topics)
        if content is not None:
            state.content = content
            state.not_found = not_found
        event = ResolverEvent(
            stage=stage,
            generation=token,
            language=language,
            slug=slug,
            topics=list(state.topics),
            content=content,
        )
        for listener in list(self._listeners):
            listener(event)


__all__ = [
    "ResolvedTopic",
    "ResolverEvent",
    "ResolverStage",
    "TopicResolver",
    "not_found_content",
]
