"""Unit tests for staged, cancellation-safe topic resolution."""

from __future__ import annotations

import asyncio

from docs_nav.navigation import TopicSummary
from docs_nav.repository import DocumentRepository
from docs_nav.resolver import (
    ResolvedTopic,
    ResolverEvent,
    ResolverStage,
    TopicResolver,
    not_found_content,
)
from docs_nav.store import DocumentKey, MemoryDocumentStore

from .conftest import SAMPLE_DOCUMENTS, CountingStore


def test_resolve_by_display_slug(resolver: TopicResolver) -> None:
    """A display slug selects its prefixed document."""
    result = asyncio.run(resolver.resolve("en", "intro"))
    assert result.key == DocumentKey("en", "001_intro.md")
    assert result.content.startswith("# Introduction\n"), "Expected intro content"
    assert result.selected_index == 1, "intro is the second topic"
    assert not result.not_found


def test_missing_slug_defaults_to_index(resolver: TopicResolver) -> None:
    """``None`` or an empty slug resolves the index topic."""
    result = asyncio.run(resolver.resolve("en"))
    assert result.slug == "index"
    assert result.content == "# Welcome\n\nStart here.\n"


def test_direct_key_fallback(resolver: TopicResolver) -> None:
    """A literal filename stem resolves through its direct storage key."""
    result = asyncio.run(resolver.resolve("en", "010-advanced"))
    assert result.key == DocumentKey("en", "010-advanced.md"), (
        "Expected the direct en/010-advanced.md key"
    )
    assert result.content.startswith("# Advanced Usage"), "Expected advanced content"
    assert result.selected_index == -1, "Raw stems are not sidebar slugs"


def test_unknown_topic_yields_placeholder(resolver: TopicResolver) -> None:
    """Unknown topics resolve to the literal 404 document."""
    result = asyncio.run(resolver.resolve("en", "bogus"))
    assert result.content == "# 404\nNot found: en/bogus"
    assert result.not_found
    assert result.key is None
    assert resolver.content == not_found_content("en", "bogus")


def test_fetch_failure_yields_placeholder() -> None:
    """A failing load degrades to the placeholder without raising."""
    store = CountingStore(SAMPLE_DOCUMENTS, failing=["en/001_intro.md"])
    resolver = TopicResolver(DocumentRepository(store))
    result = asyncio.run(resolver.resolve("en", "intro"))
    assert result.content == "# 404\nNot found: en/intro"
    assert result.not_found
    titles = {topic.slug: topic.title for topic in result.topics}
    assert titles["intro"] == "Intro", "Failed loads keep their fallback title"


def test_topics_are_enriched_with_extracted_titles(resolver: TopicResolver) -> None:
    """Stage two upgrades titles to each document's first H1."""
    result = asyncio.run(resolver.resolve("en", "index"))
    assert result.topics == [
        TopicSummary("index", "Welcome"),
        TopicSummary("intro", "Introduction"),
        TopicSummary("advanced", "Advanced Usage"),
        TopicSummary("readme", "Readme"),
    ], f"Unexpected topics {result.topics!r}"


def test_stages_publish_in_order(resolver: TopicResolver) -> None:
    """Fallback topics, then content, then enriched titles are published."""
    events: list[ResolverEvent] = []
    resolver.subscribe(events.append)
    asyncio.run(resolver.resolve("en", "intro"))

    assert [event.stage for event in events] == [
        ResolverStage.TOPICS,
        ResolverStage.CONTENT,
        ResolverStage.TITLES,
    ]
    first, second, third = events
    assert [topic.title for topic in first.topics] == [
        "Index",
        "Intro",
        "Advanced",
        "Readme",
    ], "Stage one should use fallback titles"
    assert first.content is None
    assert second.content is not None
    assert second.content.startswith("# Introduction")
    assert [topic.title for topic in third.topics][:2] == ["Welcome", "Introduction"]


def test_unsubscribe_stops_events(resolver: TopicResolver) -> None:
    """The callable returned by ``subscribe`` removes the listener."""
    events: list[ResolverEvent] = []
    unsubscribe = resolver.subscribe(events.append)
    unsubscribe()
    asyncio.run(resolver.resolve("en", "intro"))
    assert events == []


def test_superseded_request_never_publishes(resolver: TopicResolver) -> None:
    """Only the newest request's content reaches the published state."""
    contents: list[str] = []
    resolver.subscribe(
        lambda event: contents.append(event.content) if event.content else None
    )

    async def _race() -> tuple[ResolvedTopic, ResolvedTopic]:
        first = resolver.start("en", "intro")
        second = resolver.start("en", "advanced")
        return await first, await second

    first, second = asyncio.run(_race())
    assert not first.current, "The first request should be superseded"
    assert second.current
    assert resolver.content.startswith("# Advanced Usage"), (
        "Published content must belong to the newest request"
    )
    assert all(content.startswith("# Advanced Usage") for content in contents), (
        f"Stale content leaked into listeners: {contents!r}"
    )


def test_slow_stale_request_cannot_overwrite_newer_state() -> None:
    """A request that settles after a newer one is dropped."""
    store = CountingStore(SAMPLE_DOCUMENTS, delays={"en/001_intro.md": 20})
    resolver = TopicResolver(DocumentRepository(store))

    async def _race() -> None:
        slow = resolver.start("en", "intro")
        await asyncio.sleep(0)
        await resolver.resolve("ko", "index")
        await slow

    asyncio.run(_race())
    view = resolver.view()
    assert view.language == "ko"
    assert view.content == "# 환영합니다\n"
    assert [topic.slug for topic in view.topics] == ["index"]


def test_view_exposes_toc_and_neighbours(resolver: TopicResolver) -> None:
    """The published view carries the outline and sibling topics."""
    asyncio.run(resolver.resolve("en", "intro"))
    view = resolver.view()
    assert view.current_slug == "intro"
    assert [entry.id for entry in view.toc] == ["introduction", "install"]
    assert view.previous == TopicSummary("index", "Welcome")
    assert view.next == TopicSummary("advanced", "Advanced Usage")


def test_stage_two_loads_each_document_once(
    resolver: TopicResolver, counting_store: CountingStore
) -> None:
    """The selected document is not fetched again during enrichment."""
    asyncio.run(resolver.resolve("en", "intro"))
    assert set(counting_store.fetches.values()) == {1}, (
        f"Expected one fetch per document, got {dict(counting_store.fetches)!r}"
    )


class _FlakyDiskStore(MemoryDocumentStore):
    """Memory store whose reads of selected files fail with ``OSError``."""

    def __init__(self, documents: dict[str, str], broken: set[str]) -> None:
        super().__init__(documents)
        self.broken = broken

    async def fetch(self, key: DocumentKey) -> str:
        if key.path in self.broken:
            msg = "disk read failed"
            raise OSError(msg)
        return await super().fetch(key)


def test_store_os_errors_never_escape_resolve() -> None:
    """Raw store errors become the placeholder and keep fallback titles."""
    store = _FlakyDiskStore(SAMPLE_DOCUMENTS, broken={"en/001_intro.md"})
    resolver = TopicResolver(DocumentRepository(store))

    broken = asyncio.run(resolver.resolve("en", "intro"))
    assert broken.not_found, "Expected the placeholder for an unreadable document"
    assert broken.content == "# 404\nNot found: en/intro"

    healthy = asyncio.run(resolver.resolve("en", "index"))
    assert healthy.content == "# Welcome\n\nStart here.\n"
    titles = {topic.slug: topic.title for topic in healthy.topics}
    assert titles["intro"] == "Intro", "Unreadable documents keep their fallback title"


def test_duplicate_display_slugs_use_the_last_match_everywhere() -> None:
    """Content, selected index, and neighbours all follow the last matching entry."""
    store = MemoryDocumentStore(
        {"en/01_a.md": "# First\n", "en/02_a.md": "# Second\n", "en/03_b.md": "# B\n"}
    )
    resolver = TopicResolver(DocumentRepository(store))
    result = asyncio.run(resolver.resolve("en", "a"))
    assert result.content == "# Second\n"
    assert result.key == DocumentKey("en", "02_a.md")
    assert result.selected_index == 1, "Expected the index of the last match"

    view = resolver.view()
    assert view.previous is None, "The shadowed duplicate is not a neighbour"
    assert view.next == TopicSummary("b", "B")
