"""Resolve localized, ordered Markdown documents into navigable doc models.

This package discovers the documents of each language, orders them by their
filename prefixes, normalizes their Markdown, and resolves a language and
topic slug into content, a table of contents, sibling navigation, and a topic
index. The ``docs-nav`` console script exposes the same engine.

Exports
-------
- ``DocumentRepository``: per-language listing plus single-flight loading.
- ``TopicResolver``: staged, cancellation-safe topic resolution.
- ``normalize``, ``slugify``, ``extract_outline``: the text helpers.
- ``app`` / ``main``: the Cyclopts CLI.

Examples
--------
>>> from docs_nav import slugify
>>> slugify("Getting Started")
'getting-started'
"""

from __future__ import annotations

from .cli import app, main
from .markdown_parser import TocEntry, extract_outline, slugify
from .navigation import DocumentView, TopicSummary, build_doc_path
from .normalizer import normalize
from .repository import CachedDocument, DocumentEntry, DocumentRepository
from .resolver import ResolvedTopic, TopicResolver, not_found_content
from .store import (
    DocumentKey,
    DocumentNotFoundError,
    FileSystemDocumentStore,
    HttpDocumentStore,
    MemoryDocumentStore,
)

__all__ = [
    "CachedDocument",
    "DocumentEntry",
    "DocumentKey",
    "DocumentNotFoundError",
    "DocumentRepository",
    "DocumentView",
    "FileSystemDocumentStore",
    "HttpDocumentStore",
    "MemoryDocumentStore",
    "ResolvedTopic",
    "TocEntry",
    "TopicResolver",
    "TopicSummary",
    "app",
    "build_doc_path",
    "extract_outline",
    "main",
    "normalize",
    "not_found_content",
    "slugify",
]
