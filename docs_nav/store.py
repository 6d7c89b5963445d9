"""Document store collaborators that enumerate and fetch raw Markdown.

The repository never touches storage directly. Instead it talks to a
:class:`DocumentStore`, which exposes the set of known :class:`DocumentKey`
values and an asynchronous ``fetch`` returning raw text. Three stores ship
with the package:

* :class:`MemoryDocumentStore` serves an in-process mapping (tests, embedding).
* :class:`FileSystemDocumentStore` reads ``<root>/<language>/<file>.md``.
* :class:`HttpDocumentStore` reads a JSON manifest of keys and fetches each
  document over HTTP with retries.

Example
-------
>>> import asyncio
>>> from docs_nav.store import DocumentKey, MemoryDocumentStore
>>> store = MemoryDocumentStore({"en/index.md": "# Home"})
>>> asyncio.run(store.fetch(DocumentKey("en", "index.md")))
'# Home'
"""

from __future__ import annotations

import asyncio
import dataclasses as dc
import logging
import posixpath
import typing as typ
from pathlib import Path

import msgspec
import msgspec.json as msgspec_json
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ._constants import DOC_SUFFIX

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .config import SourceConfig

log = logging.getLogger(__name__)


class DocumentNotFoundError(LookupError):
    """Raised when a document key is unknown or its content cannot be read."""

    def __init__(self, key: DocumentKey, reason: str | None = None) -> None:
        self.key = key
        msg = f"Document not found: {key.path}"
        if reason:
            msg = f"{msg} ({reason})"
        super().__init__(msg)


class DocumentStoreError(RuntimeError):
    """Raised when a store cannot enumerate its documents."""


@dc.dataclass(slots=True, frozen=True, order=True)
class DocumentKey:
    """Identify a stored document by language namespace and filename.

    Attributes
    ----------
    language : str
        Language namespace the document lives under (for example ``"en"``).
    filename : str
        Raw filename including the ``.md`` suffix (for example
        ``"001_intro.md"``).
    """

    language: str
    filename: str

    @property
    def path(self) -> str:
        """Return the storage path ``language/filename``."""
        return f"{self.language}/{self.filename}"

    @property
    def stem(self) -> str:
        """Return the filename without its ``.md`` suffix."""
        if self.filename.endswith(DOC_SUFFIX):
            return self.filename[: -len(DOC_SUFFIX)]
        return self.filename

    @classmethod
    def parse(cls, path: str) -> DocumentKey:
        """Build a key from a ``language/filename.md`` storage path.

        Raises
        ------
        ValueError
            If ``path`` does not contain exactly one language segment and a
            filename.
        """
        normalized = path.strip().strip("/")
        language, sep, filename = normalized.partition("/")
        if not sep or not language or not filename or "/" in filename:
            msg = f"Invalid document path '{path}'; expected 'language/file.md'."
            raise ValueError(msg)
        return cls(language=language, filename=filename)

    @classmethod
    def for_topic(cls, language: str, slug: str) -> DocumentKey:
        """Return the direct storage key for ``language/slug.md``."""
        return cls(language=language, filename=f"{slug}{DOC_SUFFIX}")


@typ.runtime_checkable
class DocumentStore(typ.Protocol):
    """Enumerable, keyed source of raw Markdown documents."""

    def keys(self) -> cabc.Iterable[DocumentKey]:
        """Return every known document key."""
        ...

    async def fetch(self, key: DocumentKey) -> str:
        """Return the raw text stored under ``key``.

        Raises
        ------
        DocumentNotFoundError
            If ``key`` is unknown or the underlying read fails.
        """
        ...


class MemoryDocumentStore:
    """Serve documents from an in-memory ``{"lang/file.md": text}`` mapping."""

    def __init__(self, documents: cabc.Mapping[str, str]) -> None:
        self._documents = {
            DocumentKey.parse(path): text for path, text in documents.items()
        }

    def keys(self) -> list[DocumentKey]:
        return list(self._documents)

    async def fetch(self, key: DocumentKey) -> str:
        try:
            return self._documents[key]
        except KeyError as exc:
            raise DocumentNotFoundError(key) from exc


class FileSystemDocumentStore:
    """Serve ``<root>/<language>/<file>.md`` files from a local directory."""

    def __init__(self, root: Path) -> None:
        self.root = root

    def keys(self) -> list[DocumentKey]:
        """Return keys for every Markdown file one level below a language dir."""
        if not self.root.is_dir():
            log.warning("Document root %s does not exist", self.root)
            return []
        return [
            DocumentKey(language=path.parent.name, filename=path.name)
            for path in sorted(self.root.glob(f"*/*{DOC_SUFFIX}"))
            if path.is_file()
        ]

    async def fetch(self, key: DocumentKey) -> str:
        path = self.root / key.language / key.filename
        try:
            return await asyncio.to_thread(path.read_text, encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise DocumentNotFoundError(key, str(exc)) from exc


class HttpDocumentStore:
    """Serve documents over HTTP, enumerated from a JSON manifest.

    The manifest is a JSON array of ``"language/file.md"`` paths. Documents are
    fetched from ``base_url`` joined with each path. Requests run on a worker
    thread so the event loop never blocks on network I/O.
    """

    def __init__(
        self,
        base_url: str,
        manifest_url: str,
        *,
        session: requests.Session | None = None,
        timeout: float = 30.0,
    ) -> None:
        """Initialize the store with its source URLs and transport.

        Parameters
        ----------
        base_url : str
            URL prefix that document paths are appended to.
        manifest_url : str
            URL of the JSON manifest listing the available document paths.
        session : requests.Session, optional
            Preconfigured session; defaults to one with retrying adapters.
        timeout : float, optional
            Per-request timeout in seconds. Defaults to ``30.0``.
        """
        self.base_url = base_url.rstrip("/")
        self.manifest_url = manifest_url
        self.timeout = timeout
        self._session = session or _build_session()
        self._keys: list[DocumentKey] | None = None

    def keys(self) -> list[DocumentKey]:
        """Return the manifest keys, downloading the manifest on first use.

        Raises
        ------
        DocumentStoreError
            If the manifest cannot be downloaded or is not a list of paths.
        """
        if self._keys is None:
            self._keys = self._load_manifest()
        return list(self._keys)

    async def fetch(self, key: DocumentKey) -> str:
        if key not in self.keys():
            raise DocumentNotFoundError(key, "not listed in manifest")
        url = posixpath.join(self.base_url, key.path)
        try:
            return await asyncio.to_thread(self._get_text, url)
        except requests.RequestException as exc:
            raise DocumentNotFoundError(key, str(exc)) from exc

    def _get_text(self, url: str) -> str:
        resp = self._session.get(url, timeout=self.timeout)
        resp.raise_for_status()
        return resp.text

    def _load_manifest(self) -> list[DocumentKey]:
        try:
            body = self._get_text(self.manifest_url)
        except requests.RequestException as exc:
            msg = f"Failed to download document manifest '{self.manifest_url}': {exc}"
            raise DocumentStoreError(msg) from exc
        try:
            paths = msgspec_json.decode(body, type=list[str])
        except msgspec.ValidationError as exc:
            msg = f"Manifest '{self.manifest_url}' must be a JSON list of paths"
            raise DocumentStoreError(msg) from exc
        except msgspec.DecodeError as exc:
            msg = f"Manifest '{self.manifest_url}' is not valid JSON"
            raise DocumentStoreError(msg) from exc
        keys: list[DocumentKey] = []
        for path in paths:
            try:
                keys.append(DocumentKey.parse(path))
            except ValueError:
                log.warning("Skipping malformed manifest entry %r", path)
        log.debug("Loaded %d document keys from %s", len(keys), self.manifest_url)
        return keys


def _build_session() -> requests.Session:
    """Return a requests session that retries idempotent requests."""
    session = requests.Session()
    retry = Retry(
        total=5,
        read=5,
        connect=3,
        backoff_factor=0.5,
        status_forcelist=(500, 502, 503, 504),
        allowed_methods=("GET", "HEAD"),
    )
    adapter = HTTPAdapter(max_retries=retry)
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


def build_store(source: SourceConfig) -> DocumentStore:
    """Return the document store described by a configured ``source``."""
    if source.kind == "http":
        if not source.base_url or not source.manifest_url:
            msg = "HTTP sources require both a base URL and a manifest URL."
            raise DocumentStoreError(msg)
        return HttpDocumentStore(source.base_url, source.manifest_url)
    if source.root is None:
        msg = "Filesystem sources require a root directory."
        raise DocumentStoreError(msg)
    return FileSystemDocumentStore(source.root)


__all__ = [
    "DocumentKey",
    "DocumentNotFoundError",
    "DocumentStore",
    "DocumentStoreError",
    "FileSystemDocumentStore",
    "HttpDocumentStore",
    "MemoryDocumentStore",
    "build_store",
]
