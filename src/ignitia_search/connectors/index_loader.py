"""Index loader: fetch the serialized document collection once per page lifetime.

Supported payloads, as produced by the site build:

- a JSON array of document records;
- a JSON object with a ``documents`` array;
- an elasticlunr index object (``documentStore.docs`` maps ref -> record);
- the same object wrapped in a script, e.g. ``window.searchIndex = {...};``.
"""

from __future__ import annotations

import asyncio
import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

import httpx

from ..config import SearchConfig
from ..exceptions import LoadError
from ..models import Document
from .base_connector import IndexTransport

logger = logging.getLogger(__name__)

# Leading "window.searchIndex =", "var searchIndex =", ... before the JSON value
_SCRIPT_ASSIGNMENT_RE = re.compile(r"^\s*(?:(?:var|let|const)\s+)?[\w$.]+\s*=\s*")


class HttpTransport(IndexTransport):
    """Fetch the index over HTTP(S) with httpx."""

    def __init__(self, url: str, *, timeout: float = 20.0) -> None:
        self.url = url
        self.timeout = timeout

    @property
    def location(self) -> str:
        return self.url

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, follow_redirects=True)

    async def fetch_text(self) -> str:
        async with self._client() as client:
            resp = await client.get(self.url)
            resp.raise_for_status()
            return resp.text


class FileTransport(IndexTransport):
    """Read the index from the local filesystem (e.g. a built site's public/ dir)."""

    def __init__(self, path: Path) -> None:
        self.path = path

    @property
    def location(self) -> str:
        return str(self.path)

    async def fetch_text(self) -> str:
        return await asyncio.to_thread(self.path.read_text, encoding="utf-8")


def make_transport(cfg: SearchConfig) -> IndexTransport:
    """Pick a transport for the configured index location."""
    location = cfg.index_url.strip()
    if location.startswith(("http://", "https://")):
        return HttpTransport(location, timeout=cfg.timeout)
    path = Path(location)
    if cfg.site_root:
        # Site-absolute paths ("/search_index.en.js") are relative to the site root
        path = Path(cfg.site_root) / location.lstrip("/")
    return FileTransport(path)


def _strip_script(text: str) -> str:
    body = text.strip()
    if body.startswith(("{", "[")):
        return body
    body = _SCRIPT_ASSIGNMENT_RE.sub("", body, count=1).strip()
    return body.rstrip(";").strip()


def _records(data: Any) -> Iterable[Tuple[Optional[str], Any]]:
    if isinstance(data, list):
        return ((None, item) for item in data)
    if isinstance(data, dict):
        if isinstance(data.get("documents"), list):
            return ((None, item) for item in data["documents"])
        store = data.get("documentStore")
        if isinstance(store, dict) and isinstance(store.get("docs"), dict):
            return ((str(ref), item) for ref, item in store["docs"].items())
    raise LoadError("Index payload has no document collection")


def _text(record: Dict[str, Any], key: str) -> str:
    value = record.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise LoadError(f"Field {key!r} must be a string, got {type(value).__name__}")
    return value


def _to_document(ref: Optional[str], record: Any) -> Optional[Document]:
    if not isinstance(record, dict):
        raise LoadError(f"Document record must be an object, got {type(record).__name__}")

    doc_id = _text(record, "id") or _text(record, "ref") or (ref or "")
    permalink = _text(record, "permalink") or _text(record, "url") or doc_id
    doc_id = doc_id or permalink
    if not doc_id:
        raise LoadError("Document record has no id, ref, permalink or url")

    title = _text(record, "title")
    body = _text(record, "body")
    if not title and not body:
        # Section pages without a title or content have nothing to search
        logger.warning("Skipping document %r: it has neither title nor body", doc_id)
        return None

    return Document(
        id=doc_id,
        title=title,
        description=_text(record, "description"),
        body=body,
        permalink=permalink,
    )


def parse_index_payload(text: str) -> List[Document]:
    """Decode a serialized index into documents, preserving payload order.

    Raises
    ------
    LoadError
        If the payload is not valid JSON (after removing a script wrapper) or
        any record does not have the expected document shape. Records with
        neither a title nor a body are skipped.
    """
    try:
        data = json.loads(_strip_script(text))
    except json.JSONDecodeError as exc:
        raise LoadError(f"Index payload is not valid JSON: {exc}") from exc

    documents: List[Document] = []
    seen: set[str] = set()
    for ref, record in _records(data):
        doc = _to_document(ref, record)
        if doc is None:
            continue
        if doc.id in seen:
            raise LoadError(f"Duplicate document id {doc.id!r}")
        seen.add(doc.id)
        documents.append(doc)
    return documents


class IndexLoader:
    """Load the document collection at most once.

    The first `load()` starts the transport call; concurrent and later calls
    await the same outcome. A failure is cached too: it is not retried for the
    lifetime of the loader.
    """

    def __init__(self, transport: IndexTransport) -> None:
        self.transport = transport
        self._task: Optional[asyncio.Task[List[Document]]] = None

    @property
    def started(self) -> bool:
        return self._task is not None

    async def load(self) -> List[Document]:
        if self._task is None:
            self._task = asyncio.ensure_future(self._load_once())
        documents = await asyncio.shield(self._task)
        return list(documents)

    async def _load_once(self) -> List[Document]:
        location = self.transport.location
        logger.debug("Loading search index from %s", location)
        try:
            text = await self.transport.fetch_text()
        except (httpx.HTTPError, OSError, ValueError) as exc:
            # ValueError covers payloads that are not valid UTF-8
            raise LoadError(f"Failed to fetch search index from {location}: {exc}") from exc
        documents = parse_index_payload(text)
        logger.info("Loaded %d documents from %s", len(documents), location)
        return documents
