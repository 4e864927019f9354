"""Inverted index over a fixed document collection.

The index maps every normalized term to the fields it occurs in and, per
field, to the documents (by insertion position) with their term frequency.
It is built once and never mutated; a new collection means a new index.

Query terms match index terms by substring, so a partially typed word
("serv") already hits "server" and "servers".
"""

from __future__ import annotations

import logging
import re
from collections import Counter
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from ..exceptions import ScoringInternalError
from ..models import Document, Field, ScoredMatch

logger = logging.getLogger(__name__)

_TOKEN_RE = re.compile(r"[^\W_]+")

DEFAULT_WEIGHTS: Mapping[Field, float] = MappingProxyType(
    {Field.TITLE: 3.0, Field.DESCRIPTION: 2.0, Field.BODY: 1.0}
)

Postings = Mapping[str, Mapping[Field, Mapping[int, int]]]


def tokenize(text: Optional[str]) -> List[str]:
    """Split `text` on non-alphanumeric boundaries and lower-case the pieces."""
    if not text:
        return []
    return [m.group(0).lower() for m in _TOKEN_RE.finditer(text)]


class SearchIndex:
    """Read-only term -> field -> {document position: term frequency} mapping."""

    __slots__ = ("_documents", "_weights", "_postings", "_terms")

    def __init__(
        self,
        documents: Sequence[Document],
        postings: Dict[str, Dict[Field, Dict[int, int]]],
        weights: Mapping[Field, float],
    ) -> None:
        self._documents: Tuple[Document, ...] = tuple(documents)
        self._weights: Mapping[Field, float] = MappingProxyType(dict(weights))
        self._postings: Postings = MappingProxyType(
            {
                term: MappingProxyType(
                    {f: MappingProxyType(dict(docs)) for f, docs in fields.items()}
                )
                for term, fields in postings.items()
            }
        )
        # Sorted once so that substring scans visit terms in a stable order
        self._terms: Tuple[str, ...] = tuple(sorted(postings))

    @property
    def documents(self) -> Tuple[Document, ...]:
        return self._documents

    @property
    def weights(self) -> Mapping[Field, float]:
        return self._weights

    @property
    def postings(self) -> Postings:
        return self._postings

    @property
    def terms(self) -> Tuple[str, ...]:
        return self._terms

    def __len__(self) -> int:
        return len(self._documents)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SearchIndex):
            return NotImplemented
        return (
            self._documents == other._documents
            and dict(self._weights) == dict(other._weights)
            and _plain(self._postings) == _plain(other._postings)
        )

    def __hash__(self) -> int:
        return hash((self._documents, self._terms))

    def __repr__(self) -> str:
        return f"SearchIndex(documents={len(self._documents)}, terms={len(self._terms)})"

    def matching_terms(self, query_term: str) -> List[str]:
        """Index terms that contain `query_term` as a substring."""
        return [t for t in self._terms if query_term in t]

    def get_document(self, doc_id: str) -> Optional[Document]:
        for doc in self._documents:
            if doc.id == doc_id:
                return doc
        return None


def _plain(postings: Postings) -> Dict[str, Dict[Field, Dict[int, int]]]:
    return {
        term: {f: dict(docs) for f, docs in fields.items()} for term, fields in postings.items()
    }


def build(
    documents: Iterable[Document], weights: Optional[Mapping[Field, float]] = None
) -> SearchIndex:
    """Build a `SearchIndex` from `documents`.

    Deterministic: the same documents in the same order always produce an
    equal index.
    """
    docs = list(documents)
    postings: Dict[str, Dict[Field, Dict[int, int]]] = {}
    for position, doc in enumerate(docs):
        for field in Field:
            counts = Counter(tokenize(doc.field_text(field)))
            for term, tf in counts.items():
                postings.setdefault(term, {}).setdefault(field, {})[position] = tf

    index = SearchIndex(docs, postings, weights or DEFAULT_WEIGHTS)
    logger.info("Built search index: %d documents, %d terms", len(docs), len(postings))
    return index


def search(index: SearchIndex, query: str) -> List[ScoredMatch]:
    """Score every document against `query` and return the full ranked list.

    Each query term contributes `tf * weight` for every index term containing
    it, in every field. A query made only of punctuation ("++") has no
    terms; it is matched as a raw case-insensitive substring of each field
    instead, each occurrence counting as one. Documents matching nothing are
    left out.
    Results are ordered by descending score, then by original document order.

    Raises
    ------
    ScoringInternalError
        If tokenizing or scoring fails unexpectedly.
    """
    try:
        scores: Dict[int, float] = {}
        query_terms = tokenize(query)
        if not query_terms:
            scores = _raw_scores(index, query.strip().lower())
        for query_term in query_terms:
            for term in index.matching_terms(query_term):
                for field, docs in index.postings[term].items():
                    weight = index.weights[field]
                    for position, tf in docs.items():
                        scores[position] = scores.get(position, 0.0) + tf * weight

        ranked = sorted(scores.items(), key=lambda item: (-item[1], item[0]))
        return [ScoredMatch(document=index.documents[pos], score=score) for pos, score in ranked]
    except Exception as exc:
        raise ScoringInternalError(f"Failed to score query {query!r}: {exc}") from exc


def _raw_scores(index: SearchIndex, needle: str) -> Dict[int, float]:
    scores: Dict[int, float] = {}
    if not needle:
        return scores
    for position, doc in enumerate(index.documents):
        for field, weight in index.weights.items():
            count = doc.field_text(field).lower().count(needle)
            if count:
                scores[position] = scores.get(position, 0.0) + count * weight
    return scores
