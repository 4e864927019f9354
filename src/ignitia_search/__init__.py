"""Incremental documentation search: index loading, scoring, rendering and selection."""

from .models import Document, Field, ResultItem, ScoredMatch
from .search.index import SearchIndex, build, search, tokenize

__all__ = [
    "Document",
    "Field",
    "ResultItem",
    "ScoredMatch",
    "SearchIndex",
    "build",
    "search",
    "tokenize",
]
