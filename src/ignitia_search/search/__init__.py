"""In-memory inverted index and field-weighted scorer."""

from .index import DEFAULT_WEIGHTS, SearchIndex, build, search, tokenize

__all__ = ["DEFAULT_WEIGHTS", "SearchIndex", "build", "search", "tokenize"]
