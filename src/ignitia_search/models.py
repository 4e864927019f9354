"""Data structures shared by the loader, scorer, renderer and navigator."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class Field(str, Enum):
    """Indexed text attributes of a `Document`, in descending boost order."""

    TITLE = "title"
    DESCRIPTION = "description"
    BODY = "body"


@dataclass(frozen=True, slots=True)
class Document:
    """One indexable page or section of the documentation site.

    Attributes
    ----------
    id: str
        Stable unique identifier (the index "ref").
    title: str
        Page title, boosted highest during scoring.
    description: str
        Optional summary, boosted below the title.
    body: str
        Full plain-text content, used for snippets.
    permalink: str
        Navigation target handed to the page when a result is confirmed.
    """

    id: str
    title: str
    body: str
    permalink: str
    description: str = ""

    def field_text(self, field: Field) -> str:
        return getattr(self, field.value)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "body": self.body,
            "permalink": self.permalink,
        }


@dataclass(frozen=True, slots=True)
class ScoredMatch:
    """A document and its relevance score for one query."""

    document: Document
    score: float


@dataclass(frozen=True, slots=True)
class ResultItem:
    """Display-ready form of a `ScoredMatch`.

    `title_html` and `snippet_html` are already escaped and carry `<mark>`
    emphasis around query occurrences. Placeholder items (the "no results"
    row) have no permalink and cannot be selected.
    """

    index: int
    title_html: str
    snippet_html: str
    permalink: Optional[str]
    score: float = 0.0
    is_placeholder: bool = False
