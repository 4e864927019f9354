"""Turn ranked matches into escaped, highlighted result items and panel markup.

Emphasis never goes through string replacement on raw text: the text is cut
into matched and unmatched runs, each run is escaped on its own, and only
the matched runs are wrapped in ``<mark>``.
"""

from __future__ import annotations

import html
import re
from typing import List, Optional, Sequence, Tuple

from ..config import SearchConfig
from ..models import ResultItem, ScoredMatch

NO_RESULTS_TEXT = "No results found"

Segment = Tuple[str, bool]


def _pattern(query: str) -> Optional[re.Pattern[str]]:
    if not query:
        return None
    return re.compile(re.escape(query), re.IGNORECASE)


def segments(text: str, query: str) -> List[Segment]:
    """Split `text` into ``(run, matched)`` pairs around case-insensitive `query` hits.

    Matched runs never overlap and joining all runs gives back `text`.
    """
    pattern = _pattern(query)
    if not text:
        return []
    if pattern is None:
        return [(text, False)]

    out: List[Segment] = []
    pos = 0
    for m in pattern.finditer(text):
        if m.start() > pos:
            out.append((text[pos : m.start()], False))
        out.append((m.group(0), True))
        pos = m.end()
    if pos < len(text):
        out.append((text[pos:], False))
    return out


def highlight(text: str, query: str) -> str:
    """Escape `text` and emphasize every occurrence of `query` with ``<mark>``."""
    parts = []
    for run, matched in segments(text, query):
        escaped = html.escape(run, quote=True)
        parts.append(f"<mark>{escaped}</mark>" if matched else escaped)
    return "".join(parts)


def build_snippet(
    body: str,
    query: str,
    *,
    window: int = 120,
    lead: int = 40,
    ellipsis: str = "...",
) -> str:
    """Excerpt of `body` around the first occurrence of `query`, highlighted.

    The excerpt starts `lead` characters before the match and spans at most
    `window` characters. Ellipsis markers show where text was cut. When the
    query does not occur in `body`, the excerpt is the start of the body.
    """
    if not body:
        return ""

    pattern = _pattern(query)
    m = pattern.search(body) if pattern is not None else None
    if m is None:
        excerpt = body[:window]
        suffix = ellipsis if len(body) > window else ""
        return highlight(excerpt, query) + html.escape(suffix)

    start = max(0, m.start() - lead)
    end = min(len(body), start + window)
    prefix = ellipsis if start > 0 else ""
    suffix = ellipsis if end < len(body) else ""
    return html.escape(prefix) + highlight(body[start:end], query) + html.escape(suffix)


class ResultRenderer:
    """Build `ResultItem` lists and the results panel markup."""

    def __init__(self, cfg: Optional[SearchConfig] = None) -> None:
        self.cfg = cfg or SearchConfig()

    def render(self, matches: Sequence[ScoredMatch], query: str) -> List[ResultItem]:
        """Display items for `matches`, bounded to the configured maximum.

        An empty match list yields the single "no results" placeholder.
        """
        if not matches:
            return [
                ResultItem(
                    index=0,
                    title_html=html.escape(NO_RESULTS_TEXT),
                    snippet_html="",
                    permalink=None,
                    is_placeholder=True,
                )
            ]

        items: List[ResultItem] = []
        for i, match in enumerate(matches[: self.cfg.max_results]):
            doc = match.document
            items.append(
                ResultItem(
                    index=i,
                    title_html=highlight(doc.title, query),
                    snippet_html=build_snippet(
                        doc.body,
                        query,
                        window=self.cfg.snippet_window,
                        lead=self.cfg.snippet_lead,
                        ellipsis=self.cfg.ellipsis,
                    ),
                    permalink=doc.permalink,
                    score=match.score,
                )
            )
        return items

    def to_html(self, items: Sequence[ResultItem], selected: Optional[int] = None) -> str:
        """Panel markup for `items`; the item at `selected` gets the ``selected`` class."""
        rows: List[str] = []
        for item in items:
            if item.is_placeholder:
                rows.append(f'<div class="search-result no-results">{item.title_html}</div>')
                continue
            classes = "search-result selected" if item.index == selected else "search-result"
            url = html.escape(item.permalink or "", quote=True)
            rows.append(
                f'<div class="{classes}" data-index="{item.index}" data-url="{url}">'
                f'<div class="result-title">{item.title_html}</div>'
                f'<div class="result-snippet">{item.snippet_html}</div>'
                "</div>"
            )
        return "".join(rows)
