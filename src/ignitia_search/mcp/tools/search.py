"""Documentation search tools for FastMCP.

Results carry the same escaped, ``<mark>``-highlighted title and snippet the
site's search box shows.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional

from fastmcp import FastMCP

from ignitia_search.exceptions import ScoringInternalError
from ignitia_search.search.index import search
from ignitia_search.ui.renderer import ResultRenderer

logger = logging.getLogger(__name__)


def register_search_tools(mcp: FastMCP, get_state: Callable[[], Any]) -> None:
    """Register search tools on the given FastMCP instance.

    Reads config from state.settings.search; the index comes from
    state.ensure_index().
    """

    @mcp.tool
    async def docs_search(query: str, k: Optional[int] = None) -> List[Dict[str, Any]]:
        """Search the documentation and return ranked, highlighted results.

        Parameters
        ----------
        query: str
            Search text. Partial words match ("serv" finds "server").
        k: int | None
            Maximum number of results (default: the search box limit, 8).
        """
        state = get_state()
        cfg = state.settings.search
        q = (query or "").strip()
        if len(q) < cfg.min_query_length:
            return []
        index = await state.ensure_index()
        if index is None:
            return []

        try:
            matches = search(index, q)
        except ScoringInternalError:
            logger.exception("docs_search failed for %r", q)
            return []

        limit = max(1, int(k or cfg.max_results))
        renderer = ResultRenderer(cfg.model_copy(update={"max_results": limit}))
        out: List[Dict[str, Any]] = []
        for match, item in zip(matches, renderer.render(matches[:limit], q)):
            out.append(
                {
                    "id": match.document.id,
                    "title": item.title_html,
                    "snippet": item.snippet_html,
                    "score": match.score,
                    "url": item.permalink,
                }
            )
        return out

    @mcp.tool
    async def docs_get(doc_id: str) -> Dict[str, Any]:
        """Return a single indexed document by its id."""
        state = get_state()
        index = await state.ensure_index()
        doc = index.get_document(doc_id) if index is not None else None
        if doc is None:
            raise LookupError(f"Unknown document id: {doc_id}")
        return doc.to_dict()

    @mcp.tool
    async def docs_stats() -> Dict[str, Any]:
        """Report whether the index is loaded, and its document and term counts."""
        state = get_state()
        index = await state.ensure_index()
        return {
            "loaded": index is not None,
            "documents": len(index) if index is not None else 0,
            "terms": len(index.terms) if index is not None else 0,
            "error": str(state.load_error) if state.load_error is not None else None,
        }
