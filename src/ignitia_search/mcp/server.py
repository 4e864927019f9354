"""Ignitia search MCP server entrypoint using FastMCP.

Serves the documentation site's search index to MCP clients.
Run with:
  - ignitia-search-mcp
  - or: python -m ignitia_search.mcp.server (ensure PYTHONPATH includes ./src)
"""
from __future__ import annotations

import asyncio
import logging
from typing import Optional

from fastmcp import FastMCP

from ignitia_search.config import Settings, load_settings
from ignitia_search.connectors.index_loader import IndexLoader, make_transport
from ignitia_search.exceptions import LoadError
from ignitia_search.logging_setup import configure_logging
from ignitia_search.mcp.tools import register_search_tools
from ignitia_search.search.index import SearchIndex, build

logger = logging.getLogger(__name__)


class AppState:
    """Application state shared by MCP tools.

    The index is loaded lazily on first use and at most once; a load failure
    is remembered and search tools answer with empty results from then on.
    """

    def __init__(self, settings: Settings, loader: Optional[IndexLoader] = None) -> None:
        self.settings = settings
        self.loader = loader or IndexLoader(make_transport(settings.search))
        self.index: Optional[SearchIndex] = None
        self.load_error: Optional[LoadError] = None
        self._lock = asyncio.Lock()

    @property
    def loaded(self) -> bool:
        return self.index is not None

    async def ensure_index(self) -> Optional[SearchIndex]:
        """Return the built index, loading it on first call; None if loading failed."""
        async with self._lock:
            if self.index is None and self.load_error is None:
                try:
                    documents = await self.loader.load()
                except LoadError as exc:
                    logger.error("Search index unavailable: %s", exc)
                    self.load_error = exc
                else:
                    self.index = build(documents, self.settings.search.weights.by_field())
            return self.index


# Global state and server instance
_state: Optional[AppState] = None
mcp = FastMCP("Ignitia Search MCP Server")


# ----- Tools -----

@mcp.tool
def health() -> str:
    """Simple health check tool."""
    return "ok"


# ----- Entrypoint -----

def main() -> None:
    """Initialize state and run the MCP server."""
    global _state
    settings = load_settings()
    configure_logging(settings.app.log_level)
    _state = AppState(settings)
    register_search_tools(mcp, get_state=lambda: _state)
    # Choose transport based on configuration: stdio (default), http, or sse
    transport = settings.app.transport
    if transport in ("http", "sse"):
        mcp.run(transport=transport, host=settings.app.host, port=settings.app.port)
    else:
        mcp.run()


if __name__ == "__main__":  # pragma: no cover
    main()
