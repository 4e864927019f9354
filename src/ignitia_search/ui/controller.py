"""Debounced input-to-query lifecycle.

Keystrokes reschedule a single pending timer task; only when input has been
quiet for the debounce period does a query reach the scorer. Every issued
query gets a generation number, and results are delivered only while that
generation is still the latest one.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from enum import Enum
from typing import Awaitable, Callable, List, Optional, Union

from ..exceptions import ScoringInternalError
from ..models import ScoredMatch
from ..search.index import SearchIndex, search

logger = logging.getLogger(__name__)

Scorer = Callable[
    [SearchIndex, str], Union[List[ScoredMatch], Awaitable[List[ScoredMatch]]]
]
ResultsSink = Callable[[str, List[ScoredMatch]], None]


class QueryOutcome(str, Enum):
    RESULTS = "results"
    TOO_SHORT = "too_short"
    UNAVAILABLE = "unavailable"
    STALE = "stale"
    FAILED = "failed"


class QueryController:
    def __init__(
        self,
        *,
        on_results: ResultsSink,
        on_clear: Callable[[], None],
        on_error: Optional[Callable[[Exception], None]] = None,
        debounce_ms: int = 300,
        min_query_length: int = 2,
        scorer: Scorer = search,
    ) -> None:
        self.on_results = on_results
        self.on_clear = on_clear
        self.on_error = on_error
        self.debounce = debounce_ms / 1000.0
        self.min_query_length = min_query_length
        self.scorer = scorer
        self.index: Optional[SearchIndex] = None
        self._pending: Optional[asyncio.Task[QueryOutcome]] = None
        self._pending_query: Optional[str] = None
        self._generation = 0

    @property
    def available(self) -> bool:
        return self.index is not None

    @property
    def pending(self) -> bool:
        return self._pending is not None and not self._pending.done()

    @property
    def generation(self) -> int:
        return self._generation

    def attach_index(self, index: SearchIndex) -> None:
        self.index = index

    def on_input(self, value: str) -> None:
        """Schedule a search for `value` after the quiet period, replacing any pending one."""
        self.cancel()
        self._pending_query = value
        self._pending = asyncio.ensure_future(self._fire_later(value))

    async def on_focus(self, value: str) -> QueryOutcome:
        """Re-run a long-enough query immediately when the input regains focus."""
        query = value.strip()
        if len(query) < self.min_query_length:
            return QueryOutcome.TOO_SHORT
        self.cancel()
        return await self._execute(query)

    async def submit(self, value: str) -> QueryOutcome:
        """Run `value` through the length gate and the scorer without debouncing."""
        query = value.strip()
        if len(query) < self.min_query_length:
            self._generation += 1
            logger.debug("Query %r below minimum length, clearing results", query)
            self.on_clear()
            return QueryOutcome.TOO_SHORT
        return await self._execute(query)

    async def flush(self) -> Optional[QueryOutcome]:
        """Run the pending debounced search now, if any."""
        if not self.pending:
            return None
        value = self._pending_query or ""
        self.cancel()
        return await self.submit(value)

    def cancel(self) -> None:
        """Drop the pending debounced search without running it."""
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = None
        self._pending_query = None

    def invalidate(self) -> None:
        """Cancel the pending search and discard results of any search still in flight."""
        self.cancel()
        self._generation += 1

    async def _fire_later(self, value: str) -> QueryOutcome:
        await asyncio.sleep(self.debounce)
        return await self.submit(value)

    async def _execute(self, query: str) -> QueryOutcome:
        index = self.index
        if index is None:
            logger.debug("Search index not available, ignoring query %r", query)
            return QueryOutcome.UNAVAILABLE

        self._generation += 1
        generation = self._generation
        try:
            result = self.scorer(index, query)
            if inspect.isawaitable(result):
                result = await result
            matches = list(result)
        except Exception as exc:
            logger.exception("Search failed for query %r", query)
            if generation == self._generation:
                if self.on_error is not None:
                    err = exc
                    if not isinstance(exc, ScoringInternalError):
                        err = ScoringInternalError(str(exc))
                        err.__cause__ = exc
                    self.on_error(err)
                else:
                    self.on_clear()
            return QueryOutcome.FAILED

        if generation != self._generation:
            logger.debug("Discarding stale results for query %r", query)
            return QueryOutcome.STALE

        logger.debug("Query %r matched %d documents", query, len(matches))
        self.on_results(query, matches)
        return QueryOutcome.RESULTS
