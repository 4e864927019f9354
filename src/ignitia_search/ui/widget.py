"""Site search box: wires loader, scorer, renderer and navigator to the page handles."""

from __future__ import annotations

import logging
from typing import Callable, List, Optional

from ..config import SearchConfig
from ..connectors.index_loader import IndexLoader
from ..exceptions import LoadError
from ..models import ResultItem, ScoredMatch
from ..search.index import SearchIndex, build
from .controller import QueryController, QueryOutcome
from .navigator import Action, SelectedAt, SelectionNavigator, key_to_action
from .renderer import ResultRenderer
from .surface import ResultsPanel, SearchInput

logger = logging.getLogger(__name__)


class SiteSearch:
    """Search enhancement for one page view.

    The page calls `start()` once it is ready, then forwards its input, focus,
    keydown and click events to the ``handle_*`` methods. Failures degrade to
    an inert search box; they never propagate to the page.
    """

    def __init__(
        self,
        *,
        search_input: SearchInput,
        panel: ResultsPanel,
        loader: IndexLoader,
        navigate: Callable[[str], None],
        cfg: Optional[SearchConfig] = None,
    ) -> None:
        self.cfg = cfg or SearchConfig()
        self.input = search_input
        self.panel = panel
        self.loader = loader
        self.navigate = navigate
        self.renderer = ResultRenderer(self.cfg)
        self.navigator = SelectionNavigator()
        self.controller = QueryController(
            on_results=self._show_results,
            on_clear=self.hide_results,
            on_error=self._on_search_error,
            debounce_ms=self.cfg.debounce_ms,
            min_query_length=self.cfg.min_query_length,
        )
        self.items: List[ResultItem] = []
        self.load_error: Optional[LoadError] = None

    @property
    def index(self) -> Optional[SearchIndex]:
        return self.controller.index

    @property
    def ready(self) -> bool:
        return self.controller.available

    async def start(self) -> bool:
        """Load the index and enable searching. Returns False if search stays disabled."""
        try:
            documents = await self.loader.load()
        except LoadError as exc:
            self.load_error = exc
            logger.error("Search disabled: %s", exc)
            return False
        self.controller.attach_index(build(documents, self.cfg.weights.by_field()))
        return True

    # ----- Page events -----

    def handle_input(self) -> None:
        self.controller.on_input(self.input.value)

    async def handle_focus(self) -> QueryOutcome:
        return await self.controller.on_focus(self.input.value)

    def handle_keydown(self, key: str) -> bool:
        """Apply a navigation key. Returns True when the page should suppress its default."""
        action = key_to_action(key)
        if action is None:
            return False
        if action is Action.DISMISS:
            self.dismiss()
            self.input.blur()
            return False
        if not self.navigator.items:
            return False

        target = self.navigator.apply(action)
        if action is Action.CONFIRM:
            if target:
                self._go(target)
        else:
            self._redraw()
        return True

    def handle_click(self, index: int) -> None:
        """Pointer activation of the result at `index`."""
        if self.navigator.select(index) != SelectedAt(index):
            return
        target = self.navigator.confirm()
        if target:
            self._go(target)

    def handle_outside_click(self) -> None:
        self.dismiss()

    def dismiss(self) -> None:
        """Hide the panel and drop any search that would reopen it."""
        self.controller.invalidate()
        self.hide_results()

    # ----- Rendering -----

    def hide_results(self) -> None:
        self.items = []
        self.navigator.reset()
        self.panel.hide()

    def _show_results(self, query: str, matches: List[ScoredMatch]) -> None:
        self.items = self.renderer.render(matches, query)
        self.navigator.reset(self.items)
        self._redraw()

    def _redraw(self) -> None:
        self.panel.show(self.renderer.to_html(self.items, self.navigator.selected_index))

    def _on_search_error(self, exc: Exception) -> None:
        logger.error("Hiding results after search error: %s", exc)
        self.hide_results()

    def _go(self, permalink: str) -> None:
        logger.debug("Navigating to %s", permalink)
        self.navigate(permalink)
