"""Search box behaviour: debounced querying, rendering and keyboard selection."""

from .controller import QueryController, QueryOutcome
from .navigator import Action, NoSelection, SelectedAt, SelectionNavigator, key_to_action
from .renderer import ResultRenderer, build_snippet, highlight
from .surface import HeadlessInput, HeadlessPanel, ResultsPanel, SearchInput
from .widget import SiteSearch

__all__ = [
    "Action",
    "HeadlessInput",
    "HeadlessPanel",
    "NoSelection",
    "QueryController",
    "QueryOutcome",
    "ResultRenderer",
    "ResultsPanel",
    "SearchInput",
    "SelectedAt",
    "SelectionNavigator",
    "SiteSearch",
    "build_snippet",
    "highlight",
    "key_to_action",
]
