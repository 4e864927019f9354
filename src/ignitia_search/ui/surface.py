"""UI handles the search core is given by the surrounding page.

`HeadlessInput` and `HeadlessPanel` stand in for the page's input element and
results container when no browser is involved (MCP server, tests, scripts).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol

from bs4 import BeautifulSoup  # type: ignore[import-untyped]


class SearchInput(Protocol):
    """Input element the query is read from."""

    @property
    def value(self) -> str: ...

    def blur(self) -> None: ...


class ResultsPanel(Protocol):
    """Container the rendered results are written into."""

    @property
    def visible(self) -> bool: ...

    def show(self, markup: str) -> None: ...

    def hide(self) -> None: ...


@dataclass
class HeadlessInput:
    """In-memory input element."""

    value: str = ""
    focused: bool = False

    def focus(self) -> None:
        self.focused = True

    def blur(self) -> None:
        self.focused = False


class HeadlessPanel:
    """In-memory results container; mirrors the ``active`` class of the page panel."""

    def __init__(self) -> None:
        self.html = ""
        self.visible = False

    def show(self, markup: str) -> None:
        self.html = markup
        self.visible = True

    def hide(self) -> None:
        self.html = ""
        self.visible = False

    def _soup(self) -> BeautifulSoup:
        return BeautifulSoup(self.html, "html.parser")

    def result_elements(self) -> List[Dict[str, Any]]:
        """Rendered ``.search-result`` rows as plain dicts, in display order."""
        rows: List[Dict[str, Any]] = []
        for el in self._soup().select(".search-result"):
            title = el.select_one(".result-title")
            snippet = el.select_one(".result-snippet")
            index = el.get("data-index")
            rows.append(
                {
                    "index": int(index) if index is not None else None,
                    "url": el.get("data-url"),
                    "title": title.get_text() if title else el.get_text(),
                    "snippet": snippet.get_text() if snippet else "",
                    "marks": [m.get_text() for m in el.find_all("mark")],
                    "selected": "selected" in (el.get("class") or []),
                    "placeholder": "no-results" in (el.get("class") or []),
                }
            )
        return rows

    def selected_index(self) -> Optional[int]:
        for row in self.result_elements():
            if row["selected"]:
                return row["index"]
        return None
