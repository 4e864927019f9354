import asyncio
import json
from pathlib import Path
from typing import Any, List, Optional

import pytest

from ignitia_search.config import SearchConfig
from ignitia_search.connectors.base_connector import IndexTransport
from ignitia_search.connectors.index_loader import FileTransport, IndexLoader
from ignitia_search.exceptions import ScoringInternalError
from ignitia_search.ui.controller import QueryOutcome
from ignitia_search.ui.navigator import NoSelection, SelectedAt
from ignitia_search.ui.surface import HeadlessInput, HeadlessPanel
from ignitia_search.ui.widget import SiteSearch

DOCS = [
    {
        "id": "a",
        "title": "Getting Started",
        "body": "Install the framework and run your first server.",
        "permalink": "/docs/start",
    },
    {
        "id": "b",
        "title": "Server Configuration",
        "body": "Ports, hosts and TLS for the server.",
        "permalink": "/docs/server",
    },
    {
        "id": "c",
        "title": "Deploying",
        "description": "Run a server in production",
        "body": "Containers and process managers.",
        "permalink": "/docs/deploy",
    },
]


class MemoryTransport(IndexTransport):
    def __init__(self, payload: Optional[str] = None, error: Optional[Exception] = None) -> None:
        self.payload = payload
        self.error = error

    @property
    def location(self) -> str:
        return "memory://index"

    async def fetch_text(self) -> str:
        if self.error is not None:
            raise self.error
        return self.payload or ""


class Page:
    """Headless stand-in for the page hosting the search box."""

    def __init__(self, docs: List[Any] = DOCS, error: Optional[Exception] = None) -> None:
        self.input = HeadlessInput()
        self.panel = HeadlessPanel()
        self.visited: List[str] = []
        transport = MemoryTransport(json.dumps(docs), error=error)
        self.search = SiteSearch(
            search_input=self.input,
            panel=self.panel,
            loader=IndexLoader(transport),
            navigate=self.visited.append,
            cfg=SearchConfig(debounce_ms=10),
        )

    async def type(self, value: str) -> None:
        self.input.value = value
        self.search.handle_input()
        await asyncio.sleep(0.05)


@pytest.mark.asyncio
async def test_typing_renders_ranked_highlighted_results() -> None:
    page = Page()
    assert await page.search.start()

    page.input.focus()
    await page.type("serv")

    rows = page.panel.result_elements()
    assert page.panel.visible
    assert [r["url"] for r in rows] == ["/docs/server", "/docs/deploy", "/docs/start"]
    start_row = rows[2]
    assert "run your first server" in start_row["snippet"]
    assert start_row["marks"] == ["serv"]
    assert all(not r["selected"] for r in rows)


@pytest.mark.asyncio
async def test_single_document_scenario() -> None:
    page = Page(docs=DOCS[:1])
    await page.search.start()
    await page.type("serv")

    (row,) = page.panel.result_elements()
    assert row["url"] == "/docs/start"
    assert row["snippet"] == "...nstall the framework and run your first server."
    assert "<mark>serv</mark>er" in page.panel.html


@pytest.mark.asyncio
async def test_no_results_placeholder() -> None:
    page = Page()
    await page.search.start()
    await page.type("kubernetes")

    (row,) = page.panel.result_elements()
    assert row["placeholder"]
    assert row["title"] == "No results found"
    assert page.panel.visible
    # Placeholder rows are not navigable
    assert page.search.handle_keydown("ArrowDown") is False


@pytest.mark.asyncio
async def test_empty_query_after_results_clears_and_hides() -> None:
    page = Page()
    await page.search.start()
    await page.type("serv")
    assert page.panel.visible

    await page.type("")
    assert not page.panel.visible
    assert page.panel.html == ""
    assert page.search.items == []


@pytest.mark.asyncio
async def test_short_query_hides_results() -> None:
    page = Page()
    await page.search.start()
    await page.type("serv")
    await page.type("s")
    assert not page.panel.visible


@pytest.mark.asyncio
async def test_keyboard_selection_and_confirm() -> None:
    page = Page()
    await page.search.start()
    await page.type("serv")

    assert page.search.handle_keydown("ArrowDown") is True
    assert page.panel.selected_index() == 0
    page.search.handle_keydown("ArrowDown")
    page.search.handle_keydown("ArrowDown")
    page.search.handle_keydown("ArrowDown")
    assert page.search.navigator.state == SelectedAt(2)
    assert page.panel.selected_index() == 2

    page.search.handle_keydown("ArrowUp")
    assert page.panel.selected_index() == 1
    assert sum(1 for r in page.panel.result_elements() if r["selected"]) == 1

    assert page.search.handle_keydown("Enter") is True
    assert page.visited == ["/docs/deploy"]


@pytest.mark.asyncio
async def test_enter_without_selection_does_not_navigate() -> None:
    page = Page()
    await page.search.start()
    await page.type("serv")
    page.search.handle_keydown("Enter")
    assert page.visited == []


@pytest.mark.asyncio
async def test_other_keys_are_ignored() -> None:
    page = Page()
    await page.search.start()
    await page.type("serv")
    assert page.search.handle_keydown("a") is False
    assert page.search.navigator.state == NoSelection()


@pytest.mark.asyncio
async def test_escape_hides_panel_and_blurs_input() -> None:
    page = Page()
    await page.search.start()
    page.input.focus()
    await page.type("serv")
    page.search.handle_keydown("ArrowDown")

    page.search.handle_keydown("Escape")
    assert not page.panel.visible
    assert not page.input.focused
    assert page.search.navigator.state == NoSelection()


@pytest.mark.asyncio
async def test_new_results_reset_selection() -> None:
    page = Page()
    await page.search.start()
    await page.type("serv")
    page.search.handle_keydown("ArrowDown")
    page.search.handle_keydown("ArrowDown")

    await page.type("deploy")
    assert page.search.navigator.state == NoSelection()
    assert page.panel.selected_index() is None


@pytest.mark.asyncio
async def test_click_confirms_item() -> None:
    page = Page()
    await page.search.start()
    await page.type("serv")
    page.search.handle_click(0)
    assert page.visited == ["/docs/server"]


@pytest.mark.asyncio
async def test_outside_click_dismisses() -> None:
    page = Page()
    await page.search.start()
    await page.type("serv")
    page.search.handle_outside_click()
    assert not page.panel.visible


@pytest.mark.asyncio
async def test_focus_reruns_existing_query() -> None:
    page = Page()
    await page.search.start()
    await page.type("serv")
    page.search.handle_outside_click()

    await page.search.handle_focus()
    assert page.panel.visible
    assert len(page.panel.result_elements()) == 3


@pytest.mark.asyncio
async def test_load_failure_leaves_search_inert() -> None:
    page = Page(error=OSError("offline"))
    assert await page.search.start() is False
    assert page.search.load_error is not None
    assert not page.search.ready

    await page.type("serv")
    await page.search.handle_focus()
    assert not page.panel.visible
    assert page.search.handle_keydown("ArrowDown") is False


@pytest.mark.asyncio
async def test_malformed_index_leaves_search_inert() -> None:
    page = Page(docs=[{"nonsense": True}])
    assert await page.search.start() is False
    await page.type("serv")
    assert not page.panel.visible


@pytest.mark.asyncio
async def test_typing_before_load_produces_nothing() -> None:
    page = Page()
    await page.type("serv")
    assert not page.panel.visible

    await page.search.start()
    await page.type("serve")
    assert page.panel.visible


@pytest.mark.asyncio
async def test_scoring_error_hides_panel_then_recovers(monkeypatch: pytest.MonkeyPatch) -> None:
    page = Page()
    await page.search.start()
    await page.type("serv")
    assert page.panel.visible

    original = page.search.controller.scorer

    def broken(index, query):
        raise ScoringInternalError("boom")

    monkeypatch.setattr(page.search.controller, "scorer", broken)
    await page.type("server")
    assert not page.panel.visible

    monkeypatch.setattr(page.search.controller, "scorer", original)
    await page.type("server")
    assert page.panel.visible


@pytest.mark.asyncio
async def test_escape_while_typing_keeps_panel_closed() -> None:
    page = Page()
    await page.search.start()
    page.input.focus()
    page.input.value = "server"
    page.search.handle_input()

    page.search.handle_keydown("Escape")
    await asyncio.sleep(0.05)

    assert not page.panel.visible
    assert not page.search.controller.pending


@pytest.mark.asyncio
async def test_outside_click_while_typing_keeps_panel_closed() -> None:
    page = Page()
    await page.search.start()
    page.input.value = "server"
    page.search.handle_input()

    page.search.handle_outside_click()
    await asyncio.sleep(0.05)

    assert not page.panel.visible


@pytest.mark.asyncio
async def test_typing_after_dismiss_searches_again() -> None:
    page = Page()
    await page.search.start()
    await page.type("serv")
    page.search.handle_keydown("Escape")

    await page.type("deploy")
    assert page.panel.visible


@pytest.mark.asyncio
async def test_click_out_of_range_does_not_navigate() -> None:
    page = Page()
    await page.search.start()
    await page.type("serv")
    page.search.handle_keydown("ArrowDown")

    page.search.handle_click(7)
    page.search.handle_click(-1)
    assert page.visited == []
    assert page.search.navigator.state == SelectedAt(0)


@pytest.mark.asyncio
async def test_undecodable_index_file_leaves_search_inert(tmp_path: Path) -> None:
    path = tmp_path / "search_index.en.js"
    path.write_bytes(b"\xff\xfe\x00garbage")
    panel = HeadlessPanel()
    search = SiteSearch(
        search_input=HeadlessInput(value="server"),
        panel=panel,
        loader=IndexLoader(FileTransport(path)),
        navigate=lambda url: None,
        cfg=SearchConfig(debounce_ms=10),
    )

    assert await search.start() is False
    assert search.load_error is not None
    assert await search.handle_focus() is QueryOutcome.UNAVAILABLE
    assert not panel.visible
