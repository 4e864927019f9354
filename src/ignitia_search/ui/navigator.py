"""Keyboard selection over the rendered result list."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence, Tuple, Union

from ..models import ResultItem


@dataclass(frozen=True, slots=True)
class NoSelection:
    """No result is active."""


@dataclass(frozen=True, slots=True)
class SelectedAt:
    """The result at `index` is active."""

    index: int


SelectionState = Union[NoSelection, SelectedAt]

NO_SELECTION = NoSelection()


class Action(str, Enum):
    MOVE_DOWN = "move_down"
    MOVE_UP = "move_up"
    CONFIRM = "confirm"
    DISMISS = "dismiss"


_KEYS = {
    "ArrowDown": Action.MOVE_DOWN,
    "ArrowUp": Action.MOVE_UP,
    "Enter": Action.CONFIRM,
    "Escape": Action.DISMISS,
}


def key_to_action(key: str) -> Optional[Action]:
    """Map a DOM key name to a navigation action, or None for other keys."""
    return _KEYS.get(key)


class SelectionNavigator:
    """State machine ``NoSelection | SelectedAt(i)`` over the current items.

    Movement is clamped to the list bounds and never wraps. Placeholder
    items are not selectable, so a "no results" list ignores movement.
    """

    def __init__(self) -> None:
        self._items: Tuple[ResultItem, ...] = ()
        self._state: SelectionState = NO_SELECTION

    @property
    def state(self) -> SelectionState:
        return self._state

    @property
    def items(self) -> Tuple[ResultItem, ...]:
        return self._items

    @property
    def selected_index(self) -> Optional[int]:
        return self._state.index if isinstance(self._state, SelectedAt) else None

    def reset(self, items: Sequence[ResultItem] = ()) -> None:
        """Replace the result list; selection always starts from NoSelection."""
        self._items = tuple(item for item in items if not item.is_placeholder)
        self._state = NO_SELECTION

    def move_down(self) -> SelectionState:
        if not self._items:
            return self._state
        if isinstance(self._state, SelectedAt):
            self._state = SelectedAt(min(self._state.index + 1, len(self._items) - 1))
        else:
            self._state = SelectedAt(0)
        return self._state

    def move_up(self) -> SelectionState:
        if not self._items:
            return self._state
        if isinstance(self._state, SelectedAt):
            self._state = SelectedAt(max(self._state.index - 1, 0))
        else:
            self._state = SelectedAt(0)
        return self._state

    def select(self, index: int) -> SelectionState:
        """Activate `index` directly (pointer input). Out-of-range indexes are ignored."""
        if 0 <= index < len(self._items):
            self._state = SelectedAt(index)
        return self._state

    def confirm(self) -> Optional[str]:
        """Permalink of the active item, or None when nothing is selected."""
        if isinstance(self._state, SelectedAt):
            return self._items[self._state.index].permalink
        return None

    def dismiss(self) -> SelectionState:
        self._state = NO_SELECTION
        return self._state

    def apply(self, action: Action) -> Optional[str]:
        """Apply `action`; returns the permalink to navigate to on a successful confirm."""
        if action is Action.MOVE_DOWN:
            self.move_down()
        elif action is Action.MOVE_UP:
            self.move_up()
        elif action is Action.CONFIRM:
            return self.confirm()
        elif action is Action.DISMISS:
            self.dismiss()
        return None
