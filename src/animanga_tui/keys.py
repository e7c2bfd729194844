"""Keybindings for the list view."""

from enum import Enum
from typing import Optional


class Action(str, Enum):
    """Actions the list view reacts to."""

    SELECT_ANIME = "select_anime"
    SELECT_MANGA = "select_manga"
    CATEGORY_LEFT = "category_left"
    CATEGORY_RIGHT = "category_right"
    CURSOR_UP = "cursor_up"
    CURSOR_DOWN = "cursor_down"
    EDIT = "edit"
    ADD = "add"
    REMOVE = "remove"
    INCREMENT = "increment"
    DECREMENT = "decrement"
    QUIT = "quit"


# q quits; removal has its own key so it cannot be hit by accident
KEYMAP = {
    "a": Action.SELECT_ANIME,
    "m": Action.SELECT_MANGA,
    "left": Action.CATEGORY_LEFT,
    "right": Action.CATEGORY_RIGHT,
    "up": Action.CURSOR_UP,
    "down": Action.CURSOR_DOWN,
    "e": Action.EDIT,
    "n": Action.ADD,
    "d": Action.REMOVE,
    "delete": Action.REMOVE,
    "+": Action.INCREMENT,
    "-": Action.DECREMENT,
    "q": Action.QUIT,
}

HELP = [
    ("a/m", "anime/manga"),
    ("←/→", "status"),
    ("↑/↓", "select"),
    ("+/-", "progress"),
    ("e", "edit"),
    ("n", "new"),
    ("d", "delete"),
    ("q", "quit"),
]


def action_for(key: str) -> Optional[Action]:
    """Look up the action bound to a key name."""
    return KEYMAP.get(key)
