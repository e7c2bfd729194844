"""Navigation state: active list, category filter and per-list cursor."""

import logging
from dataclasses import dataclass, field
from typing import Optional

from .constants import CATEGORY_ORDER, LIST_ORDER, Category, ListKind
from .store import Store

logger = logging.getLogger(__name__)


@dataclass
class NavigationState:
    """Which list and category are shown, and where the cursor is in each list.

    Selections index into the *filtered* view of their list. A selection is
    None only when that filtered view is empty.
    """

    active_list: ListKind = ListKind.ANIME
    active_category: Category = Category.ALL
    selected: dict[ListKind, Optional[int]] = field(
        default_factory=lambda: {kind: None for kind in LIST_ORDER}
    )

    @classmethod
    def initial(cls, store: Store) -> "NavigationState":
        """Anime list, all categories, first entry of each list selected."""
        state = cls()
        state.clamp_all(store)
        return state

    @property
    def selection(self) -> Optional[int]:
        """Selection in the active list."""
        return self.selected[self.active_list]

    def select_list(self, kind: ListKind) -> None:
        """Switch lists. Category and both selections stay as they are."""
        self.active_list = kind
        logger.debug(f"Active list: {kind.value}")

    def move_category(self, store: Store, step: int) -> None:
        """Move through CATEGORY_ORDER by step, wrapping at both ends."""
        position = CATEGORY_ORDER.index(self.active_category)
        self.active_category = CATEGORY_ORDER[(position + step) % len(CATEGORY_ORDER)]
        # The filter applies to both lists
        self.clamp_all(store)
        logger.debug(f"Active category: {self.active_category.value}")

    def move_cursor(self, store: Store, step: int) -> None:
        """Move the active list's cursor by step, wrapping around the filtered view."""
        length = store.filtered_len(self.active_list, self.active_category)
        current = self.selection
        if length == 0 or current is None:
            return
        self.selected[self.active_list] = (current + step) % length

    def clamp(self, store: Store, kind: ListKind) -> None:
        """Bring one list's selection back inside its filtered view."""
        length = store.filtered_len(kind, self.active_category)
        current = self.selected[kind]
        if length == 0:
            self.selected[kind] = None
        elif current is None:
            self.selected[kind] = 0
        else:
            self.selected[kind] = min(max(current, 0), length - 1)

    def clamp_all(self, store: Store) -> None:
        for kind in LIST_ORDER:
            self.clamp(store, kind)
