"""Mutation engine: create, edit, remove and progress changes at the selection."""

import logging

from .exceptions import NotFound
from .models import Entry, EntryUpdate
from .navigation import NavigationState
from .store import Store

logger = logging.getLogger(__name__)


class MutationEngine:
    """Apply entry changes at the active selection and persist the store.

    Every method resolves the filtered selection to the underlying store
    index, mutates, repairs the selection, then flushes the whole store.
    A PersistError from the flush propagates after the in-memory change
    has been made.
    """

    def __init__(self, store: Store):
        """Initialize mutation engine with the store it owns."""
        self.store = store

    def selected(self, nav: NavigationState) -> tuple[int, Entry]:
        """Store index and entry under the cursor of the active list.

        Raises:
            NotFound: the active list shows no entries under the category.
        """
        selection = nav.selection
        view = self.store.filtered(nav.active_list, nav.active_category)
        if selection is None or not view:
            raise NotFound(f"no {nav.active_list.value} entry selected")
        return view[selection]

    def _target(self, nav: NavigationState) -> int:
        store_index, _ = self.selected(nav)
        return store_index

    def _commit(self, nav: NavigationState) -> None:
        nav.clamp(self.store, nav.active_list)
        self.store.flush()

    def edit(self, nav: NavigationState, update: EntryUpdate) -> Entry:
        """Replace fields of the selected entry.

        The merged entry is validated before anything changes, so a bad
        update raises ValidationError and leaves the store untouched.
        """
        entries = self.store.entries(nav.active_list)
        index = self._target(nav)
        updated = update.apply_to(entries[index])
        entries[index] = updated
        logger.info(f"Edited {nav.active_list.value} entry: {updated.name}")
        # A status change can take the entry out of the current filter
        self._commit(nav)
        return updated

    def remove(self, nav: NavigationState) -> Entry:
        """Delete the selected entry and clamp the selection."""
        entries = self.store.entries(nav.active_list)
        removed = entries.pop(self._target(nav))
        logger.info(f"Removed {nav.active_list.value} entry: {removed.name}")
        self._commit(nav)
        return removed

    def increment(self, nav: NavigationState) -> Entry:
        """Add one unit of progress, stopping at total_units when it is known."""
        entries = self.store.entries(nav.active_list)
        index = self._target(nav)
        entry = entries[index]
        completed = entry.completed_units + 1
        if entry.total_units:
            completed = min(completed, entry.total_units)
        return self._set_progress(nav, index, completed)

    def decrement(self, nav: NavigationState) -> Entry:
        """Remove one unit of progress, never going below zero."""
        entries = self.store.entries(nav.active_list)
        index = self._target(nav)
        completed = max(entries[index].completed_units - 1, 0)
        return self._set_progress(nav, index, completed)

    def _set_progress(self, nav: NavigationState, index: int, completed: int) -> Entry:
        entries = self.store.entries(nav.active_list)
        entry = entries[index]
        if completed == entry.completed_units:
            logger.debug(f"Progress unchanged for {entry.name}")
            return entry
        entries[index] = entry.model_copy(update={"completed_units": completed})
        logger.info(f"{entry.name}: {entry.completed_units} -> {completed}")
        self._commit(nav)
        return entries[index]

    def add(self, nav: NavigationState, entry: Entry) -> Entry:
        """Append a new entry to the active list and select it when visible."""
        entries = self.store.entries(nav.active_list)
        entries.append(entry)
        logger.info(f"Added {nav.active_list.value} entry: {entry.name}")
        if entry.status.matches(nav.active_category):
            nav.selected[nav.active_list] = (
                self.store.filtered_len(nav.active_list, nav.active_category) - 1
            )
        self._commit(nav)
        return entry
