"""Tests for the mutation engine."""

import pytest
from animanga_tui.constants import Category, ListKind
from animanga_tui.engine import MutationEngine
from animanga_tui.exceptions import NotFound, PersistError
from animanga_tui.models import EntryUpdate, WatchStatus
from animanga_tui.navigation import NavigationState
from animanga_tui.store import Store

from conftest import make_entry


def names(store, kind=ListKind.ANIME):
    return [e.name for e in store.entries(kind)]


def test_remove_first_entry(store, db_path):
    """Test removing A at selection 0 leaves [B] selected at 0."""
    nav = NavigationState.initial(store)
    engine = MutationEngine(store)

    removed = engine.remove(nav)

    assert removed.name == "A"
    assert names(store) == ["B"]
    assert nav.selection == 0
    assert names(Store.load(db_path)) == ["B"]


def test_remove_last_position_clamps(store):
    """Test removing the last entry of the view moves the cursor up."""
    nav = NavigationState.initial(store)
    nav.move_cursor(store, 1)

    MutationEngine(store).remove(nav)

    assert names(store) == ["A"]
    assert nav.selection == 0


def test_remove_sole_entry_clears_selection(store):
    """Test removing the only entry in the filtered view sets selection to None."""
    nav = NavigationState.initial(store)
    nav.move_category(store, 1)  # Watching: [B]

    MutationEngine(store).remove(nav)

    assert names(store) == ["A"]
    assert nav.selection is None


def test_remove_maps_filtered_index_to_store_index(db_path):
    """Test the entry removed is the one shown, not the one at the raw index."""
    from animanga_tui.models import StoreFile

    store = Store(db_path, StoreFile(anime=[
        make_entry("W1"), make_entry("C1", WatchStatus.COMPLETED, completed=12),
        make_entry("W2"), make_entry("W3"),
    ]))
    nav = NavigationState.initial(store)
    nav.move_category(store, 1)  # Watching: W1, W2, W3
    nav.move_cursor(store, 1)

    removed = MutationEngine(store).remove(nav)

    assert removed.name == "W2"
    assert names(store) == ["W1", "C1", "W3"]
    assert nav.selection == 1


def test_increment_in_filtered_view(store, db_path):
    """Test incrementing B under the Watching filter leaves A alone."""
    nav = NavigationState.initial(store)
    nav.move_category(store, 1)
    before_a = store.entries(ListKind.ANIME)[0]

    MutationEngine(store).increment(nav)

    assert store.entries(ListKind.ANIME)[1].completed_units == 6
    assert store.entries(ListKind.ANIME)[0] == before_a
    assert Store.load(db_path).entries(ListKind.ANIME)[1].completed_units == 6


def test_increment_clamps_at_total(store, db_path):
    """Test progress stops at total_units and nothing is written."""
    nav = NavigationState.initial(store)  # A: 12/12

    entry = MutationEngine(store).increment(nav)

    assert entry.completed_units == 12
    assert not db_path.exists()


def test_increment_unknown_total(store):
    """Test progress is unbounded when the total is unknown."""
    nav = NavigationState.initial(store)
    nav.select_list(ListKind.MANGA)

    entry = MutationEngine(store).increment(nav)

    assert entry.completed_units == 1


def test_decrement_floors_at_zero(store):
    """Test decrement never goes below zero."""
    nav = NavigationState.initial(store)
    nav.select_list(ListKind.MANGA)
    engine = MutationEngine(store)

    engine.decrement(nav)
    assert store.entries(ListKind.MANGA)[0].completed_units == 0

    nav.select_list(ListKind.ANIME)
    engine.decrement(nav)
    assert store.entries(ListKind.ANIME)[0].completed_units == 11


def test_edit_with_empty_selection_raises_not_found(store, db_path):
    """Test editing an empty Watching view fails and changes nothing."""
    nav = NavigationState.initial(store)
    nav.select_list(ListKind.MANGA)
    nav.move_category(store, 1)  # no manga is being watched
    before = store.data.model_copy(deep=True)

    with pytest.raises(NotFound):
        MutationEngine(store).edit(nav, EntryUpdate(name="X"))

    assert store.data == before
    assert not db_path.exists()


def test_selected_maps_filtered_cursor_to_store_entry(store):
    """Test the selection in a filtered view resolves to its store index."""
    nav = NavigationState.initial(store)
    nav.move_category(store, 1)  # Watching shows only B
    engine = MutationEngine(store)

    index, entry = engine.selected(nav)

    assert index == 1
    assert entry.name == "B"


def test_selected_on_empty_view_raises_not_found(store):
    """Test an empty filtered view has no selected entry."""
    nav = NavigationState.initial(store)
    nav.select_list(ListKind.MANGA)
    nav.move_category(store, 1)

    with pytest.raises(NotFound):
        MutationEngine(store).selected(nav)


@pytest.mark.parametrize("operation", ["remove", "increment", "decrement"])
def test_operations_on_empty_list_raise_not_found(empty_store, operation):
    """Test every operation reports an empty selection."""
    nav = NavigationState.initial(empty_store)

    with pytest.raises(NotFound):
        getattr(MutationEngine(empty_store), operation)(nav)


def test_edit_replaces_fields(store, db_path):
    """Test edit changes the selected entry and persists it."""
    nav = NavigationState.initial(store)
    nav.move_cursor(store, 1)

    MutationEngine(store).edit(nav, EntryUpdate(name="Bee", score=9))

    edited = Store.load(db_path).entries(ListKind.ANIME)[1]
    assert edited.name == "Bee"
    assert edited.score == 9
    assert edited.completed_units == 5


def test_edit_invalid_update_leaves_store_untouched(store):
    """Test a rejected edit does not change the entry."""
    nav = NavigationState.initial(store)
    before = store.entries(ListKind.ANIME)[0]

    with pytest.raises(ValueError):
        MutationEngine(store).edit(nav, EntryUpdate(completed_units=99))

    assert store.entries(ListKind.ANIME)[0] == before


def test_edit_status_out_of_filter_reclamps(store):
    """Test editing the status away from the active filter repairs the selection."""
    nav = NavigationState.initial(store)
    nav.move_category(store, 1)  # Watching: [B]

    MutationEngine(store).edit(nav, EntryUpdate(status=WatchStatus.COMPLETED))

    assert store.filtered_len(ListKind.ANIME, Category.WATCHING) == 0
    assert nav.selection is None


def test_add_selects_new_entry(store):
    """Test a visible new entry becomes the selection."""
    nav = NavigationState.initial(store)

    MutationEngine(store).add(nav, make_entry("C"))

    assert names(store) == ["A", "B", "C"]
    assert nav.selection == 2


def test_add_hidden_entry_keeps_selection(store):
    """Test an entry outside the filter does not move the cursor."""
    nav = NavigationState.initial(store)
    nav.move_category(store, 2)  # Completed: [A]

    MutationEngine(store).add(nav, make_entry("D", WatchStatus.DROPPED))

    assert nav.selection == 0
    assert names(store) == ["A", "B", "D"]


def test_persist_failure_keeps_memory_change(store, tmp_path):
    """Test a failed flush raises PersistError after the change is applied."""
    blocker = tmp_path / "file"
    blocker.write_text("x")
    store.path = blocker / "db.json"
    nav = NavigationState.initial(store)

    with pytest.raises(PersistError):
        MutationEngine(store).decrement(nav)

    assert store.entries(ListKind.ANIME)[0].completed_units == 11
