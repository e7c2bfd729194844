"""Main loop: dispatch events to navigation and the mutation engine, then redraw."""

import logging
from typing import Optional

from pydantic import ValidationError
from rich.console import Console
from rich.live import Live

from .constants import DEFAULT_NOTICE_TICKS, ListKind
from .engine import MutationEngine
from .events import Event, EventSource, FailureEvent, InputEvent, TickEvent
from .exceptions import InputError, NotFound, PersistError
from .form import EditForm, FormOutcome
from .keys import Action, action_for
from .navigation import NavigationState
from .store import Store
from .terminal import raw_mode
from .view import build_frame, render_frame

logger = logging.getLogger(__name__)


def _validation_message(error: ValidationError) -> str:
    first = error.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ())) or "entry"
    return f"{location}: {first['msg']}"


class WatchlistApp:
    """Owns the navigation state and applies events to it.

    dispatch() is the whole state machine and needs no terminal; run()
    wires it to an event source and a rich Live display.
    """

    def __init__(
        self,
        store: Store,
        console: Optional[Console] = None,
        notice_ticks: int = DEFAULT_NOTICE_TICKS,
    ):
        self.store = store
        self.engine = MutationEngine(store)
        self.nav = NavigationState.initial(store)
        self.console = console or Console()
        self.notice_ticks = notice_ticks
        self.form: Optional[EditForm] = None
        self.notice: Optional[str] = None
        self._notice_age = 0

    def notify(self, message: str) -> None:
        """Show a message below the table for a few ticks."""
        self.notice = message
        self._notice_age = 0

    def dispatch(self, event: Event) -> bool:
        """Apply one event. Returns False when the application should quit."""
        if isinstance(event, FailureEvent):
            raise InputError(f"terminal input failed: {event.error}", event.error) from event.error
        if isinstance(event, TickEvent):
            self._tick()
            return True
        if isinstance(event, InputEvent):
            if self.form is not None:
                self._handle_form_key(event.key)
                return True
            return self._handle_key(event.key)
        return True

    def _tick(self) -> None:
        if self.notice is None:
            return
        self._notice_age += 1
        if self._notice_age >= self.notice_ticks:
            self.notice = None

    def _handle_key(self, key: str) -> bool:
        action = action_for(key)
        if action is None:
            return True
        logger.debug(f"Key {key!r} -> {action.value}")

        if action is Action.QUIT:
            return False
        if action is Action.SELECT_ANIME:
            self.nav.select_list(ListKind.ANIME)
        elif action is Action.SELECT_MANGA:
            self.nav.select_list(ListKind.MANGA)
        elif action is Action.CATEGORY_LEFT:
            self.nav.move_category(self.store, -1)
        elif action is Action.CATEGORY_RIGHT:
            self.nav.move_category(self.store, 1)
        elif action is Action.CURSOR_UP:
            self.nav.move_cursor(self.store, -1)
        elif action is Action.CURSOR_DOWN:
            self.nav.move_cursor(self.store, 1)
        elif action is Action.EDIT:
            self._open_edit_form()
        elif action is Action.ADD:
            self.form = EditForm.blank()
        else:
            self._mutate(action)
        return True

    def _open_edit_form(self) -> None:
        try:
            _, entry = self.engine.selected(self.nav)
        except NotFound as e:
            self.notify(str(e))
            return
        self.form = EditForm.for_entry(entry)

    def _mutate(self, action: Action) -> None:
        operations = {
            Action.REMOVE: self.engine.remove,
            Action.INCREMENT: self.engine.increment,
            Action.DECREMENT: self.engine.decrement,
        }
        try:
            entry = operations[action](self.nav)
        except NotFound as e:
            self.notify(str(e))
        except PersistError as e:
            self.notify(str(e))
        else:
            if action is Action.REMOVE:
                self.notify(f"Removed {entry.name}")

    def _handle_form_key(self, key: str) -> None:
        form = self.form
        outcome = form.handle_key(key)
        if outcome is FormOutcome.CANCEL:
            self.form = None
        elif outcome is FormOutcome.SUBMIT:
            self._submit_form(form)

    def _submit_form(self, form: EditForm) -> None:
        try:
            if form.creating:
                entry = self.engine.add(self.nav, form.to_entry())
                self.notify(f"Added {entry.name}")
            else:
                entry = self.engine.edit(self.nav, form.to_update())
                self.notify(f"Saved {entry.name}")
        except ValidationError as e:
            form.error = _validation_message(e)
            return
        except NotFound as e:
            self.notify(str(e))
        except PersistError as e:
            self.notify(str(e))
        self.form = None

    def frame(self):
        return build_frame(self.nav, self.store, self.form, self.notice)

    def render(self):
        return render_frame(self.frame())

    def run(self, source: EventSource) -> None:
        """Run the interactive loop until quit.

        The terminal is restored on every exit path, including errors
        raised from dispatch.
        """
        with raw_mode():
            with Live(self.render(), console=self.console, auto_refresh=False, screen=True) as live:
                source.start()
                logger.info("Event loop started")
                for event in source:
                    if not self.dispatch(event):
                        break
                    live.update(self.render(), refresh=True)
        logger.info("Event loop stopped")
