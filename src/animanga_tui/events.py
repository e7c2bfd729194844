"""Single ordered stream of key presses and timer ticks."""

import logging
import queue
import threading
import time
from dataclasses import dataclass
from typing import Callable, Iterator, Protocol, Union

from .constants import DEFAULT_TICK_INTERVAL_MS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InputEvent:
    """A key press, by key name."""
    key: str


@dataclass(frozen=True)
class TickEvent:
    """Periodic timer tick."""


@dataclass(frozen=True)
class FailureEvent:
    """The producer stopped because terminal input failed."""
    error: BaseException


Event = Union[InputEvent, TickEvent, FailureEvent]


class KeyReader(Protocol):
    def poll(self, timeout: float) -> bool: ...

    def read(self) -> str: ...


class EventSource:
    """Merge key presses and ticks from a producer thread into one FIFO queue.

    The producer waits for input at most until the next tick is due. A key
    press is queued immediately and does not reset the tick clock; a tick
    is queued once the interval has elapsed. Nothing is ever dropped: with
    a bounded queue the producer blocks until the consumer catches up.
    """

    def __init__(
        self,
        reader: KeyReader,
        tick_interval: float = DEFAULT_TICK_INTERVAL_MS / 1000.0,
        maxsize: int = 0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.reader = reader
        self.tick_interval = tick_interval
        self.clock = clock
        self.queue: "queue.Queue[Event]" = queue.Queue(maxsize=maxsize)
        self._thread: threading.Thread | None = None

    def start(self) -> None:
        """Start the producer thread. It is abandoned, not joined, at exit."""
        if self._thread is not None:
            raise RuntimeError("event source already started")
        self._thread = threading.Thread(target=self._produce, name="event-source", daemon=True)
        self._thread.start()

    def _produce(self) -> None:
        try:
            self._run()
        except Exception as e:
            # Any failure ends the stream
            logger.error(f"Terminal input failed: {e}")
            self.queue.put(FailureEvent(e))

    def _run(self) -> None:
        last_tick = self.clock()
        while True:
            remaining = max(self.tick_interval - (self.clock() - last_tick), 0.0)
            if self.reader.poll(remaining):
                key = self.reader.read()
                if key:
                    self.queue.put(InputEvent(key))

            if self.clock() - last_tick >= self.tick_interval:
                self.queue.put(TickEvent())
                last_tick = self.clock()

    def get(self) -> Event:
        """Block until the next event arrives."""
        return self.queue.get()

    def __iter__(self) -> Iterator[Event]:
        while True:
            yield self.get()
