from __future__ import annotations

import queue
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional, Union


@dataclass(frozen=True)
class KeyPress:
    key: str


@dataclass(frozen=True)
class Tick:
    pass


Event = Union[KeyPress, Tick]


class EventSource:
    """
    Merge key presses and a periodic tick into one FIFO stream.

    A daemon thread waits for input with ``poll(timeout)``, where the timeout
    is whatever is left of the current tick period, and pushes ``KeyPress``
    events as keys arrive. Once a full period has elapsed it pushes a single
    ``Tick``. All timing state lives in the thread.

    A failure in the thread is handed to the consumer: ``next_event`` raises
    it in the caller's thread.
    """

    def __init__(
        self,
        poll: Callable[[float], bool],
        read_key: Callable[[], str],
        tick_rate: float = 0.2,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._poll = poll
        self._read_key = read_key
        self.tick_rate = tick_rate
        self._clock = clock
        self._queue: queue.Queue = queue.Queue()
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def __enter__(self) -> "EventSource":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.stop()

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self):
        if self._thread is not None:
            return
        self._stop.clear()
        self._thread = threading.Thread(
            target=self._run, name="petcli-events", daemon=True
        )
        self._thread.start()

    def stop(self, timeout: Optional[float] = None):
        """Ask the producer to finish and wait for it.

        The thread notices the request after its current ``poll`` returns,
        so the wait is bounded by one tick period.
        """
        self._stop.set()
        if self._thread is not None:
            if self._thread is not threading.current_thread():
                self._thread.join(timeout if timeout is not None else self.tick_rate * 5)
            self._thread = None

    def next_event(self, timeout: Optional[float] = None) -> Event:
        """Block until the next event arrives (FIFO)."""
        item = self._queue.get(timeout=timeout)
        if isinstance(item, BaseException):
            raise item
        return item

    def _run(self):
        last_tick = self._clock()
        try:
            while not self._stop.is_set():
                elapsed = self._clock() - last_tick
                timeout = max(self.tick_rate - elapsed, 0.0)
                if self._poll(timeout) and not self._stop.is_set():
                    self._queue.put(KeyPress(self._read_key()))
                if self._clock() - last_tick >= self.tick_rate:
                    self._queue.put(Tick())
                    last_tick = self._clock()
        except Exception as e:
            self._queue.put(e)
