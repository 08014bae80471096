from __future__ import annotations

import logging
import queue
import threading
from collections import deque
from dataclasses import dataclass, field
from typing import Callable, Optional

from ..domain.interfaces import Display

logger = logging.getLogger(__name__)

AWAITING_TEXT = "\nAwaiting Light readings...\n"


@dataclass
class LiveState:
    reading_count: int = 0
    lux: Optional[float] = None
    text: str = ""
    sampling: bool = False
    last_notice: Optional[str] = None
    notices: deque = field(default_factory=lambda: deque(maxlen=20))


class LiveDisplay:
    """Display state read by the API; only the consumer thread mutates it."""

    def __init__(self, echo: Optional[Callable[[str], None]] = None) -> None:
        self.state = LiveState()
        self._echo = echo

    def on_update(self, count: int, lux: float) -> None:
        self.state.reading_count = count
        self.state.lux = lux
        self.state.text = (
            "\nLight--"
            f"\nNumber of readings: {count}"
            f"\nAmbient light level (lux): {lux}"
        )
        if self._echo:
            self._echo(self.state.text.strip())

    def notify(self, message: str) -> None:
        self.state.last_notice = message
        self.state.notices.append(message)
        if self._echo:
            self._echo(message)

    def set_sampling(self, sampling: bool) -> None:
        self.state.sampling = sampling
        if sampling:
            self.state.text = AWAITING_TEXT


_STOP = object()


class MarshalingDisplay:
    """
    Display that hands every call to a single consumer thread, in FIFO order.

    Producers never touch the wrapped display directly.
    """

    def __init__(self, target: Display, name: str = "display") -> None:
        self._target = target
        self._queue: queue.Queue = queue.Queue()
        self._thread: Optional[threading.Thread] = None
        self._name = name
        # Guards the hand-over between a pending stop and a restart
        self._lock = threading.Lock()
        self._stopping = False
        self._consuming = False

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        with self._lock:
            self._stopping = False
            if self._consuming:
                return
            self._consuming = True
            self._thread = threading.Thread(target=self._drain, name=self._name, daemon=True)
            self._thread.start()

    def stop(self, timeout: float = 5.0) -> None:
        if not self.running:
            return
        with self._lock:
            self._stopping = True
        self._queue.put(_STOP)
        self._thread.join(timeout)
        if self._thread.is_alive():
            # Still draining; the handle stays until the consumer exits
            logger.warning("Display consumer still busy after %.1fs", timeout)
            return
        self._thread = None

    def post(self, fn: Callable[..., None], *args) -> None:
        self._queue.put((fn, args))

    def on_update(self, count: int, lux: float) -> None:
        self.post(self._target.on_update, count, lux)

    def notify(self, message: str) -> None:
        self.post(self._target.notify, message)

    def flush(self) -> None:
        """Block until everything posted so far has been handled."""
        if not self.running:
            return
        self._queue.join()

    def _drain(self) -> None:
        while True:
            item = self._queue.get()
            try:
                if item is _STOP:
                    with self._lock:
                        if self._stopping:
                            self._consuming = False
                            return
                    continue
                fn, args = item
                try:
                    fn(*args)
                except Exception:
                    logger.exception("Display handler %s failed", getattr(fn, "__name__", fn))
            finally:
                self._queue.task_done()
