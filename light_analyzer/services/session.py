from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Callable, Optional

from ..core.errors import SensorUnavailable, WriteFailed
from ..core.timeutil import now_millis
from ..domain.interfaces import Display, SensorSource, Subscription
from ..domain.log_format import float32
from ..domain.models import Cadence, Reading, SensorEvent, SensorKind
from ..storage.reading_logger import ReadingLogger

logger = logging.getLogger(__name__)


class SamplingSession:
    """
    Light sampling lifecycle: Idle <-> Active.

    ``start``/``stop`` are serialized by the control lock. ``on_reading`` runs
    on the source's delivery thread and never takes that lock, because
    ``stop`` holds it while waiting for delivery to end.
    """

    def __init__(
        self,
        source: SensorSource,
        reading_logger: ReadingLogger,
        log_path: str | Path,
        display: Display,
        clock: Callable[[], int] = now_millis,
    ) -> None:
        self._source = source
        self._logger = reading_logger
        self._log_path = Path(log_path)
        self._display = display
        self._clock = clock

        self._control = threading.Lock()
        self._count_lock = threading.Lock()
        self._active = False
        self._reading_count = 0
        self._subscription: Optional[Subscription] = None

    @property
    def active(self) -> bool:
        return self._active

    @property
    def reading_count(self) -> int:
        with self._count_lock:
            return self._reading_count

    def start(self) -> None:
        with self._control:
            if self._active:
                return

            if self._source.default_sensor(SensorKind.LIGHT) is None:
                raise SensorUnavailable("Light sensor not available")

            if not self._logger.is_open:
                self._logger.open(self._log_path)

            with self._count_lock:
                self._reading_count = 0
            self._subscription = self._source.subscribe(SensorKind.LIGHT, Cadence.NORMAL, self.on_reading)
            self._active = True
            logger.info("Light sampling started (log=%s)", self._log_path)

    def stop(self) -> None:
        with self._control:
            if not self._active:
                return

            # Stay Active and keep the handle until the source confirms the
            # unregister; the next stop() retries it.
            if self._subscription is not None:
                try:
                    self._source.unsubscribe(self._subscription)
                except Exception:
                    logger.exception("Unable to stop light sensor sampling")
                    return

            self._subscription = None
            self._active = False
            logger.info("Light sampling stopped after %d readings", self.reading_count)

    def on_reading(self, event: SensorEvent) -> None:
        # Wall-clock capture time; the event's uptime stamp is not logged
        timestamp = self._clock()

        if event.kind is not SensorKind.LIGHT:
            return

        with self._count_lock:
            self._reading_count += 1
            count = self._reading_count

        reading = Reading(
            sequence_number=count,
            timestamp_millis=timestamp,
            lux=float32(event.values[0]),
        )

        try:
            self._logger.append(reading)
        except WriteFailed as e:
            logger.error("Reading %d not logged: %s", count, e)
            self._post(self._display.notify, f"Unable to log light reading: {e}")

        self._post(self._display.on_update, count, reading.lux)

    @staticmethod
    def _post(fn, *args) -> None:
        try:
            fn(*args)
        except Exception:
            logger.exception("Display update failed")
