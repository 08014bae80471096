from __future__ import annotations

import logging
import threading
import time
from typing import Iterable, Optional

from ..domain.interfaces import SensorCallback
from ..domain.models import Cadence, SensorEvent, SensorKind
from ..sensors.base import Sensor

logger = logging.getLogger(__name__)


class PollingSubscription:
    """Handle for one registration; owns the thread that delivers its events."""

    def __init__(self, sensor: Sensor, cadence: Cadence, callback: SensorCallback) -> None:
        self.kind = sensor.kind
        self.cadence = cadence
        self._sensor = sensor
        self._callback = callback
        self._stop = threading.Event()
        self._thread = threading.Thread(
            target=self._run,
            name=f"sensor-{sensor.sensor_id}",
            daemon=True,
        )

    @property
    def active(self) -> bool:
        return self._thread.is_alive() and not self._stop.is_set()

    def start(self) -> None:
        self._thread.start()

    def cancel(self) -> None:
        self._stop.set()
        if self._thread.ident is not None and threading.current_thread() is not self._thread:
            self._thread.join()

    def _run(self) -> None:
        logger.info(
            "Delivery started (sensor=%s cadence=%s)", self._sensor.sensor_id, self.cadence.name
        )
        while not self._stop.is_set():
            try:
                value = self._sensor.read()
            except Exception as e:
                logger.warning("Sensor read FAILED (sensor=%s): %s", self._sensor.sensor_id, e)
            else:
                # A cancel may have landed while the read was blocking
                if self._stop.is_set():
                    break
                event = SensorEvent(
                    kind=self.kind,
                    uptime_nanos=time.monotonic_ns(),
                    values=(float(value),),
                )
                try:
                    self._callback(event)
                except Exception:
                    logger.exception("Sensor callback raised (sensor=%s)", self._sensor.sensor_id)

            self._stop.wait(self.cadence.interval_s)

        logger.info("Delivery stopped (sensor=%s)", self._sensor.sensor_id)


class PollingSensorSource:
    """Sensor source that turns polled ``Sensor`` objects into event delivery."""

    def __init__(self, sensors: Iterable[Sensor] = ()) -> None:
        self._sensors: dict[SensorKind, Sensor] = {}
        for sensor in sensors:
            self._sensors.setdefault(sensor.kind, sensor)
        self._lock = threading.Lock()
        self._subscriptions: list[PollingSubscription] = []

    def default_sensor(self, kind: SensorKind) -> Optional[Sensor]:
        return self._sensors.get(kind)

    def subscribe(self, kind: SensorKind, cadence: Cadence, callback: SensorCallback) -> PollingSubscription:
        sensor = self._sensors.get(kind)
        if sensor is None:
            raise LookupError(f"No sensor of kind {kind.value}")
        sub = PollingSubscription(sensor, cadence, callback)
        with self._lock:
            self._subscriptions.append(sub)
        sub.start()
        return sub

    def unsubscribe(self, subscription: PollingSubscription) -> None:
        with self._lock:
            if subscription in self._subscriptions:
                self._subscriptions.remove(subscription)
        subscription.cancel()

    def subscription_count(self) -> int:
        with self._lock:
            return len(self._subscriptions)

    def close(self) -> None:
        with self._lock:
            subs, self._subscriptions = self._subscriptions, []
        for sub in subs:
            sub.cancel()
        for sensor in self._sensors.values():
            try:
                sensor.close()
            except Exception:
                logger.warning("Sensor close failed (sensor=%s)", sensor.sensor_id, exc_info=True)
