from __future__ import annotations

import pathlib
from typing import Callable

import pytest

from light_analyzer.domain.models import Cadence, SensorEvent, SensorKind
from light_analyzer.storage.reading_logger import ReadingLogger


class FakeSubscription:
    def __init__(self, kind: SensorKind, cadence: Cadence, callback: Callable[[SensorEvent], None]) -> None:
        self.kind = kind
        self.cadence = cadence
        self.callback = callback
        self.active = True


class FakeSensorSource:
    """Sensor source whose events are pushed by the test."""

    def __init__(self, kinds: tuple[SensorKind, ...] = (SensorKind.LIGHT,)) -> None:
        self.kinds = set(kinds)
        self.subscriptions: list[FakeSubscription] = []
        self.unsubscribe_calls = 0

    def default_sensor(self, kind: SensorKind):
        return object() if kind in self.kinds else None

    def subscribe(self, kind, cadence, callback) -> FakeSubscription:
        sub = FakeSubscription(kind, cadence, callback)
        self.subscriptions.append(sub)
        return sub

    def unsubscribe(self, subscription: FakeSubscription) -> None:
        self.unsubscribe_calls += 1
        subscription.active = False
        self.subscriptions.remove(subscription)

    @property
    def subscribed(self) -> bool:
        return bool(self.subscriptions)

    def emit(self, lux: float, kind: SensorKind = SensorKind.LIGHT) -> None:
        for sub in list(self.subscriptions):
            sub.callback(SensorEvent(kind=kind, uptime_nanos=123_456_789, values=(lux,)))


class RecordingDisplay:
    def __init__(self) -> None:
        self.updates: list[tuple[int, float]] = []
        self.notices: list[str] = []

    def on_update(self, count: int, lux: float) -> None:
        self.updates.append((count, lux))

    def notify(self, message: str) -> None:
        self.notices.append(message)


class SteppingClock:
    def __init__(self, *millis: int) -> None:
        self._values = list(millis)

    def __call__(self) -> int:
        return self._values.pop(0)


@pytest.fixture()
def storage_root(tmp_path: pathlib.Path) -> pathlib.Path:
    root = tmp_path / "sdcard"
    root.mkdir()
    return root


@pytest.fixture()
def log_path(storage_root: pathlib.Path) -> pathlib.Path:
    return storage_root / "LightAnalyzer" / "Light.csv"


@pytest.fixture()
def reading_logger(storage_root: pathlib.Path):
    rl = ReadingLogger(storage_root, tz="UTC")
    yield rl
    rl.close()


@pytest.fixture()
def source() -> FakeSensorSource:
    return FakeSensorSource()


@pytest.fixture()
def display() -> RecordingDisplay:
    return RecordingDisplay()
