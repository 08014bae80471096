from __future__ import annotations

import threading
import time

import pytest

from light_analyzer.domain.models import Cadence, SensorEvent, SensorKind
from light_analyzer.sensors.simulated_lux_sensor import PatternConfig, SimulatedLuxSensor
from light_analyzer.services.sensor_source import PollingSensorSource


def _wait_for(predicate, timeout: float = 2.0) -> bool:
    deadline = time.time() + timeout
    while time.time() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


def test_default_sensor_by_kind() -> None:
    sensor = SimulatedLuxSensor()
    source = PollingSensorSource([sensor])

    assert source.default_sensor(SensorKind.LIGHT) is sensor
    assert source.default_sensor(SensorKind.PROXIMITY) is None
    assert PollingSensorSource().default_sensor(SensorKind.LIGHT) is None


def test_subscribe_delivers_light_events() -> None:
    source = PollingSensorSource([SimulatedLuxSensor(manual_lux=42.0)])
    events: list[SensorEvent] = []

    sub = source.subscribe(SensorKind.LIGHT, Cadence.GAME, events.append)
    try:
        assert _wait_for(lambda: len(events) >= 3)
    finally:
        source.unsubscribe(sub)

    assert all(e.kind is SensorKind.LIGHT for e in events)
    assert all(e.values == (42.0,) for e in events)


def test_no_callbacks_after_unsubscribe_returns() -> None:
    source = PollingSensorSource([SimulatedLuxSensor()])
    events: list[SensorEvent] = []

    sub = source.subscribe(SensorKind.LIGHT, Cadence.GAME, events.append)
    assert _wait_for(lambda: len(events) >= 1)
    source.unsubscribe(sub)
    seen = len(events)

    time.sleep(0.1)
    assert len(events) == seen
    assert not sub.active
    assert source.subscription_count() == 0


def test_callbacks_run_serially_on_one_thread() -> None:
    source = PollingSensorSource([SimulatedLuxSensor()])
    threads: set[int] = set()
    in_flight = threading.Semaphore(1)
    overlaps: list[bool] = []

    def callback(event: SensorEvent) -> None:
        overlaps.append(not in_flight.acquire(blocking=False))
        threads.add(threading.get_ident())
        time.sleep(0.005)
        in_flight.release()

    sub = source.subscribe(SensorKind.LIGHT, Cadence.FASTEST, callback)
    assert _wait_for(lambda: len(overlaps) >= 10)
    source.unsubscribe(sub)

    assert len(threads) == 1
    assert not any(overlaps)


def test_read_failures_do_not_end_delivery() -> None:
    sensor = SimulatedLuxSensor(manual_lux=5.0)
    sensor.disable()
    source = PollingSensorSource([sensor])
    events: list[SensorEvent] = []

    sub = source.subscribe(SensorKind.LIGHT, Cadence.GAME, events.append)
    time.sleep(0.1)
    assert events == []

    sensor.enable()
    try:
        assert _wait_for(lambda: len(events) >= 1)
    finally:
        source.unsubscribe(sub)


def test_callback_errors_do_not_end_delivery() -> None:
    source = PollingSensorSource([SimulatedLuxSensor()])
    calls: list[int] = []

    def callback(event: SensorEvent) -> None:
        calls.append(1)
        raise RuntimeError("boom")

    sub = source.subscribe(SensorKind.LIGHT, Cadence.GAME, callback)
    try:
        assert _wait_for(lambda: len(calls) >= 3)
    finally:
        source.unsubscribe(sub)


def test_unsubscribe_from_callback_does_not_deadlock() -> None:
    source = PollingSensorSource([SimulatedLuxSensor()])
    holder = {}
    done = threading.Event()

    def callback(event: SensorEvent) -> None:
        source.unsubscribe(holder["sub"])
        done.set()

    holder["sub"] = source.subscribe(SensorKind.LIGHT, Cadence.GAME, callback)
    assert done.wait(2.0)
    assert _wait_for(lambda: not holder["sub"].active)


def test_subscribe_unknown_kind() -> None:
    with pytest.raises(LookupError):
        PollingSensorSource().subscribe(SensorKind.LIGHT, Cadence.NORMAL, lambda e: None)


@pytest.mark.parametrize("kind", ["sine", "step", "ramp", "random"])
def test_pattern_values_are_non_negative(kind: str) -> None:
    sensor = SimulatedLuxSensor()
    sensor.set_pattern(PatternConfig(type=kind))
    assert sensor.read() >= 0.0
    assert sensor.status()["mode"] == "pattern"
