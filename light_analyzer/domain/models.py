from __future__ import annotations
from dataclasses import dataclass
from enum import Enum


class SensorKind(str, Enum):
    LIGHT = "light"
    PROXIMITY = "proximity"
    ACCELEROMETER = "accelerometer"


class Cadence(Enum):
    """Delivery cadences, as the delay between two readings in seconds."""

    NORMAL = 0.2
    UI = 0.06
    GAME = 0.02
    FASTEST = 0.0

    @property
    def interval_s(self) -> float:
        return self.value


@dataclass(frozen=True)
class SensorEvent:
    kind: SensorKind
    uptime_nanos: int  # device-relative, not used for logging
    values: tuple[float, ...]


@dataclass(frozen=True)
class Reading:
    sequence_number: int
    timestamp_millis: int
    lux: float


@dataclass(frozen=True)
class LogLine:
    sequence_number: int
    timestamp_millis: int
    human_time: str
    lux: float
