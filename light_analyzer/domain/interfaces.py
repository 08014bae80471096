from __future__ import annotations
from typing import Callable, Optional, Protocol, runtime_checkable

from .models import Cadence, SensorEvent, SensorKind


SensorCallback = Callable[[SensorEvent], None]


@runtime_checkable
class Subscription(Protocol):
    kind: SensorKind

    @property
    def active(self) -> bool:
        ...


@runtime_checkable
class SensorSource(Protocol):
    def default_sensor(self, kind: SensorKind) -> Optional[object]:
        ...

    def subscribe(self, kind: SensorKind, cadence: Cadence, callback: SensorCallback) -> Subscription:
        ...

    def unsubscribe(self, subscription: Subscription) -> None:
        """Return only once no further callbacks will be made."""
        ...


@runtime_checkable
class Display(Protocol):
    def on_update(self, count: int, lux: float) -> None:
        ...

    def notify(self, message: str) -> None:
        ...
