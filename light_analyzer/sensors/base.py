from __future__ import annotations

from abc import ABC, abstractmethod

from ..domain.models import SensorKind


class Sensor(ABC):
    """Domain-facing sensor abstraction."""

    @property
    @abstractmethod
    def sensor_id(self) -> str:
        ...

    @property
    def kind(self) -> SensorKind:
        return SensorKind.LIGHT

    @property
    def unit(self) -> str:
        return ""

    @abstractmethod
    def read(self) -> float:
        """Return a scalar reading (e.g., lux). Raise on failure."""
        ...

    def close(self) -> None:
        """Release any underlying device handle."""
