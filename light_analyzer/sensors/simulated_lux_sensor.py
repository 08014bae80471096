from __future__ import annotations

import math
import random
import time
from dataclasses import dataclass
from threading import Lock

from .base import Sensor


@dataclass
class PatternConfig:
    type: str = "sine"     # sine|step|ramp|random
    baseline: float = 300
    amplitude: float = 200
    period_s: float = 600
    noise: float = 5

    step_low: float = 50
    step_high: float = 800
    step_period_s: float = 120

    ramp_min: float = 0
    ramp_max: float = 1000
    ramp_period_s: float = 600

    def value_at(self, t: float) -> float:
        if self.type == "sine":
            phase = (t % self.period_s) / self.period_s * 2.0 * math.pi
            return self.baseline + self.amplitude * math.sin(phase)
        if self.type == "step":
            in_high_half = (t % self.step_period_s) < self.step_period_s / 2.0
            return self.step_high if in_high_half else self.step_low
        if self.type == "ramp":
            frac = (t % self.ramp_period_s) / self.ramp_period_s
            return self.ramp_min + (self.ramp_max - self.ramp_min) * frac
        if self.type == "random":
            return self.baseline + random.uniform(-self.amplitude, self.amplitude)
        return self.baseline


class SimulatedLuxSensor(Sensor):
    """Ambient light sensor stand-in, either a fixed value or a time pattern."""

    def __init__(self, sensor_id: str = "light_sim", manual_lux: float = 320.0):
        self._sensor_id = sensor_id
        self._lock = Lock()
        self._enabled = True
        self._mode = "manual"   # manual|pattern
        self._manual_lux = float(manual_lux)
        self._pattern = PatternConfig()

    @property
    def sensor_id(self) -> str:
        return self._sensor_id

    @property
    def unit(self) -> str:
        return "lux"

    def enable(self) -> None:
        with self._lock:
            self._enabled = True

    def disable(self) -> None:
        with self._lock:
            self._enabled = False

    def set_manual(self, lux: float) -> None:
        with self._lock:
            self._mode = "manual"
            self._manual_lux = float(lux)

    def set_pattern(self, cfg: PatternConfig) -> None:
        with self._lock:
            self._mode = "pattern"
            self._pattern = cfg

    def status(self) -> dict:
        with self._lock:
            return {
                "sensor_id": self._sensor_id,
                "enabled": self._enabled,
                "mode": self._mode,
                "manual_lux": self._manual_lux,
                "pattern": self._pattern.__dict__,
            }

    def read(self) -> float:
        with self._lock:
            if not self._enabled:
                raise RuntimeError("Simulated sensor disabled")
            if self._mode == "manual":
                return self._manual_lux
            cfg = self._pattern

        v = cfg.value_at(time.time())
        if cfg.noise > 0:
            v += random.uniform(-cfg.noise, cfg.noise)
        return float(max(0.0, v))
