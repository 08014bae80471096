from __future__ import annotations

from dataclasses import dataclass
import logging

from .base import Sensor
from ..drivers.rs485_modbus import RS485ModbusRTU

logger = logging.getLogger(__name__)


@dataclass
class LuxRegisterSpec:
    functioncode: int = 3  # 3=holding, 4=input
    address: int = 2
    count: int = 2
    scale: float = 0.001   # raw = (hi<<16)|lo, lux = raw/1000


def registers_to_lux(regs: list[int], scale: float) -> float:
    """Combine big-endian 16-bit registers (hi word first) into a scaled value."""
    raw = 0
    for r in regs:
        raw = (raw << 16) | (r & 0xFFFF)
    return float(raw) * float(scale)


class RS485LuxSensor(Sensor):
    def __init__(
        self,
        driver: RS485ModbusRTU,
        spec: LuxRegisterSpec = LuxRegisterSpec(),
        sensor_id: str = "light_rs485",
    ):
        self._driver = driver
        self._spec = spec
        self._sensor_id = sensor_id

    @property
    def sensor_id(self) -> str:
        return self._sensor_id

    @property
    def unit(self) -> str:
        return "lux"

    def read(self) -> float:
        regs = self._driver.read_registers(self._spec.functioncode, self._spec.address, self._spec.count)
        if not regs:
            raise RuntimeError("No registers returned")

        lux = registers_to_lux(regs, self._spec.scale)
        logger.debug("RS485 lux: regs=%s scale=%s lux=%.3f", regs, self._spec.scale, lux)
        return lux

    def close(self) -> None:
        self._driver.close()
