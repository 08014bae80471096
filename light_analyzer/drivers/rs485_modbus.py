from __future__ import annotations

import logging
import time
from dataclasses import dataclass

from pymodbus.client import ModbusSerialClient

logger = logging.getLogger(__name__)


@dataclass
class ModbusRtuConfig:
    port: str = "/dev/ttyUSB0"      # Windows example: "COM3"
    baudrate: int = 9600
    bytesize: int = 8
    parity: str = "N"               # "N", "E", "O"
    stopbits: int = 1
    timeout_s: float = 1.0
    slave_id: int = 1
    reconnect_backoff_s: float = 1.0
    max_reconnect_backoff_s: float = 10.0


class RS485ModbusRTU:
    """
    Modbus RTU over serial/USB driver.

    Reconnects lazily: after a failed connect, further attempts are refused
    until the (doubling) backoff has elapsed, so a polling thread never
    sleeps inside a read.
    """

    def __init__(self, cfg: ModbusRtuConfig, client: ModbusSerialClient | None = None):
        self.cfg = cfg
        self._client = client or ModbusSerialClient(
            port=cfg.port,
            baudrate=cfg.baudrate,
            bytesize=cfg.bytesize,
            parity=cfg.parity,
            stopbits=cfg.stopbits,
            timeout=cfg.timeout_s,
        )
        self._connected = False
        self._backoff = cfg.reconnect_backoff_s
        self._retry_at = 0.0

    @property
    def connected(self) -> bool:
        return self._connected

    def connect(self) -> None:
        if self._connected:
            return
        now = time.monotonic()
        if now < self._retry_at:
            raise ConnectionError(
                f"Modbus RTU on {self.cfg.port} unavailable, retry in {self._retry_at - now:.1f}s"
            )
        if not self._client.connect():
            self._retry_at = now + self._backoff
            self._backoff = min(self._backoff * 2, self.cfg.max_reconnect_backoff_s)
            raise ConnectionError(f"Unable to connect Modbus RTU on {self.cfg.port}")
        self._connected = True
        self._backoff = self.cfg.reconnect_backoff_s
        self._retry_at = 0.0
        logger.info("Modbus RTU connected on %s (baud=%s)", self.cfg.port, self.cfg.baudrate)

    def close(self) -> None:
        try:
            self._client.close()
        finally:
            self._connected = False

    def read_registers(self, functioncode: int, address: int, count: int) -> list[int]:
        """Read 16-bit registers with function code 3 (holding) or 4 (input)."""
        if functioncode == 3:
            read = self._client.read_holding_registers
        elif functioncode == 4:
            read = self._client.read_input_registers
        else:
            raise ValueError(f"Unsupported functioncode: {functioncode}")

        self.connect()
        rr = read(address=address, count=count, device_id=self.cfg.slave_id)
        if rr.isError():
            # Mark disconnected so next call attempts reconnect
            self._connected = False
            raise RuntimeError(f"Modbus read error (fc={functioncode}): {rr}")
        return list(rr.registers)
