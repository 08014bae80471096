"""Fixed textual format of the reading log.

One line per reading, no header::

    <seq>,<epochMillis>,<yyyy-MM-dd-h-mm-ssa>,<lux>
"""
from __future__ import annotations

import struct
from zoneinfo import ZoneInfo

from ..core.timeutil import human_readable_time
from .models import LogLine, Reading


def _to_f32(value: float) -> float:
    return struct.unpack("<f", struct.pack("<f", value))[0]


def float32(value: float) -> float:
    """Return the shortest decimal value that maps to the same 32-bit float."""
    value = float(value)
    if value != value or value in (float("inf"), float("-inf")):
        return value
    target = _to_f32(value)
    for digits in range(1, 10):
        candidate = float(f"{target:.{digits}g}")
        if _to_f32(candidate) == target:
            return candidate
    return target


def format_lux(lux: float) -> str:
    return repr(float32(lux))


def format_line(reading: Reading, tz: str | ZoneInfo | None = None) -> str:
    return ",".join((
        str(reading.sequence_number),
        str(reading.timestamp_millis),
        human_readable_time(reading.timestamp_millis, tz),
        format_lux(reading.lux),
    ))


def parse_line(line: str) -> LogLine:
    parts = line.rstrip("\r\n").split(",")
    if len(parts) != 4:
        raise ValueError(f"Expected 4 fields, got {len(parts)}: {line!r}")
    seq, millis, human, lux = parts
    return LogLine(
        sequence_number=int(seq),
        timestamp_millis=int(millis),
        human_time=human,
        lux=float(lux),
    )
