from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional, TextIO
from zoneinfo import ZoneInfo

from ..core.errors import DirectoryCreateFailed, StorageUnavailable, WriteFailed
from ..core.timeutil import resolve_zone
from ..domain.log_format import format_line
from ..domain.models import Reading

logger = logging.getLogger(__name__)


class ReadingLogger:
    """Append-only reading log; every append is on disk before it returns."""

    def __init__(self, storage_root: str | Path, tz: str | None = None) -> None:
        self._storage_root = Path(storage_root)
        self._tz = tz
        self._zone: Optional[ZoneInfo] = None
        self._path: Optional[Path] = None
        self._fh: Optional[TextIO] = None

    @property
    def path(self) -> Optional[Path]:
        return self._path

    @property
    def is_open(self) -> bool:
        return self._fh is not None

    def open(self, path: str | Path) -> None:
        if self._fh is not None:
            raise RuntimeError(f"Reading log already open: {self._path}")

        root = self._storage_root
        if not root.is_dir() or not os.access(root, os.W_OK):
            raise StorageUnavailable(f"Storage root is not mounted or not writable: {root}")

        path = Path(path)
        if not path.resolve().is_relative_to(root.resolve()):
            raise StorageUnavailable(f"Reading log {path} is outside storage root {root}")

        # Fails with ConfigError before any file is touched
        zone = resolve_zone(self._tz)

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise DirectoryCreateFailed(f"Unable to create log directory {path.parent}: {e}") from e
        if not path.parent.is_dir():
            raise DirectoryCreateFailed(f"Unable to create log directory {path.parent}")

        try:
            self._fh = path.open("a", encoding="utf-8", newline="\n")
        except OSError as e:
            raise StorageUnavailable(f"Unable to open reading log {path}: {e}") from e
        self._zone = zone
        self._path = path
        logger.info("Reading log opened: %s", path)

    def append(self, reading: Reading) -> None:
        fh = self._fh
        if fh is None:
            raise WriteFailed(f"Reading log is not open (seq={reading.sequence_number})")

        try:
            line = format_line(reading, self._zone)
            fh.write(line + "\n")
            fh.flush()
            os.fsync(fh.fileno())
        except (OSError, ValueError, OverflowError) as e:
            raise WriteFailed(f"Unable to write reading {reading.sequence_number}: {e}") from e

    def close(self) -> None:
        fh, self._fh = self._fh, None
        if fh is None:
            return
        try:
            fh.flush()
        except (OSError, ValueError):
            logger.exception("Unable to flush reading log %s", self._path)
        try:
            fh.close()
        except OSError:
            logger.exception("Unable to close reading log %s", self._path)
        else:
            logger.info("Reading log closed: %s", self._path)
