from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from ..core.errors import SensorUnavailable
from ..domain.interfaces import SensorSource
from ..storage.reading_logger import ReadingLogger
from .display import LiveDisplay, MarshalingDisplay
from .session import SamplingSession

logger = logging.getLogger(__name__)


class LightAnalyzer:
    """
    Boundary between the sampling core and whatever drives it (HTTP, CLI).

    Failures are logged and turned into user notices; none escape.
    """

    def __init__(
        self,
        source: SensorSource,
        reading_logger: ReadingLogger,
        log_path: str | Path,
        display: Optional[LiveDisplay] = None,
        session: Optional[SamplingSession] = None,
    ) -> None:
        self.source = source
        self.reading_logger = reading_logger
        self.log_path = Path(log_path)
        self.display = display or LiveDisplay()
        self.ui = MarshalingDisplay(self.display)
        self.session = session or SamplingSession(
            source=source,
            reading_logger=reading_logger,
            log_path=self.log_path,
            display=self.ui,
        )

    def create(self) -> None:
        self.ui.start()

    def destroy(self) -> None:
        try:
            self.session.stop()
        except Exception as e:
            self._report("Unable to stop light sensor sampling", e)
        try:
            self.reading_logger.close()
        except Exception as e:
            self._report("Unable to close light sensor log file", e)
        close = getattr(self.source, "close", None)
        if close is not None:
            try:
                close()
            except Exception as e:
                self._report("Unable to release sensor source", e)
        self.ui.stop()

    def start_sampling(self) -> bool:
        try:
            self.session.start()
        except SensorUnavailable as e:
            logger.error("Unable to start light sampling: %s", e)
            self.ui.notify(str(e))
            return False
        except Exception as e:
            self._report("Unable to start light sampling", e)
            return False
        self.ui.post(self.display.set_sampling, True)
        self.ui.notify("Light sensor sampling started")
        return True

    def stop_sampling(self) -> bool:
        try:
            self.session.stop()
        except Exception as e:
            self._report("Unable to stop light sensor sampling", e)
            return False
        if self.session.active:
            logger.error("Light sensor sampling still active after stop")
            self.ui.notify("Unable to stop light sensor sampling")
            return False
        self.ui.post(self.display.set_sampling, False)
        self.ui.notify("Light sensor sampling stopped")
        return True

    def _report(self, what: str, e: Exception) -> None:
        logger.exception("%s", what)
        self.ui.notify(f"{what}: {e}")
