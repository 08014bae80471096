from __future__ import annotations


class LightAnalyzerError(Exception):
    """Base class for failures surfaced to the user."""


class SensorUnavailable(LightAnalyzerError):
    """No light sensor is present on the sensor source."""


class StorageUnavailable(LightAnalyzerError):
    """The storage root for the reading log is missing or not writable."""


class DirectoryCreateFailed(LightAnalyzerError):
    """The reading log directory could not be created."""


class WriteFailed(LightAnalyzerError):
    """A single reading could not be written or flushed to the log."""


class ConfigError(LightAnalyzerError):
    """A configured value (e.g. the log timezone) cannot be used."""
