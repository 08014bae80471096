from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_name: str = "Light Analyzer"
    timezone: str = "UTC"

    # Reading log: <storage_root>/<log_dir_name>/<log_file_name>
    storage_root: str = Field(default_factory=lambda: str(Path.home()))
    log_dir_name: str = "LightAnalyzer"
    log_file_name: str = "Light.csv"

    # Diagnostics (rotated, unlike the reading log)
    diagnostic_log_path: str = "light_analyzer.log"
    log_level: str = "INFO"

    # Sensor mode: "sim", "rs485" or "none"
    sensor_mode: str = "sim"

    # RS485 / Modbus RTU
    rs485_port: str = "/dev/ttyUSB0"      # Windows example: "COM3"
    rs485_baudrate: int = 9600
    rs485_slave_id: int = 1

    # Lux register definition
    lux_functioncode: int = 3             # 3=holding, 4=input
    lux_register_address: int = 2
    lux_register_count: int = 2
    lux_scale: float = 0.001

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, v: str) -> str:
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone: {v!r}") from e
        return v

    @property
    def reading_log_path(self) -> Path:
        return Path(self.storage_root) / self.log_dir_name / self.log_file_name


settings = Settings()
