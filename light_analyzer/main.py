from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException

from .core.config import Settings, settings
from .core.log import configure_logging

from .api.routes import router as api_router
import light_analyzer.api.routes as routes_module

from .sensors.base import Sensor
from .sensors.simulated_lux_sensor import SimulatedLuxSensor
from .drivers.rs485_modbus import RS485ModbusRTU, ModbusRtuConfig
from .sensors.rs485_lux_sensor import RS485LuxSensor, LuxRegisterSpec
from .services.analyzer import LightAnalyzer
from .services.display import LiveDisplay
from .services.sensor_source import PollingSensorSource
from .storage.reading_logger import ReadingLogger


logger = logging.getLogger(__name__)


def build_sensors(cfg: Settings) -> list[Sensor]:
    mode = cfg.sensor_mode.lower()

    if mode == "rs485":
        driver = RS485ModbusRTU(
            ModbusRtuConfig(
                port=cfg.rs485_port,
                baudrate=cfg.rs485_baudrate,
                slave_id=cfg.rs485_slave_id,
            )
        )
        spec = LuxRegisterSpec(
            functioncode=cfg.lux_functioncode,
            address=cfg.lux_register_address,
            count=cfg.lux_register_count,
            scale=cfg.lux_scale,
        )
        return [RS485LuxSensor(driver=driver, spec=spec)]

    if mode == "none":
        return []

    # default to sim
    return [SimulatedLuxSensor()]


def build_analyzer(cfg: Settings, sensors: list[Sensor], echo=None) -> LightAnalyzer:
    return LightAnalyzer(
        source=PollingSensorSource(sensors),
        reading_logger=ReadingLogger(cfg.storage_root, tz=cfg.timezone),
        log_path=cfg.reading_log_path,
        display=LiveDisplay(echo=echo),
    )


# --- Singletons ---
sensors = build_sensors(settings)
analyzer = build_analyzer(settings, sensors)


def get_analyzer() -> LightAnalyzer:
    return analyzer


def get_sim_sensor() -> SimulatedLuxSensor:
    for s in sensors:
        if isinstance(s, SimulatedLuxSensor):
            return s
    raise HTTPException(status_code=409, detail="Sim sensor not available (sensor_mode is not 'sim').")


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    logger.info("Starting %s (sensor_mode=%s log=%s)", settings.app_name, settings.sensor_mode, settings.reading_log_path)

    analyzer.create()
    try:
        yield
    finally:
        analyzer.destroy()
        logger.info("Shutdown complete")


app = FastAPI(title=settings.app_name, lifespan=lifespan)

# Make the dependency functions in routes resolve to the real ones
app.dependency_overrides[routes_module.get_analyzer] = get_analyzer
app.dependency_overrides[routes_module.get_sim_sensor] = get_sim_sensor

app.include_router(api_router, prefix="/api")
