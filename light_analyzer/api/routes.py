from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from ..core.config import settings
from ..sensors.simulated_lux_sensor import PatternConfig, SimulatedLuxSensor
from ..services.analyzer import LightAnalyzer
from .schemas import LiveResponse, SessionResponse, SimManualRequest, SimPatternRequest

logger = logging.getLogger(__name__)

router = APIRouter()


# --- Dependency getters, bound via app.dependency_overrides in main ---
def get_analyzer() -> LightAnalyzer:  # overridden in main
    raise RuntimeError("Analyzer dependency not configured")

def get_sim_sensor() -> SimulatedLuxSensor:  # overridden in main
    raise RuntimeError("Simulated sensor dependency not configured")


def _session_response(analyzer: LightAnalyzer, ok: bool) -> SessionResponse:
    analyzer.ui.flush()
    return SessionResponse(
        ok=ok,
        active=analyzer.session.active,
        reading_count=analyzer.session.reading_count,
        notice=analyzer.display.state.last_notice,
    )


@router.get("/live", response_model=LiveResponse)
def get_live(analyzer: LightAnalyzer = Depends(get_analyzer)):
    state = analyzer.display.state
    return LiveResponse(
        app=settings.app_name,
        active=analyzer.session.active,
        reading_count=state.reading_count,
        lux=state.lux,
        text=state.text,
        log_path=str(analyzer.log_path),
        log_open=analyzer.reading_logger.is_open,
        notices=list(state.notices),
    )


@router.post("/session/start", response_model=SessionResponse)
def session_start(analyzer: LightAnalyzer = Depends(get_analyzer)):
    ok = analyzer.start_sampling()
    return _session_response(analyzer, ok)


@router.post("/session/stop", response_model=SessionResponse)
def session_stop(analyzer: LightAnalyzer = Depends(get_analyzer)):
    ok = analyzer.stop_sampling()
    return _session_response(analyzer, ok)


# --- Simulation endpoints ---
@router.get("/sim/status")
def sim_status(sensor: SimulatedLuxSensor = Depends(get_sim_sensor)):
    return sensor.status()


@router.post("/sim/enable")
def sim_enable(sensor: SimulatedLuxSensor = Depends(get_sim_sensor)):
    sensor.enable()
    return {"ok": True, "enabled": True}


@router.post("/sim/disable")
def sim_disable(sensor: SimulatedLuxSensor = Depends(get_sim_sensor)):
    sensor.disable()
    return {"ok": True, "enabled": False}


@router.post("/sim/lux/manual")
def sim_set_manual(req: SimManualRequest, sensor: SimulatedLuxSensor = Depends(get_sim_sensor)):
    sensor.set_manual(req.lux)
    return {"ok": True, "mode": "manual", "lux": req.lux}


@router.post("/sim/lux/pattern")
def sim_set_pattern(req: SimPatternRequest, sensor: SimulatedLuxSensor = Depends(get_sim_sensor)):
    cfg = PatternConfig(**req.model_dump())
    sensor.set_pattern(cfg)
    logger.info("Simulated light pattern set: %s", cfg.type)
    return {"ok": True, "pattern": cfg.__dict__}
