from __future__ import annotations

import pathlib

from light_analyzer import cli
from light_analyzer.core.config import settings
from light_analyzer.domain.log_format import parse_line
from light_analyzer.main import build_sensors
from light_analyzer.sensors.simulated_lux_sensor import SimulatedLuxSensor


def test_build_sensors_modes() -> None:
    sim = build_sensors(settings.model_copy(update={"sensor_mode": "sim"}))
    assert len(sim) == 1 and isinstance(sim[0], SimulatedLuxSensor)
    assert build_sensors(settings.model_copy(update={"sensor_mode": "none"})) == []


def test_reading_log_path_layout(tmp_path: pathlib.Path) -> None:
    cfg = settings.model_copy(update={"storage_root": str(tmp_path)})
    assert cfg.reading_log_path == tmp_path / "LightAnalyzer" / "Light.csv"


def test_run_logs_to_storage_root(storage_root: pathlib.Path, capsys) -> None:
    args = cli.build_parser().parse_args(
        ["run", "--sensor", "sim", "--storage-root", str(storage_root), "--duration", "0.5"]
    )
    assert cli.run(args) == 0

    log = storage_root / "LightAnalyzer" / "Light.csv"
    lines = [parse_line(l) for l in log.read_text(encoding="utf-8").splitlines()]
    assert lines
    assert lines[0].sequence_number == 1
    assert "Light sensor sampling started" in capsys.readouterr().out


def test_run_without_light_sensor_fails(storage_root: pathlib.Path) -> None:
    args = cli.build_parser().parse_args(
        ["run", "--sensor", "none", "--storage-root", str(storage_root), "--duration", "0"]
    )
    assert cli.run(args) == 1
    assert not (storage_root / "LightAnalyzer").exists()
