"""
Headless light logger.

Samples the ambient light sensor, appends every reading to
<storage-root>/LightAnalyzer/Light.csv and prints the live count/lux.

Usage:
    light-analyzer run                              # simulated sensor
    light-analyzer run --sensor rs485 --port /dev/ttyUSB0
    light-analyzer run --duration 60 --storage-root /mnt/sdcard
    light-analyzer serve --host 0.0.0.0 --port 8000
"""

from __future__ import annotations

import argparse
import logging
import threading
from typing import Optional

from .core.config import settings
from .core.log import configure_logging

logger = logging.getLogger(__name__)


def run(args: argparse.Namespace, stop: Optional[threading.Event] = None) -> int:
    from .main import build_analyzer, build_sensors

    cfg = settings.model_copy(update={
        k: v for k, v in {
            "sensor_mode": args.sensor,
            "storage_root": args.storage_root,
            "rs485_port": args.port,
            "rs485_baudrate": args.baudrate,
            "rs485_slave_id": args.slave_id,
            "lux_functioncode": args.function_code,
            "lux_register_address": args.register,
            "lux_register_count": args.count,
            "lux_scale": args.scale,
        }.items() if v is not None
    })

    analyzer = build_analyzer(cfg, build_sensors(cfg), echo=print)
    stop = stop or threading.Event()

    logger.info("Starting light logger")
    logger.info("  Sensor: %s", cfg.sensor_mode)
    logger.info("  Log:    %s", cfg.reading_log_path)

    analyzer.create()
    try:
        if not analyzer.start_sampling():
            return 1
        stop.wait(args.duration)
    except KeyboardInterrupt:
        logger.info("Shutting down")
    finally:
        analyzer.stop_sampling()
        analyzer.destroy()

    logger.info("Logged %d readings", analyzer.session.reading_count)
    return 0


def serve(args: argparse.Namespace) -> int:
    import uvicorn

    uvicorn.run("light_analyzer.main:app", host=args.host, port=args.port)
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="light-analyzer", description="Ambient light sensor logger")
    p.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    sub = p.add_subparsers(dest="command", required=True)

    r = sub.add_parser("run", help="Log readings until interrupted")
    r.add_argument("--sensor", choices=["sim", "rs485", "none"], help="Sensor backend")
    r.add_argument("--storage-root", help="Directory holding LightAnalyzer/Light.csv")
    r.add_argument("--duration", type=float, default=None, help="Stop after this many seconds")
    r.add_argument("--port", help="Serial port (default: /dev/ttyUSB0)")
    r.add_argument("--baudrate", type=int)
    r.add_argument("--slave-id", type=int)
    r.add_argument("--function-code", type=int, choices=[3, 4],
                   help="Modbus function code: 3=holding, 4=input registers")
    r.add_argument("--register", type=int, help="Register address")
    r.add_argument("--count", type=int, help="Number of registers to read")
    r.add_argument("--scale", type=float, help="Raw register → lux multiplier")

    s = sub.add_parser("serve", help="Run the HTTP control surface")
    s.add_argument("--host", default="127.0.0.1")
    s.add_argument("--port", type=int, default=8000)

    return p


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(level="DEBUG" if args.verbose else None, log_file="")

    if args.command == "serve":
        return serve(args)
    return run(args)


if __name__ == "__main__":
    raise SystemExit(main())
