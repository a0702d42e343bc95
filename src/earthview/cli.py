"""Command line entry point: descriptor tools and a headless simulation."""

from __future__ import annotations

import argparse
import asyncio
import dataclasses
import json
import logging
from typing import Iterable, Optional

from earthview.camera.descriptor import decode, encode
from earthview.camera.share import descriptor_from_url
from earthview.camera.state import CameraState, Vec3
from earthview.config.models import ViewConfig, load_view_config
from earthview.location.device import fixed_reader
from earthview.location.resolver import build_tiers
from earthview.runtime.frame import LoggingRenderer
from earthview.runtime.globe import GlobeRuntime
from earthview.utils.timing import monotonic_ms

logger = logging.getLogger(__name__)


def _cmd_encode(args: argparse.Namespace) -> int:
    state = CameraState(position=Vec3(args.x, args.y, args.z), roll_deg=args.roll, fov_deg=args.fov)
    print(encode(state))
    return 0


def _cmd_decode(args: argparse.Namespace) -> int:
    state = decode(args.descriptor)
    if state is None:
        logger.error("invalid camera descriptor: %r", args.descriptor)
        return 1
    payload = {
        "position": dataclasses.asdict(state.position),
        "roll_deg": state.roll_deg,
        "fov_deg": state.fov_deg,
    }
    print(json.dumps(payload))
    return 0


def _cmd_from_url(args: argparse.Namespace) -> int:
    print(descriptor_from_url(args.url, args.site_base))
    return 0


async def simulate(
    config: ViewConfig,
    *,
    descriptor: str = "",
    seconds: float = 5.0,
    fps: float = 30.0,
    lat: Optional[float] = None,
    lon: Optional[float] = None,
) -> GlobeRuntime:
    """Drive a ``GlobeRuntime`` in real time while the marker flow runs."""

    device_reader = None
    if lat is not None and lon is not None:
        device_reader = fixed_reader(lat, lon)
    fps = max(1.0, float(fps))
    runtime = GlobeRuntime(
        config,
        tiers=build_tiers(config.location, device_reader=device_reader),
        renderer=LoggingRenderer(every=max(1, int(round(fps)))),
    )
    custom = runtime.boot(descriptor)
    marker_task = asyncio.create_task(runtime.place_user_marker(auto_frame=not custom))
    period = 1.0 / fps
    deadline = monotonic_ms() + max(0.0, float(seconds)) * 1000.0
    try:
        while monotonic_ms() < deadline:
            runtime.tick()
            await asyncio.sleep(period)
    finally:
        if not marker_task.done():
            marker_task.cancel()
            try:
                await marker_task
            except asyncio.CancelledError:
                logger.info("location lookup still pending at exit; cancelled")
    logger.info("final descriptor: %s (mode=%s)", runtime.current_descriptor(), runtime.mode.value)
    return runtime


def _cmd_simulate(args: argparse.Namespace) -> int:
    config = load_view_config()
    if args.no_ip:
        config = dataclasses.replace(config, location=dataclasses.replace(config.location, ip_enabled=False))
    if (args.lat is None) != (args.lon is None):
        logger.error("--lat and --lon must be given together")
        return 2
    asyncio.run(
        simulate(
            config,
            descriptor=args.descriptor,
            seconds=args.seconds,
            fps=args.fps,
            lat=args.lat,
            lon=args.lon,
        )
    )
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="earthview", description="Globe camera descriptor tools")
    parser.add_argument("--debug", action="store_true", help="Enable DEBUG for earthview loggers")
    sub = parser.add_subparsers(dest="command", required=True)

    enc = sub.add_parser("encode", help="Encode a camera viewpoint as a descriptor")
    enc.add_argument("--x", type=float, required=True)
    enc.add_argument("--y", type=float, required=True)
    enc.add_argument("--z", type=float, required=True)
    enc.add_argument("--roll", type=float, default=0.0, help="Roll in degrees (default 0)")
    enc.add_argument("--fov", type=float, default=45.0, help="Vertical FOV in degrees, clamped to [15, 90]")
    enc.set_defaults(func=_cmd_encode)

    dec = sub.add_parser("decode", help="Decode a descriptor to JSON")
    dec.add_argument("descriptor")
    dec.set_defaults(func=_cmd_decode)

    url = sub.add_parser("from-url", help="Extract the descriptor carried by a share URL")
    url.add_argument("url")
    url.add_argument("--site-base", default=None, help="Leading path segment to strip")
    url.set_defaults(func=_cmd_from_url)

    sim = sub.add_parser("simulate", help="Run the headless runtime and log frames")
    sim.add_argument("--descriptor", default="", help="Initial camera descriptor")
    sim.add_argument("--seconds", type=float, default=5.0)
    sim.add_argument("--fps", type=float, default=30.0)
    sim.add_argument("--lat", type=float, default=None, help="Device latitude (with --lon)")
    sim.add_argument("--lon", type=float, default=None, help="Device longitude (with --lat)")
    sim.add_argument("--no-ip", action="store_true", help="Disable the IP geolocation fallback")
    sim.set_defaults(func=_cmd_simulate)
    return parser


def main(argv: Optional[Iterable[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    logging.basicConfig(level=logging.INFO, format='[%(asctime)s] %(name)s - %(levelname)s - %(message)s')
    if args.debug:
        logging.getLogger("earthview").setLevel(logging.DEBUG)
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
