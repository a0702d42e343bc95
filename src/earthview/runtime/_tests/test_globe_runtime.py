from __future__ import annotations

import asyncio

import pytest

from earthview.camera.state import Vec3
from earthview.config.models import ViewConfig
from earthview.location.types import GeoFix, LocationUnavailable
from earthview.motion.rotation import RotationMode
from earthview.runtime.frame import FrameSnapshot, LoggingRenderer, Renderer
from earthview.runtime.globe import GlobeRuntime


class _FakeClock:
    def __init__(self, start: float = 0.0) -> None:
        self._now = float(start)

    def advance(self, delta: float) -> None:
        self._now += float(delta)

    def __call__(self) -> float:
        return self._now


class _RecordingRenderer:
    def __init__(self) -> None:
        self.frames: list[FrameSnapshot] = []

    def render(self, frame: FrameSnapshot) -> None:
        self.frames.append(frame)


def _fix(lat: float = 0.0, lon: float = 0.0, source: str = "device"):
    async def tier() -> GeoFix:
        return GeoFix(lat=lat, lon=lon, source=source)  # type: ignore[arg-type]

    return tier


async def _unavailable() -> GeoFix:
    raise LocationUnavailable("no fix")


def test_boot_without_descriptor_searches() -> None:
    runtime = GlobeRuntime(tiers=[], time_fn=_FakeClock())
    assert runtime.boot("") is False
    assert runtime.mode is RotationMode.SEARCH
    assert runtime.rig.state.position == Vec3(0.0, 0.25, 3.6)
    frame = runtime.tick(0.0)
    assert frame.search_effects_visible
    assert frame.camera.fov_deg == 45.0


def test_boot_with_descriptor_is_free() -> None:
    runtime = GlobeRuntime(tiers=[], time_fn=_FakeClock())
    assert runtime.boot("x0y0z4def0-zoom60") is True
    assert runtime.mode is RotationMode.FREE
    assert runtime.rig.state.position == Vec3(0.0, 0.0, 4.0)
    assert runtime.rig.state.fov_deg == 60.0


def test_boot_with_invalid_descriptor_falls_back(caplog) -> None:
    runtime = GlobeRuntime(tiers=[], time_fn=_FakeClock())
    with caplog.at_level("WARNING"):
        assert runtime.boot("garbage") is False
    assert "invalid camera descriptor" in caplog.text
    assert runtime.mode is RotationMode.SEARCH


def test_boot_from_url_uses_site_base() -> None:
    runtime = GlobeRuntime(ViewConfig(site_base="earth"), tiers=[], time_fn=_FakeClock())
    assert runtime.boot_from_url("https://example.org/earth/x1y2z3def0-zoom45") is True
    assert runtime.rig.state.position == Vec3(1.0, 2.0, 3.0)


def test_apply_descriptor_rejects_invalid_and_keeps_camera() -> None:
    runtime = GlobeRuntime(tiers=[], time_fn=_FakeClock())
    before = runtime.rig.state.copy()
    assert runtime.apply_descriptor("x1y2z") is False
    assert runtime.rig.state == before
    assert runtime.apply_descriptor("x1y2z3def4-zoom50") is True
    assert runtime.mode is RotationMode.FREE
    assert runtime.current_descriptor() == "x1y2z3def4-zoom50"


def test_auto_frame_flow_search_focus_lock() -> None:
    clock = _FakeClock()
    renderer = _RecordingRenderer()
    runtime = GlobeRuntime(tiers=[_fix(0.0, 0.0, "ip")], renderer=renderer, time_fn=clock)
    assert isinstance(renderer, Renderer)
    runtime.boot("")

    fix = asyncio.run(runtime.place_user_marker(auto_frame=True))
    assert fix is not None and fix.source == "ip"
    assert runtime.mode is RotationMode.FOCUSING
    assert runtime.status.text == "Approximate position, aligning..."
    assert runtime.marker is not None
    assert runtime.rig.target == runtime.marker.position

    frame = runtime.tick(0.0)
    assert len(frame.pulses) == 1
    assert frame.transition_active

    clock.advance(2600.0)
    frame = runtime.tick(2600.0)
    assert runtime.mode is RotationMode.LOCKED
    assert frame.camera.position.as_tuple() == pytest.approx((2.6, 0.45, 0.22))
    assert frame.status_text == "Approximate position, aligning..."
    assert frame.rotation.globe == 0.0

    clock.advance(1200.0)
    frame = runtime.tick(3800.0)
    assert frame.status_text is None
    assert len(renderer.frames) == 3


def test_manual_flow_resolves_to_free() -> None:
    clock = _FakeClock()
    runtime = GlobeRuntime(tiers=[_fix(45.0, 90.0, "device")], time_fn=clock)
    runtime.boot("x0y0z4def0-zoom45")
    runtime.tick(0.0)

    fix = asyncio.run(runtime.place_user_marker(auto_frame=False))
    assert fix is not None
    assert runtime.mode is RotationMode.FREE
    assert runtime.status.text == "Position detected"
    assert not runtime.transitions.active
    assert runtime.rig.state.position == Vec3(0.0, 0.0, 4.0)

    runtime.tick(1499.0)
    assert runtime.status.visible
    runtime.tick(1500.0)
    assert not runtime.status.visible


def test_failed_lookup_goes_free_without_marker() -> None:
    clock = _FakeClock()
    runtime = GlobeRuntime(tiers=[_unavailable, _unavailable], time_fn=clock)
    runtime.boot("")
    runtime.tick(0.0)
    assert asyncio.run(runtime.place_user_marker(auto_frame=True)) is None
    assert runtime.mode is RotationMode.FREE
    assert runtime.marker is None
    assert runtime.status.text == "Unable to retrieve your position"
    frame = runtime.tick(100.0)
    assert frame.pulses == ()
    runtime.tick(3200.0)
    assert runtime.status.text is None


def test_tick_derives_delta_from_clock() -> None:
    runtime = GlobeRuntime(tiers=[], time_fn=_FakeClock())
    runtime.boot("x0y0z4def0")
    first = runtime.tick(1000.0)
    assert first.rotation.globe == 0.0
    second = runtime.tick(2000.0)
    assert second.rotation.globe == pytest.approx(0.012)
    assert second.globe.globe_y == pytest.approx(0.012)


def test_snapshot_angles_are_not_aliased() -> None:
    runtime = GlobeRuntime(tiers=[], time_fn=_FakeClock())
    frame = runtime.tick(0.0, 1.0)
    runtime.tick(1000.0, 1.0)
    assert frame.globe.globe_y == pytest.approx(0.042)


def test_caller_supplied_clock_completes_auto_frame() -> None:
    # default monotonic clock, but every frame is driven with an explicit now
    runtime = GlobeRuntime(tiers=[_fix(0.0, 0.0, "ip")])
    runtime.boot("")
    asyncio.run(runtime.place_user_marker(auto_frame=True))

    frame = runtime.tick(0.0, 0.0)
    assert frame.transition_active
    assert [p.scale for p in frame.pulses] == [pytest.approx(1.0)]

    frame = runtime.tick(2600.0, 2.6)
    assert runtime.mode is RotationMode.LOCKED
    assert frame.camera.position.as_tuple() == pytest.approx((2.6, 0.45, 0.22))
    assert not frame.transition_active

    frame = runtime.tick(10000.0, 7.4)
    assert frame.status_text is None
    assert [p.start_time for p in runtime.pulses.pulses] == [10000.0]


def test_timers_started_before_first_frame_begin_on_it() -> None:
    runtime = GlobeRuntime(tiers=[_unavailable], time_fn=lambda: 1e9)
    runtime.boot("")
    asyncio.run(runtime.place_user_marker(auto_frame=True))
    assert runtime.status.text == "Unable to retrieve your position"

    runtime.tick(500.0)
    assert runtime.status.hide_at == 3700.0
    runtime.tick(3700.0)
    assert runtime.status.text is None


def test_newer_message_cancels_pending_hide() -> None:
    runtime = GlobeRuntime(tiers=[_fix(0.0, 0.0, "device")], time_fn=lambda: 0.0)
    runtime.boot("")
    runtime.tick(0.0)
    asyncio.run(runtime.place_user_marker(auto_frame=False))
    assert runtime.status.hide_at == 1500.0
    asyncio.run(runtime.place_user_marker(auto_frame=True))
    assert runtime.status.text == "Position detected, aligning..."
    assert runtime.status.hide_at is None


def test_frame_carries_view_direction(caplog) -> None:
    runtime = GlobeRuntime(tiers=[], renderer=LoggingRenderer(every=1), time_fn=_FakeClock())
    runtime.boot("x4y0z0def0-zoom45")
    with caplog.at_level("INFO", logger="earthview.runtime.frame"):
        frame = runtime.tick(0.0)
    assert frame.camera.forward.as_tuple() == pytest.approx((-1.0, 0.0, 0.0), abs=1e-9)
    assert "fwd=(-1.000," in caplog.text
