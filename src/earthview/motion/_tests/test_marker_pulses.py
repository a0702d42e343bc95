from __future__ import annotations

import pytest

from earthview.camera.ops import marker_anchor
from earthview.config.models import PulseSettings
from earthview.motion.pulse import MarkerPulseEmitter


def _emitter() -> MarkerPulseEmitter:
    return MarkerPulseEmitter(time_fn=lambda: 0.0)


def test_pulse_scales_and_fades_then_retires() -> None:
    emitter = _emitter()
    emitter.set_anchor(marker_anchor(10.0, 20.0), now=0.0)

    frames = emitter.tick(900.0)
    assert len(frames) == 1
    assert frames[0].scale == pytest.approx(2.1)
    assert frames[0].opacity == pytest.approx(0.175)

    frames = emitter.tick(1800.0)
    # first pulse retired; the interval elapsed so a fresh one starts now
    assert [p.start_time for p in emitter.pulses] == [1800.0]
    assert len(frames) == 1
    assert frames[0].scale == pytest.approx(1.0)


def test_set_anchor_spawns_immediately() -> None:
    emitter = _emitter()
    anchor = marker_anchor(0.0, 0.0)
    emitter.set_anchor(anchor, now=100.0)
    frames = emitter.tick(100.0)
    assert len(frames) == 1
    assert frames[0].anchor is anchor
    assert frames[0].scale == pytest.approx(1.0)
    assert frames[0].opacity == pytest.approx(0.35)


def test_cadence_overlaps_pulses_in_insertion_order() -> None:
    emitter = _emitter()
    emitter.set_anchor(marker_anchor(0.0, 0.0), now=0.0)
    emitter.tick(1499.0)
    assert len(emitter.pulses) == 1
    emitter.tick(1500.0)
    assert [p.start_time for p in emitter.pulses] == [0.0, 1500.0]
    frames = emitter.tick(1700.0)
    assert len(frames) == 2
    # older pulse is larger and fainter
    assert frames[0].scale > frames[1].scale
    assert frames[0].opacity < frames[1].opacity


def test_emission_clock_resets_from_tick_time() -> None:
    emitter = _emitter()
    emitter.set_anchor(marker_anchor(0.0, 0.0), now=0.0)
    emitter.tick(1600.0)
    emitter.tick(3000.0)
    assert [p.start_time for p in emitter.pulses] == [1600.0]
    emitter.tick(3100.0)
    assert [p.start_time for p in emitter.pulses] == [1600.0, 3100.0]


def test_new_anchor_discards_previous_pulses() -> None:
    emitter = _emitter()
    emitter.set_anchor(marker_anchor(0.0, 0.0), now=0.0)
    emitter.tick(1500.0)
    second = marker_anchor(45.0, 45.0)
    emitter.set_anchor(second, now=1600.0)
    assert len(emitter.pulses) == 1
    assert emitter.pulses[0].anchor is second
    assert emitter.pulses[0].start_time == 1600.0


def test_clear_anchor_retires_everything() -> None:
    emitter = _emitter()
    emitter.set_anchor(marker_anchor(0.0, 0.0), now=0.0)
    emitter.tick(1500.0)
    emitter.clear_anchor()
    assert emitter.anchor is None
    assert emitter.tick(1600.0) == []
    assert emitter.tick(5000.0) == []


def test_no_anchor_emits_nothing() -> None:
    emitter = _emitter()
    assert emitter.tick(10_000.0) == []


def test_custom_settings() -> None:
    settings = PulseSettings(interval_ms=100.0, duration_ms=200.0, base_opacity=1.0, growth=1.0)
    emitter = MarkerPulseEmitter(settings, time_fn=lambda: 0.0)
    emitter.set_anchor(marker_anchor(0.0, 0.0), now=0.0)
    frames = emitter.tick(100.0)
    assert len(frames) == 2
    assert frames[0].scale == pytest.approx(1.5)
    assert frames[0].opacity == pytest.approx(0.5)
