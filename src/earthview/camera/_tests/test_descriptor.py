from __future__ import annotations

import math

import pytest

from earthview.camera.descriptor import (
    decode,
    encode,
    extract_descriptor_from_path,
    format_number,
)
from earthview.camera.state import CameraState, Vec3


def test_decode_canonical_descriptor() -> None:
    state = decode("x0y0z4def0-zoom45")
    assert state is not None
    assert state.position == Vec3(0.0, 0.0, 4.0)
    assert state.roll_deg == 0.0
    assert state.fov_deg == 45.0


def test_decode_clamps_out_of_range_fov() -> None:
    state = decode("x1y2z3def10-zoom120")
    assert state is not None
    assert state.fov_deg == 90.0
    assert state.roll_deg == pytest.approx(10.0)

    low = decode("x1y2z3def10-zoom2")
    assert low is not None
    assert low.fov_deg == 15.0


def test_decode_without_zoom_defaults_fov() -> None:
    state = decode("x-1.5y0.25z3.6def-12.5")
    assert state is not None
    assert state.position == Vec3(-1.5, 0.25, 3.6)
    assert state.roll_deg == pytest.approx(-12.5)
    assert state.fov_deg == 45.0


def test_decode_is_case_insensitive_and_ignores_whitespace() -> None:
    state = decode("  X1 Y2\tz3 DEF4 -ZOOM50\n")
    assert state is not None
    assert state.position == Vec3(1.0, 2.0, 3.0)
    assert state.roll_deg == pytest.approx(4.0)
    assert state.fov_deg == pytest.approx(50.0)


@pytest.mark.parametrize(
    "text",
    [
        "not-a-descriptor",
        "x1y2z",
        "x1y2z3def4-zoom",
        "x1y2z3",
        "x1.y2z3def4",
        "x+1y2z3def4",
        "x1e3y2z3def4",
        "x1y2z3def4-zoom45extra",
        "",
    ],
)
def test_decode_rejects_malformed(text: str) -> None:
    assert decode(text) is None


@pytest.mark.parametrize("value", [None, 42, b"x0y0z4def0", object()])
def test_decode_is_total_over_non_strings(value) -> None:
    assert decode(value) is None


def test_decode_non_finite_roll_falls_back_to_zero() -> None:
    huge = "9" * 400
    state = decode(f"x0y0z4def{huge}-zoom45")
    assert state is not None
    assert state.roll_deg == 0.0


def test_encode_strips_trailing_zeros() -> None:
    state = CameraState(position=Vec3(0.0, 0.25, 3.6), roll_deg=0.0, fov_deg=45.0)
    assert encode(state) == "x0y0.25z3.6def0-zoom45"


def test_encode_rounds_and_always_writes_zoom() -> None:
    state = CameraState(position=Vec3(1.234567, -2.0, 10.0), roll_deg=12.3456, fov_deg=47.5)
    assert encode(state) == "x1.2346y-2z10def12.35-zoom47.5"


def test_encode_non_finite_inputs_become_zero() -> None:
    state = CameraState(position=Vec3(math.nan, math.inf, 2.0))
    assert encode(state) == "x0y0z2def0-zoom45"


def test_format_number_negative_zero() -> None:
    assert format_number(-0.00001) == "0"
    assert format_number(-0.5, 2) == "-0.5"
    assert format_number(100.0) == "100"


@pytest.mark.parametrize(
    "state",
    [
        CameraState(position=Vec3(0.0, 0.0, 4.0)),
        CameraState(position=Vec3(-1.23456, 0.98765, 2.5), roll_deg=-33.333, fov_deg=15.0),
        CameraState(position=Vec3(1e6, -1e-5, 0.1), roll_deg=180.0, fov_deg=89.999),
    ],
)
def test_round_trip_within_precision(state: CameraState) -> None:
    decoded = decode(encode(state))
    assert decoded is not None
    assert decoded.position.x == pytest.approx(state.position.x, abs=1e-4)
    assert decoded.position.y == pytest.approx(state.position.y, abs=1e-4)
    assert decoded.position.z == pytest.approx(state.position.z, abs=1e-4)
    assert decoded.roll_deg == pytest.approx(state.roll_deg, abs=1e-2)
    assert decoded.fov_deg == pytest.approx(state.fov_deg, abs=1e-2)


def test_extract_descriptor_from_path() -> None:
    assert extract_descriptor_from_path("/x0y0z4def0-zoom45") == "x0y0z4def0-zoom45"
    assert extract_descriptor_from_path("/earth/x0y0z4def0", "earth") == "x0y0z4def0"
    assert extract_descriptor_from_path("/earth/", "earth") == ""
    assert extract_descriptor_from_path("/", None) == ""
    assert extract_descriptor_from_path("", None) == ""


def test_extract_descriptor_from_path_editor_sentinel() -> None:
    assert extract_descriptor_from_path("/earth-view/editor/", None) == ""
    assert extract_descriptor_from_path("/earth/earth-view/editor/", "earth") == ""


def test_extract_descriptor_from_path_keeps_unknown_base() -> None:
    # a first segment that is not the site base is part of the candidate
    assert extract_descriptor_from_path("/other/x0y0z4def0", "earth") == "otherx0y0z4def0"


def test_format_number_rounds_ties_away_from_zero() -> None:
    assert format_number(0.125, 2) == "0.13"
    assert format_number(-0.125, 2) == "-0.13"
    assert format_number(45.125, 2) == "45.13"
    assert format_number(2.5, 0) == "3"
    # 1.005 is stored just below the tie
    assert format_number(1.005, 2) == "1"
    assert len(format_number(1e300, 4)) == 301


def test_encode_matches_browser_rounding_on_ties() -> None:
    state = CameraState(position=Vec3(0.00005, 1.00015, 0.0), roll_deg=0.125, fov_deg=45.125)
    assert encode(state).endswith("def0.13-zoom45.13")
