"""Tests for readout formatting and overlay geometry."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from sunfinder.contracts import GeoCoordinate, OrientationEstimate, SolarPosition
from sunfinder.view.overlay import HORIZON_BAND_PX, build_overlay, pixels_per_degree
from sunfinder.view.readout import build_readout, compass_point, format_clock

POSITION = SolarPosition(time=datetime(2024, 6, 21, 9, 5, tzinfo=UTC), elevation=30.4, azimuth=120.2)


@pytest.mark.parametrize(
    ("heading", "expected"),
    [(0.0, "N"), (22.4, "N"), (22.5, "NNE"), (90.0, "E"), (180.0, "S"), (270.0, "W"), (359.9, "NNW")],
)
def test_compass_point_sectors(heading: float, expected: str) -> None:
    """Sixteen sectors of 22.5 degrees, each starting at its named point."""
    assert compass_point(heading) == expected


def test_format_clock() -> None:
    assert format_clock(datetime(2024, 6, 21, 9, 5, tzinfo=UTC)) == "09:05"
    assert format_clock(None) == "--:--"


def test_readout_with_position() -> None:
    """All fields are rendered as whole degrees and a 24h clock."""
    readout = build_readout(
        OrientationEstimate(heading=120.6, pitch=-3.2),
        POSITION,
        GeoCoordinate(latitude=40.7, longitude=-74.0),
    )
    assert readout.compass_point == "ESE"
    assert readout.heading == "121º"
    assert readout.crossing_time == "09:05"
    assert readout.solar_elevation == "30º"
    assert readout.pitch == "-3º"
    assert readout.location == "40.7000ºN -74.0000ºE"


def test_readout_without_position_uses_placeholders() -> None:
    """A table miss renders placeholders instead of failing."""
    readout = build_readout(OrientationEstimate(heading=0.0, pitch=0.0), None, None)
    assert readout.crossing_time == "--:--"
    assert readout.solar_elevation == "--º"
    assert readout.location == "--"
    assert set(readout.to_dict()) == {
        "compass_point",
        "heading",
        "crossing_time",
        "solar_elevation",
        "pitch",
        "location",
    }


def test_overlay_offsets_scale_with_field_of_view() -> None:
    """Marker sits (pitch - elevation) degrees from centre, horizon at pitch."""
    frame = build_overlay(OrientationEstimate(heading=120.0, pitch=10.0), POSITION, 800.0, 1200.0, 60.0)

    assert pixels_per_degree(1200.0, 60.0) == 20.0
    assert frame.horizon_y == 200.0
    assert frame.horizon_band == HORIZON_BAND_PX
    assert frame.sun is not None
    assert frame.sun.x == 0.0
    assert frame.sun.y == pytest.approx((10.0 - 30.4) * 20.0)
    assert frame.sun.radius == 100.0


def test_overlay_without_position_has_no_marker() -> None:
    frame = build_overlay(OrientationEstimate(heading=0.0, pitch=-5.0), None, 800.0, 1200.0)
    assert frame.sun is None
    assert frame.horizon_y == -100.0


def test_pixels_per_degree_rejects_non_positive_inputs() -> None:
    with pytest.raises(ValueError):
        pixels_per_degree(0.0, 60.0)
    with pytest.raises(ValueError):
        pixels_per_degree(1200.0, 0.0)
