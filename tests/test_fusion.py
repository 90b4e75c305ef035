"""Tests for device orientation fusion."""

from __future__ import annotations

from datetime import UTC, datetime
from math import pi, radians

import pytest

from sunfinder.contracts import (
    CompassReading,
    GeoCoordinate,
    MotionReading,
    SolarPosition,
    SolarTable,
)
from sunfinder.sensors.fusion import (
    OrientationFusion,
    correct_heading,
    derive_pitch,
    update_orientation,
)

# Roll tipped past vertical: pitch = 90 - |beta|.
UPWARDS_GAMMA = radians(170.0)


def _looking_up(pitch_deg: float) -> MotionReading:
    return MotionReading(beta=radians(90.0 - pitch_deg), gamma=UPWARDS_GAMMA)


def _table_with(*headings: int) -> SolarTable:
    slots: list[SolarPosition | None] = [None] * 360
    for heading in headings:
        slots[heading] = SolarPosition(
            time=datetime(2024, 6, 21, 12, heading % 60, tzinfo=UTC),
            elevation=float(heading) / 10.0,
            azimuth=heading + 0.5,
        )
    return SolarTable(
        coordinate=GeoCoordinate(latitude=40.7, longitude=-74.0),
        reference_instant=datetime(2024, 6, 21, tzinfo=UTC),
        slots=slots,
    )


def test_flat_device_points_straight_down() -> None:
    """beta = 0, gamma = 0 is the non-upwards case and gives -90."""
    assert derive_pitch(MotionReading(beta=0.0, gamma=0.0)) == pytest.approx(-90.0)


def test_upright_device_points_at_horizon() -> None:
    """beta = 90 degrees with no roll puts the camera on the horizon."""
    assert derive_pitch(MotionReading(beta=pi / 2, gamma=0.0)) == pytest.approx(0.0, abs=1e-9)


def test_upwards_case_uses_complementary_beta() -> None:
    """Roll past vertical switches to 90 - |beta|."""
    assert derive_pitch(MotionReading(beta=radians(30.0), gamma=radians(135.0))) == pytest.approx(60.0)
    assert derive_pitch(MotionReading(beta=-radians(30.0), gamma=-radians(135.0))) == pytest.approx(60.0)


def test_heading_is_raw_just_below_flip_pitch() -> None:
    """Below 45 degrees pitch the compass heading is used as reported."""
    estimate = update_orientation(_looking_up(44.5), CompassReading(true_heading=100.0))
    assert estimate.pitch == pytest.approx(44.5)
    assert estimate.heading == 100.0


def test_heading_flips_just_above_flip_pitch() -> None:
    """Above 45 degrees pitch the heading is turned around by 180."""
    estimate = update_orientation(_looking_up(45.5), CompassReading(true_heading=100.0))
    assert estimate.heading == pytest.approx(280.0)

    wrapped = update_orientation(_looking_up(45.5), CompassReading(true_heading=300.0))
    assert wrapped.heading == pytest.approx(120.0)


def test_correct_heading_without_hysteresis_ignores_previous_state() -> None:
    """The reference rule depends only on the current pitch."""
    assert correct_heading(10.0, 44.9, flipped=True) == (10.0, False)
    assert correct_heading(10.0, 45.0, flipped=False) == (190.0, True)


def test_hysteresis_band_holds_previous_flip_state() -> None:
    """With a band the flip engages above and releases below the threshold."""
    assert correct_heading(10.0, 47.0, flipped=False, hysteresis=5.0) == (10.0, False)
    assert correct_heading(10.0, 51.0, flipped=False, hysteresis=5.0) == (190.0, True)
    assert correct_heading(10.0, 42.0, flipped=True, hysteresis=5.0) == (190.0, True)
    assert correct_heading(10.0, 39.0, flipped=True, hysteresis=5.0) == (10.0, False)


def test_fusion_waits_for_both_streams() -> None:
    """A single stream is not enough to produce an estimate."""
    fusion = OrientationFusion(table=_table_with(100))

    assert fusion.on_motion(_looking_up(10.0)) is None
    assert fusion.estimate is None

    update = fusion.on_compass(CompassReading(true_heading=100.7))
    assert update is not None
    assert update.estimate.heading == pytest.approx(100.7)
    assert update.position == fusion.table[100]


def test_fusion_withholds_output_until_table_is_set() -> None:
    """Readings are kept while no table exists, then used once it arrives."""
    fusion = OrientationFusion()
    fusion.on_motion(_looking_up(10.0))

    assert fusion.on_compass(CompassReading(true_heading=100.0)) is None
    assert fusion.estimate is None

    fusion.set_table(_table_with(100))
    update = fusion.recompute()
    assert update is not None
    assert update.position is not None


def test_latest_reading_wins() -> None:
    """Each new reading replaces the previous one of its stream."""
    fusion = OrientationFusion(table=_table_with(100, 200))
    fusion.on_motion(_looking_up(10.0))
    fusion.on_compass(CompassReading(true_heading=100.0))
    update = fusion.on_compass(CompassReading(true_heading=200.2))

    assert update is not None
    assert update.position == fusion.table[200]
    assert fusion.estimate == update.estimate


def test_table_miss_yields_estimate_without_position() -> None:
    """An empty slot is not an error; the renderer just has no marker."""
    fusion = OrientationFusion(table=_table_with(100))
    fusion.on_motion(_looking_up(10.0))
    update = fusion.on_compass(CompassReading(true_heading=5.0))

    assert update is not None
    assert update.position is None
    assert update.estimate.heading == 5.0


def test_fusion_flip_uses_corrected_heading_for_lookup() -> None:
    """Looking steeply up reads the slot opposite the raw heading."""
    fusion = OrientationFusion(table=_table_with(280))
    fusion.on_compass(CompassReading(true_heading=100.0))
    update = fusion.on_motion(_looking_up(60.0))

    assert update is not None
    assert update.position == fusion.table[280]


def test_fusion_rejects_negative_hysteresis() -> None:
    with pytest.raises(ValueError):
        OrientationFusion(flip_hysteresis=-1.0)


def test_fusion_hysteresis_carries_flip_state_between_readings() -> None:
    """Pitch wandering around 45 degrees only toggles the flip at the band edges."""
    fusion = OrientationFusion(table=_table_with(100, 280), flip_hysteresis=3.0)
    fusion.on_compass(CompassReading(true_heading=100.0))

    headings = []
    for pitch in (44.0, 46.0, 47.5, 48.5, 46.0, 43.0, 41.5, 44.0, 46.0):
        update = fusion.on_motion(_looking_up(pitch))
        assert update is not None
        headings.append(round(update.estimate.heading, 6))

    assert headings == [100.0, 100.0, 100.0, 280.0, 280.0, 280.0, 100.0, 100.0, 100.0]
    assert fusion.position == fusion.table[100]


def test_fusion_without_hysteresis_flaps_at_threshold() -> None:
    """The plain threshold flips on every crossing of 45 degrees."""
    fusion = OrientationFusion(table=_table_with(100, 280))
    fusion.on_compass(CompassReading(true_heading=100.0))

    headings = [
        round(fusion.on_motion(_looking_up(pitch)).estimate.heading, 6)
        for pitch in (44.5, 45.5, 44.5, 45.5)
    ]

    assert headings == [100.0, 280.0, 100.0, 280.0]
