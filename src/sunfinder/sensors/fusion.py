"""Fuse device-motion and compass readings into a heading/pitch estimate.

Both corrections here are empirical and only hold for a phone held close to
portrait:

- Pitch is derived from ``beta`` alone, switching formula on whether the roll
  ``gamma`` has tipped past vertical. Arbitrary roll degrades it.
- The magnetometer heading reads 180 degrees off once the device pitches above
  roughly 45 degrees, so the heading is flipped back past that threshold. Pitch
  hovering at the threshold makes the heading flap unless a hysteresis band is
  configured; the default (no band) flips exactly at the threshold.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from math import degrees, pi

from sunfinder.contracts import (
    CompassReading,
    MotionReading,
    OrientationEstimate,
    SolarPosition,
    SolarTable,
)

_LOGGER = logging.getLogger(__name__)

HALF_PI = pi / 2.0
FLIP_PITCH_DEG = 45.0


def derive_pitch(motion: MotionReading) -> float:
    """Return pitch in degrees: 0 at the horizon, positive looking up."""
    upwards = abs(motion.gamma) > HALF_PI
    abs_beta = abs(motion.beta)
    return degrees(HALF_PI - abs_beta if upwards else abs_beta - HALF_PI)


def correct_heading(
    raw_heading: float,
    pitch: float,
    flipped: bool = False,
    threshold: float = FLIP_PITCH_DEG,
    hysteresis: float = 0.0,
) -> tuple[float, bool]:
    """Undo the magnetometer's 180 degree flip above the pitch threshold.

    Args:
        raw_heading: Compass true heading in degrees.
        pitch: Device pitch in degrees.
        flipped: Whether the previous reading was flipped. Only consulted when
            ``hysteresis`` is positive.
        threshold: Pitch at which the flip happens.
        hysteresis: Half-width of the band around ``threshold`` inside which the
            previous flip state is kept. Zero reproduces the plain threshold.

    Returns:
        Tuple of ``(heading, flipped)`` with heading in [0, 360).
    """
    if hysteresis <= 0.0:
        flip = pitch >= threshold
    elif flipped:
        flip = pitch >= threshold - hysteresis
    else:
        flip = pitch >= threshold + hysteresis

    heading = raw_heading + 180.0 if flip else raw_heading
    heading %= 360.0
    if heading >= 360.0:
        heading = 0.0
    return heading, flip


def update_orientation(motion: MotionReading, compass: CompassReading) -> OrientationEstimate:
    """Combine one motion and one compass reading using the plain threshold flip."""
    pitch = derive_pitch(motion)
    heading, _ = correct_heading(compass.true_heading, pitch)
    return OrientationEstimate(heading=heading, pitch=pitch)


@dataclass(frozen=True, slots=True)
class FusionUpdate:
    """One fusion output: the estimate and the table slot it points at."""

    estimate: OrientationEstimate
    position: SolarPosition | None


class OrientationFusion:
    """Latest-value sensor state plus the solar table it indexes into.

    Each stream replaces its previous reading; nothing is buffered. No update is
    produced until both streams have reported and a table has been set, and in
    that case the previous estimate is left untouched.
    """

    def __init__(
        self,
        table: SolarTable | None = None,
        flip_threshold: float = FLIP_PITCH_DEG,
        flip_hysteresis: float = 0.0,
    ) -> None:
        if flip_hysteresis < 0.0:
            raise ValueError("flip_hysteresis must be non-negative")
        self.table = table
        self.flip_threshold = flip_threshold
        self.flip_hysteresis = flip_hysteresis
        self.motion: MotionReading | None = None
        self.compass: CompassReading | None = None
        self.estimate: OrientationEstimate | None = None
        self.position: SolarPosition | None = None
        self._flipped = False

    def set_table(self, table: SolarTable) -> None:
        """Install the table built for the session's location fix."""
        self.table = table

    def on_motion(self, reading: MotionReading) -> FusionUpdate | None:
        """Record a motion reading and recompute."""
        self.motion = reading
        return self.recompute()

    def on_compass(self, reading: CompassReading) -> FusionUpdate | None:
        """Record a compass reading and recompute."""
        self.compass = reading
        return self.recompute()

    def recompute(self) -> FusionUpdate | None:
        """Recompute from the latest readings, or return None if not ready."""
        if self.motion is None or self.compass is None or self.table is None:
            return None

        pitch = derive_pitch(self.motion)
        heading, flipped = correct_heading(
            self.compass.true_heading,
            pitch,
            flipped=self._flipped,
            threshold=self.flip_threshold,
            hysteresis=self.flip_hysteresis,
        )
        if flipped != self._flipped:
            _LOGGER.debug("Compass flip %s at pitch %.1f", "engaged" if flipped else "released", pitch)
        self._flipped = flipped

        self.estimate = OrientationEstimate(heading=heading, pitch=pitch)
        self.position = self.table.lookup(heading)
        return FusionUpdate(estimate=self.estimate, position=self.position)
