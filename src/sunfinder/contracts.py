"""Core data contracts for sunfinder."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from datetime import datetime
from math import floor
from typing import Any

HEADING_SLOTS = 360


@dataclass(frozen=True, slots=True)
class GeoCoordinate:
    """One geographic location fix in decimal degrees (WGS84, east positive)."""

    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        """Reject coordinates outside the geographic domain."""
        if not -90.0 <= self.latitude <= 90.0:
            raise ValueError("latitude must be within [-90, 90].")
        if not -180.0 <= self.longitude <= 180.0:
            raise ValueError("longitude must be within [-180, 180].")


@dataclass(frozen=True, slots=True)
class SolarPosition:
    """Sun position at one instant; negative elevation is below the horizon."""

    time: datetime
    elevation: float
    azimuth: float | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize the position to a JSON-compatible dictionary."""
        return {
            "time": self.time.isoformat(),
            "elevation": self.elevation,
            "azimuth": self.azimuth,
        }


@dataclass(frozen=True, slots=True)
class OrientationEstimate:
    """Device heading (clockwise from true north) and pitch above the horizon."""

    heading: float
    pitch: float


@dataclass(frozen=True, slots=True)
class MotionReading:
    """Device tilt as reported by the motion sensor, in radians."""

    beta: float
    gamma: float


@dataclass(frozen=True, slots=True)
class CompassReading:
    """Heading sensor sample in degrees from true north."""

    true_heading: float


class SolarTable:
    """Fixed 360-slot lookup from integral compass heading to solar crossing.

    Slot ``i`` holds the first sampled position whose azimuth floors to ``i``,
    or ``None`` when the sun does not cross that heading in the sampled day.
    """

    __slots__ = ("coordinate", "reference_instant", "_slots")

    def __init__(
        self,
        coordinate: GeoCoordinate,
        reference_instant: datetime,
        slots: Sequence[SolarPosition | None],
    ) -> None:
        if len(slots) != HEADING_SLOTS:
            raise ValueError(f"SolarTable requires exactly {HEADING_SLOTS} slots.")
        self.coordinate = coordinate
        self.reference_instant = reference_instant
        self._slots: tuple[SolarPosition | None, ...] = tuple(slots)

    def __len__(self) -> int:
        return HEADING_SLOTS

    def __getitem__(self, heading: int) -> SolarPosition | None:
        return self._slots[heading]

    def __iter__(self) -> Iterator[SolarPosition | None]:
        return iter(self._slots)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SolarTable):
            return NotImplemented
        return (
            self.coordinate == other.coordinate
            and self.reference_instant == other.reference_instant
            and self._slots == other._slots
        )

    def __hash__(self) -> int:
        return hash((self.coordinate, self.reference_instant, self._slots))

    def lookup(self, heading: float) -> SolarPosition | None:
        """Return the slot for ``floor(heading)``; no interpolation between slots."""
        return self._slots[floor(heading) % HEADING_SLOTS]

    def filled_headings(self) -> list[int]:
        """Return the headings that hold a crossing, in ascending order."""
        return [heading for heading, slot in enumerate(self._slots) if slot is not None]
