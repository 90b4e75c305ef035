"""Text readout shown beneath the overlay."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from math import floor

from sunfinder.contracts import GeoCoordinate, OrientationEstimate, SolarPosition

COMPASS_POINTS = (
    "N",
    "NNE",
    "NE",
    "ENE",
    "E",
    "ESE",
    "SE",
    "SSE",
    "S",
    "SSW",
    "SW",
    "WSW",
    "W",
    "WNW",
    "NW",
    "NNW",
)


def compass_point(heading: float) -> str:
    """Return the 16-point abbreviation whose sector starts at or below heading."""
    sector = 360.0 / len(COMPASS_POINTS)
    return COMPASS_POINTS[floor((heading % 360.0) / sector) % len(COMPASS_POINTS)]


def format_clock(time: datetime | None) -> str:
    """Format as HH:MM in the instant's own timezone."""
    if time is None:
        return "--:--"
    return f"{time.hour:02d}:{time.minute:02d}"


def format_coordinate(coord: GeoCoordinate | None) -> str:
    if coord is None:
        return "--"
    return f"{coord.latitude:.4f}ºN {coord.longitude:.4f}ºE"


@dataclass(frozen=True, slots=True)
class Readout:
    """Display strings for one fusion update."""

    compass_point: str
    heading: str
    crossing_time: str
    solar_elevation: str
    pitch: str
    location: str

    def to_dict(self) -> dict[str, str]:
        """Serialize to a JSON-compatible dictionary."""
        return {
            "compass_point": self.compass_point,
            "heading": self.heading,
            "crossing_time": self.crossing_time,
            "solar_elevation": self.solar_elevation,
            "pitch": self.pitch,
            "location": self.location,
        }


def build_readout(
    estimate: OrientationEstimate,
    position: SolarPosition | None,
    coord: GeoCoordinate | None,
) -> Readout:
    """Build the readout; a missing position renders as placeholders."""
    return Readout(
        compass_point=compass_point(estimate.heading),
        heading=f"{estimate.heading:.0f}º",
        crossing_time=format_clock(position.time if position else None),
        solar_elevation=f"{position.elevation:.0f}º" if position else "--º",
        pitch=f"{estimate.pitch:.0f}º",
        location=format_coordinate(coord),
    )
