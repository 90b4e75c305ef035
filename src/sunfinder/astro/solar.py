"""Low-precision solar ephemeris.

Uses the NOAA general solar position approximations (declination and
equation of time as Fourier series of the fractional year), accurate to
roughly a few tenths of a degree, which is well under one heading slot.
All trigonometry runs in radians; every public angle is in degrees.
"""

from __future__ import annotations

from datetime import UTC, datetime
from math import asin, atan2, cos, degrees, pi, radians, sin

from sunfinder.contracts import GeoCoordinate


def _to_utc(instant: datetime) -> datetime:
    """Convert to aware UTC, assuming UTC for naive values."""
    if instant.tzinfo is None:
        return instant.replace(tzinfo=UTC)
    return instant.astimezone(UTC)


def _utc_hours(instant_utc: datetime) -> float:
    return (
        instant_utc.hour
        + instant_utc.minute / 60.0
        + instant_utc.second / 3600.0
        + instant_utc.microsecond / 3_600_000_000.0
    )


def _normalize_azimuth(angle_deg: float) -> float:
    """Normalize to [0, 360); float modulo of a tiny negative yields 360.0."""
    normalized = angle_deg % 360.0
    if normalized >= 360.0:
        return 0.0
    return normalized


def fractional_year(instant: datetime) -> float:
    """Return the fractional year angle (radians) for an instant."""
    instant_utc = _to_utc(instant)
    day_of_year = instant_utc.timetuple().tm_yday
    return 2.0 * pi * (day_of_year - 1 + (_utc_hours(instant_utc) - 12.0) / 24.0) / 365.0


def solar_declination(gamma: float) -> float:
    """Solar declination in degrees for a fractional year angle."""
    decl_rad = (
        0.006918
        - 0.399912 * cos(gamma)
        + 0.070257 * sin(gamma)
        - 0.006758 * cos(2.0 * gamma)
        + 0.000907 * sin(2.0 * gamma)
        - 0.002697 * cos(3.0 * gamma)
        + 0.00148 * sin(3.0 * gamma)
    )
    return degrees(decl_rad)


def equation_of_time(gamma: float) -> float:
    """Apparent minus mean solar time, in minutes."""
    return 229.18 * (
        0.000075
        + 0.001868 * cos(gamma)
        - 0.032077 * sin(gamma)
        - 0.014615 * cos(2.0 * gamma)
        - 0.040849 * sin(2.0 * gamma)
    )


def hour_angle(instant: datetime, longitude: float) -> float:
    """Local hour angle in degrees, zero at apparent solar noon, negative before it."""
    instant_utc = _to_utc(instant)
    eqtime_min = equation_of_time(fractional_year(instant_utc))
    true_solar_time_min = (_utc_hours(instant_utc) * 60.0 + eqtime_min + 4.0 * longitude) % 1440.0
    return true_solar_time_min / 4.0 - 180.0


def compute_solar_position(coord: GeoCoordinate, instant: datetime) -> tuple[float, float]:
    """Compute the sun's topocentric azimuth and elevation.

    Args:
        coord: Observer location.
        instant: Time of observation. Naive datetimes are taken as UTC.

    Returns:
        Tuple of ``(azimuth_deg, elevation_deg)``: azimuth in [0, 360) measured
        clockwise from true north, elevation in [-90, 90].
    """
    decl_rad = radians(solar_declination(fractional_year(instant)))
    ha_rad = radians(hour_angle(instant, coord.longitude))
    lat_rad = radians(coord.latitude)

    sin_elev = sin(lat_rad) * sin(decl_rad) + cos(lat_rad) * cos(decl_rad) * cos(ha_rad)
    elevation_deg = degrees(asin(min(1.0, max(-1.0, sin_elev))))

    # atan2 of the (west, south) components measures from south; shift to north.
    azimuth_rad = atan2(
        sin(ha_rad) * cos(decl_rad),
        cos(ha_rad) * cos(decl_rad) * sin(lat_rad) - sin(decl_rad) * cos(lat_rad),
    )
    azimuth_deg = _normalize_azimuth(degrees(azimuth_rad) + 180.0)

    return (azimuth_deg, elevation_deg)
