"""Overlay geometry for the horizon band and the sun marker."""

from __future__ import annotations

from dataclasses import dataclass

from sunfinder.contracts import OrientationEstimate, SolarPosition

HORIZON_BAND_PX = 5.0


@dataclass(frozen=True, slots=True)
class SunMarker:
    """Filled circle centred at (x, y) relative to the canvas centre."""

    x: float
    y: float
    radius: float


@dataclass(frozen=True, slots=True)
class OverlayFrame:
    """Shapes to draw for one orientation, in pixels from the canvas centre."""

    width: float
    height: float
    horizon_y: float
    horizon_band: float
    sun: SunMarker | None


def pixels_per_degree(height: float, fov_deg: float) -> float:
    """Vertical scale assuming the canvas height spans `fov_deg`."""
    if height <= 0.0:
        raise ValueError("height must be positive")
    if fov_deg <= 0.0:
        raise ValueError("fov_deg must be positive")
    return height / fov_deg


def build_overlay(
    estimate: OrientationEstimate,
    position: SolarPosition | None,
    width: float,
    height: float,
    fov_deg: float = 60.0,
) -> OverlayFrame:
    """Place the horizon and sun marker; y grows downward as on a canvas."""
    ppd = pixels_per_degree(height, fov_deg)
    sun = None
    if position is not None:
        sun = SunMarker(x=0.0, y=(estimate.pitch - position.elevation) * ppd, radius=width / 8.0)
    return OverlayFrame(
        width=width,
        height=height,
        horizon_y=estimate.pitch * ppd,
        horizon_band=HORIZON_BAND_PX,
        sun=sun,
    )
