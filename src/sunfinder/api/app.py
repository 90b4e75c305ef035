"""FastAPI app exposing solar tables and single-shot orientation fusion."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from sunfinder.astro.table_store import SolarTableStore
from sunfinder.config import SunfinderConfig, config_from_env
from sunfinder.contracts import CompassReading, GeoCoordinate, MotionReading, SolarPosition
from sunfinder.sensors.fusion import OrientationFusion
from sunfinder.view.overlay import build_overlay
from sunfinder.view.readout import build_readout


class SolarTableRequest(BaseModel):
    """Request schema for building one heading table."""

    lat: float = Field(ge=-90.0, le=90.0)
    lon: float = Field(ge=-180.0, le=180.0)
    reference_time: datetime | None = None


class SolarPositionResponse(BaseModel):
    """One filled table slot."""

    time: datetime
    elevation: float
    azimuth: float | None = None


class SolarTableResponse(BaseModel):
    """All 360 slots; null where the sun does not cross the heading."""

    lat: float
    lon: float
    reference_time: datetime
    slots: list[SolarPositionResponse | None]
    filled: int
    cache_hit: bool


class OrientationRequest(SolarTableRequest):
    """One motion and one compass reading against the location's table."""

    beta: float = Field(description="Front-back tilt in radians.")
    gamma: float = Field(description="Left-right roll in radians.")
    true_heading: float = Field(ge=0.0, lt=360.0)
    width: float = Field(default=1080.0, gt=0.0)
    height: float = Field(default=1920.0, gt=0.0)


class OrientationResponse(BaseModel):
    """Fusion output plus the derived readout and overlay geometry."""

    heading: float
    pitch: float
    position: SolarPositionResponse | None
    readout: dict[str, str]
    overlay: dict[str, Any]


def _normalize_time(dt: datetime | None) -> datetime:
    """Normalize optional datetime to timezone-aware value.

    Missing values resolve to the start of the current UTC day so requests on the
    same day share one cached table.
    """
    if dt is None:
        return datetime.now(UTC).replace(hour=0, minute=0, second=0, microsecond=0)
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt


def _position_response(position: SolarPosition | None) -> SolarPositionResponse | None:
    if position is None:
        return None
    return SolarPositionResponse(**position.to_dict())


def create_app(config: SunfinderConfig | None = None) -> FastAPI:
    """Create and configure the FastAPI app."""
    cfg = config or config_from_env()
    app = FastAPI(title="Sunfinder API", version="0.1.0")
    table_store = SolarTableStore(max_entries=cfg.table_cache_size)

    app.state.config = cfg
    app.state.table_store = table_store

    @app.post("/solar-table", response_model=SolarTableResponse)
    def post_solar_table(payload: SolarTableRequest) -> SolarTableResponse:
        """Build (or reuse) the heading table for one location and day."""
        reference = _normalize_time(payload.reference_time)
        coordinate = GeoCoordinate(latitude=payload.lat, longitude=payload.lon)
        table, was_built = table_store.get_or_build(coordinate, reference)
        return SolarTableResponse(
            lat=payload.lat,
            lon=payload.lon,
            reference_time=reference,
            slots=[_position_response(slot) for slot in table],
            filled=len(table.filled_headings()),
            cache_hit=not was_built,
        )

    @app.post("/orientation", response_model=OrientationResponse)
    def post_orientation(payload: OrientationRequest) -> OrientationResponse:
        """Run one fusion step and return what the overlay would draw."""
        reference = _normalize_time(payload.reference_time)
        coordinate = GeoCoordinate(latitude=payload.lat, longitude=payload.lon)
        table, _ = table_store.get_or_build(coordinate, reference)

        fusion = OrientationFusion(
            table=table,
            flip_threshold=cfg.flip_pitch_deg,
            flip_hysteresis=cfg.flip_hysteresis_deg,
        )
        fusion.on_motion(MotionReading(beta=payload.beta, gamma=payload.gamma))
        update = fusion.on_compass(CompassReading(true_heading=payload.true_heading))
        if update is None:
            raise HTTPException(status_code=500, detail="fusion produced no estimate")

        overlay = build_overlay(
            update.estimate, update.position, payload.width, payload.height, cfg.fov_deg
        )
        return OrientationResponse(
            heading=update.estimate.heading,
            pitch=update.estimate.pitch,
            position=_position_response(update.position),
            readout=build_readout(update.estimate, update.position, coordinate).to_dict(),
            overlay={
                "horizon_y": overlay.horizon_y,
                "horizon_band": overlay.horizon_band,
                "sun": (
                    {"x": overlay.sun.x, "y": overlay.sun.y, "radius": overlay.sun.radius}
                    if overlay.sun
                    else None
                ),
            },
        )

    return app


app = create_app()
