"""Session lifecycle: one location fix, one table, live sensor fusion."""

from __future__ import annotations

import logging
from datetime import datetime
from enum import StrEnum

from sunfinder.astro.table import generate_solar_table
from sunfinder.config import SunfinderConfig
from sunfinder.contracts import (
    CompassReading,
    GeoCoordinate,
    MotionReading,
    SolarTable,
)
from sunfinder.errors import LocationUnavailableError, PermissionDeniedError, SunfinderError
from sunfinder.ingest.interfaces import HeadingSource, LocationProvider, MotionSource, Subscription
from sunfinder.sensors.fusion import FusionUpdate, OrientationFusion

_LOGGER = logging.getLogger(__name__)


class SessionState(StrEnum):
    """Lifecycle states of a session."""

    UNINITIALIZED = "uninitialized"
    READY = "ready"
    FAILED = "failed"
    CLOSED = "closed"


class Session:
    """Owns the location fix, the solar table and the sensor subscriptions.

    The session becomes READY only after permission is granted and a fix is
    obtained; the table is built exactly once at that point. Failures are
    terminal and kept as a user-visible message.
    """

    def __init__(self, config: SunfinderConfig | None = None) -> None:
        self.config = config or SunfinderConfig()
        self.state = SessionState.UNINITIALIZED
        self.coordinate: GeoCoordinate | None = None
        self.table: SolarTable | None = None
        self.error_message: str | None = None
        self.fusion = OrientationFusion(
            flip_threshold=self.config.flip_pitch_deg,
            flip_hysteresis=self.config.flip_hysteresis_deg,
        )
        self._subscriptions: list[Subscription] = []

    @property
    def ready(self) -> bool:
        return self.state is SessionState.READY

    def start(
        self,
        location_provider: LocationProvider,
        reference_instant: datetime | None = None,
    ) -> SolarTable:
        """Acquire the location fix and build the table.

        Raises:
            PermissionDeniedError: location access was refused.
            LocationUnavailableError: no last-known fix exists.
        """
        if self.state is not SessionState.UNINITIALIZED:
            raise RuntimeError(f"session cannot start from state {self.state}")

        try:
            if not location_provider.request_permission():
                raise PermissionDeniedError()
            coordinate = location_provider.last_known_position()
            if coordinate is None:
                raise LocationUnavailableError()
        except SunfinderError as exc:
            self.state = SessionState.FAILED
            self.error_message = str(exc)
            _LOGGER.warning("Session failed: %s", exc)
            raise

        self.coordinate = coordinate
        self.table = generate_solar_table(coordinate, reference_instant)
        self.fusion.set_table(self.table)
        self.state = SessionState.READY
        _LOGGER.info(
            "Session ready at lat=%.4f lon=%.4f", coordinate.latitude, coordinate.longitude
        )
        return self.table

    def attach_sensors(self, heading_source: HeadingSource, motion_source: MotionSource) -> None:
        """Subscribe to both sensor streams, feeding the fusion step."""
        if self.state is SessionState.CLOSED:
            raise RuntimeError("session is closed")
        self._subscriptions.append(heading_source.watch_heading(self.on_compass))
        self._subscriptions.append(motion_source.add_listener(self.on_motion))

    def _accepts_readings(self) -> bool:
        return self.state in (SessionState.UNINITIALIZED, SessionState.READY)

    def on_motion(self, reading: MotionReading) -> FusionUpdate | None:
        """Handle one motion event; ignored once the session failed or closed."""
        if not self._accepts_readings():
            return None
        return self.fusion.on_motion(reading)

    def on_compass(self, reading: CompassReading) -> FusionUpdate | None:
        """Handle one compass event; ignored once the session failed or closed."""
        if not self._accepts_readings():
            return None
        return self.fusion.on_compass(reading)

    def close(self) -> None:
        """Release every sensor subscription. Safe to call more than once."""
        while self._subscriptions:
            self._subscriptions.pop().remove()
        if self.state is not SessionState.CLOSED:
            _LOGGER.info("Session closed from state %s", self.state)
        self.state = SessionState.CLOSED
