"""Deterministic offline collaborators for tests and the CLI."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from sunfinder.contracts import CompassReading, GeoCoordinate, MotionReading
from sunfinder.ingest.interfaces import HeadingSource, LocationProvider, MotionSource


class FixedLocationProvider(LocationProvider):
    """Location provider returning a fixed fix, or simulating refusal."""

    def __init__(self, coordinate: GeoCoordinate | None, granted: bool = True) -> None:
        self.coordinate = coordinate
        self.granted = granted
        self.permission_requests = 0

    def request_permission(self) -> bool:
        """Return the configured permission outcome."""
        self.permission_requests += 1
        return self.granted

    def last_known_position(self) -> GeoCoordinate | None:
        """Return the configured fix."""
        return self.coordinate


class _ManualSubscription:
    def __init__(self, stream: ManualSensorStream, callback: Callable[[Any], None]) -> None:
        self._stream = stream
        self._callback = callback

    def remove(self) -> None:
        self._stream.unsubscribe(self._callback)


class ManualSensorStream(HeadingSource, MotionSource):
    """Sensor stream driven by explicit `emit` calls; serves either stream role."""

    def __init__(self) -> None:
        self._listeners: list[Callable[[Any], None]] = []

    @property
    def listener_count(self) -> int:
        """Number of active subscriptions."""
        return len(self._listeners)

    def subscribe(self, callback: Callable[[Any], None]) -> _ManualSubscription:
        """Register callback and return its removable subscription."""
        self._listeners.append(callback)
        return _ManualSubscription(self, callback)

    def unsubscribe(self, callback: Callable[[Any], None]) -> None:
        """Drop callback if still registered."""
        self._listeners = [cb for cb in self._listeners if cb is not callback]

    def watch_heading(self, callback: Callable[[CompassReading], None]) -> _ManualSubscription:
        """Subscribe as a heading source."""
        return self.subscribe(callback)

    def add_listener(self, callback: Callable[[MotionReading], None]) -> _ManualSubscription:
        """Subscribe as a motion source."""
        return self.subscribe(callback)

    def emit(self, reading: CompassReading | MotionReading) -> None:
        """Deliver one reading to every active subscriber."""
        for callback in list(self._listeners):
            callback(reading)
