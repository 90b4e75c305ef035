"""Interfaces for the location and sensor collaborators around the core."""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol

from sunfinder.contracts import CompassReading, GeoCoordinate, MotionReading


class Subscription(Protocol):
    """Handle for a live sensor subscription."""

    def remove(self) -> None:
        """Stop delivering readings."""


class LocationProvider(Protocol):
    """Interface for the one-shot permission request and location fix."""

    def request_permission(self) -> bool:
        """Return True when foreground location access is granted."""

    def last_known_position(self) -> GeoCoordinate | None:
        """Return the last known fix, or None when none is available."""


class HeadingSource(Protocol):
    """Interface for continuous compass heading events."""

    def watch_heading(self, callback: Callable[[CompassReading], None]) -> Subscription:
        """Deliver each heading reading to callback until removed."""


class MotionSource(Protocol):
    """Interface for continuous device-motion events."""

    def add_listener(self, callback: Callable[[MotionReading], None]) -> Subscription:
        """Deliver each motion reading to callback until removed."""
