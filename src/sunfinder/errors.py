"""Session-level failures surfaced to the user."""

from __future__ import annotations


class SunfinderError(RuntimeError):
    """Base class for terminal sunfinder session failures."""

    user_message = "Something went wrong"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.user_message)


class PermissionDeniedError(SunfinderError):
    """Location access was refused."""

    user_message = "Permission to access location was denied"


class LocationUnavailableError(SunfinderError):
    """No last-known location fix could be obtained."""

    user_message = "Can't determine last known location"
