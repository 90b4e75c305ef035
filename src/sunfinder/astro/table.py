"""Per-fix heading lookup table of solar crossings."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from math import floor

from sunfinder.astro.solar import compute_solar_position
from sunfinder.contracts import HEADING_SLOTS, GeoCoordinate, SolarPosition, SolarTable

_LOGGER = logging.getLogger(__name__)

SAMPLE_STEP = timedelta(minutes=1)
SAMPLE_WINDOW = timedelta(hours=24)
# Geometric horizon plus standard refraction and the solar semi-diameter.
HORIZON_ELEVATION_DEG = -0.833


def iter_sample_instants(reference_instant: datetime) -> list[datetime]:
    """Return the sample instants covering [reference, reference + window)."""
    count = int(SAMPLE_WINDOW / SAMPLE_STEP)
    return [reference_instant + SAMPLE_STEP * index for index in range(count)]


def generate_solar_table(
    coord: GeoCoordinate,
    reference_instant: datetime | None = None,
) -> SolarTable:
    """Build the heading table for one location fix.

    Samples one day starting at ``reference_instant`` (default: now, local time) and
    stores, for each integral heading, the first sample whose azimuth floors to
    it while the sun is up. Later samples landing in a filled slot are dropped,
    so a heading crossed twice in a day keeps its earliest crossing.
    """
    reference = reference_instant if reference_instant is not None else datetime.now().astimezone()
    slots: list[SolarPosition | None] = [None] * HEADING_SLOTS

    for instant in iter_sample_instants(reference):
        azimuth, elevation = compute_solar_position(coord, instant)
        if elevation < HORIZON_ELEVATION_DEG:
            continue
        heading = floor(azimuth) % HEADING_SLOTS
        if slots[heading] is None:
            slots[heading] = SolarPosition(time=instant, elevation=elevation, azimuth=azimuth)

    table = SolarTable(coordinate=coord, reference_instant=reference, slots=slots)
    _LOGGER.debug(
        "Built solar table for lat=%.4f lon=%.4f from %s: %d/%d headings filled",
        coord.latitude,
        coord.longitude,
        reference.isoformat(),
        len(table.filled_headings()),
        HEADING_SLOTS,
    )
    return table
