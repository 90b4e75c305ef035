"""In-memory cache of built solar tables."""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass
from datetime import datetime
from threading import Lock

from sunfinder.astro.table import generate_solar_table
from sunfinder.contracts import GeoCoordinate, SolarTable


@dataclass(frozen=True)
class TableCacheKey:
    """Stable cache key for one location fix and sampling day."""

    coordinate: GeoCoordinate
    reference_instant: datetime


class SolarTableStore:
    """Thread-safe LRU of built tables so each fix is sampled once."""

    def __init__(self, max_entries: int = 32) -> None:
        """Initialize store with a positive maximum entry count."""
        if max_entries <= 0:
            raise ValueError("max_entries must be positive")
        self._max_entries = max_entries
        self._lock = Lock()
        self._entries: OrderedDict[TableCacheKey, SolarTable] = OrderedDict()
        self.build_count = 0

    def __len__(self) -> int:
        return len(self._entries)

    def get_or_build(self, coord: GeoCoordinate, reference_instant: datetime) -> tuple[SolarTable, bool]:
        """Return the cached table for the key, building once on miss."""
        key = TableCacheKey(coordinate=coord, reference_instant=reference_instant)
        with self._lock:
            existing = self._entries.get(key)
            if existing is not None:
                self._entries.move_to_end(key)
                return existing, False

            table = generate_solar_table(coord, reference_instant)
            self._entries[key] = table
            self.build_count += 1
            while len(self._entries) > self._max_entries:
                self._entries.popitem(last=False)
            return table, True
