"""Runtime configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class SunfinderConfig:
    """Tunables for orientation fusion, overlay geometry and table caching."""

    fov_deg: float = 60.0
    flip_pitch_deg: float = 45.0
    # Half-width of the band around flip_pitch_deg that keeps the previous flip state.
    flip_hysteresis_deg: float = 0.0
    table_cache_size: int = 32

    def __post_init__(self) -> None:
        """Validate numeric ranges."""
        if not 0.0 < self.fov_deg <= 180.0:
            raise ValueError("fov_deg must be within (0, 180]")
        if not 0.0 <= self.flip_pitch_deg <= 90.0:
            raise ValueError("flip_pitch_deg must be within [0, 90]")
        if self.flip_hysteresis_deg < 0.0:
            raise ValueError("flip_hysteresis_deg must be non-negative")
        if self.table_cache_size <= 0:
            raise ValueError("table_cache_size must be positive")


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc


def config_from_env() -> SunfinderConfig:
    """
    Build SunfinderConfig from environment variables.

    Optional:
      - SUNFINDER_FOV_DEG
      - SUNFINDER_FLIP_PITCH_DEG
      - SUNFINDER_FLIP_HYSTERESIS_DEG
      - SUNFINDER_TABLE_CACHE_SIZE
    """
    defaults = SunfinderConfig()
    return SunfinderConfig(
        fov_deg=_env_float("SUNFINDER_FOV_DEG", defaults.fov_deg),
        flip_pitch_deg=_env_float("SUNFINDER_FLIP_PITCH_DEG", defaults.flip_pitch_deg),
        flip_hysteresis_deg=_env_float("SUNFINDER_FLIP_HYSTERESIS_DEG", defaults.flip_hysteresis_deg),
        table_cache_size=int(_env_float("SUNFINDER_TABLE_CACHE_SIZE", defaults.table_cache_size)),
    )
