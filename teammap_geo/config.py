"""
Central configuration loaded from environment variables with sensible defaults.
Nothing here is required; every value has a working default.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path

_DEFAULT_GAZETTEER = Path(__file__).parent / "data" / "gazetteer.json"


@dataclass(frozen=True)
class GazetteerConfig:
    path: str = os.getenv("GAZETTEER_PATH", str(_DEFAULT_GAZETTEER))
    # Subdivision tiers in match order: (country code, parent jurisdiction label)
    subdivision_tiers: tuple[tuple[str, str], ...] = (
        ("US", "United States"),
        ("CA", "Canada"),
        ("AU", "Australia"),
    )


@dataclass(frozen=True)
class ClusterConfig:
    # Decimal places used for the grouping key ("{lat},{lng}")
    precision: int = int(os.getenv("CLUSTER_PRECISION", "2"))


@dataclass(frozen=True)
class PinConfig:
    min_radius: float = float(os.getenv("PIN_MIN_RADIUS", "6.0"))
    max_radius: float = float(os.getenv("PIN_MAX_RADIUS", "20.0"))


@dataclass(frozen=True)
class APIConfig:
    host: str = os.getenv("API_HOST", "0.0.0.0")
    port: int = int(os.getenv("API_PORT", "8000"))
    max_people: int = int(os.getenv("API_MAX_PEOPLE", "10000"))


@dataclass(frozen=True)
class Settings:
    gazetteer: GazetteerConfig = field(default_factory=GazetteerConfig)
    cluster: ClusterConfig = field(default_factory=ClusterConfig)
    pins: PinConfig = field(default_factory=PinConfig)
    api: APIConfig = field(default_factory=APIConfig)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    env: str = os.getenv("APP_ENV", "development")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Singleton settings instance."""
    return Settings()
