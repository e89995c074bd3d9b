"""
Application configuration using Pydantic settings.
"""
from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Detector settings loaded from TOOCLOSE_* environment variables."""

    # Separation limits
    horizontal_separation_nm: float = 2.0 / 3.0
    vertical_separation_ft: int = 750

    # Eligibility filters
    speed_minimum_kt: int = 120  # filter out hovering TV helicopters and light plane departures
    altitude_minimum_ft: int = 700  # filter out local airport operations
    speed_policy: Literal["any", "both"] = "any"
    min_position_confidence: int = 2
    position_jump_nm: float = 3.0  # NM between consecutive position squitters

    # Aircraft table
    stale_after_seconds: int = 10
    table_capacity: int = 1024  # never more than about 70 planes visible from one receiver

    # Alert logging
    log_dir: str = "./log"
    log_basename: str = "separation"
    tracking_url: str = "https://globe.adsb.fi/?icao="

    # Periodic stats
    stats_interval_seconds: int = 60 * 60

    # Weather (advisory only)
    metar_enabled: bool = True
    metar_station: str = "KVNY"  # replace with closest METAR source
    metar_cache_ttl: int = 300
    metar_timeout: float = 5.0
    awc_base_url: str = "https://aviationweather.gov/api/data"

    # Notifications
    notify_credentials_file: str = "~/.config/tooclose/apprise.txt"
    notification_cooldown: int = 300

    class Config:
        env_prefix = "TOOCLOSE_"
        env_file = ".env"
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
