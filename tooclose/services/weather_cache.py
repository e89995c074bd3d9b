"""
METAR lookup for the reference weather station.

Purely advisory: the tracker calls lookup() on every accepted position
update and never looks at the result. Observations (and failures) are cached
for the TTL so a busy feed makes at most one request per TTL window.
"""
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional

import httpx

from tooclose.core.config import Settings, get_settings
from tooclose.services.stats import METAR_API_REQUESTS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MetarObservation:
    """Ambient conditions at the reference station."""
    station: str
    temp_c: Optional[float]
    elevation_m: Optional[float]
    raw: str = ""


def _parse_metar(station: str, data: Any) -> Optional[MetarObservation]:
    """Pick the newest observation out of an AWC JSON response."""
    if not isinstance(data, list) or not data:
        return None
    obs = data[0]
    if not isinstance(obs, dict):
        return None
    return MetarObservation(
        station=obs.get("icaoId") or station,
        temp_c=obs.get("temp"),
        elevation_m=obs.get("elev"),
        raw=obs.get("rawOb") or "",
    )


class MetarClient:
    """Fetches and caches the latest METAR for one station."""

    def __init__(
        self,
        station: str,
        ttl: int = 300,
        base_url: str = "https://aviationweather.gov/api/data",
        timeout: float = 5.0,
        clock: Callable[[], float] = time.time,
    ):
        self.station = station.upper()
        self.ttl = ttl
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._clock = clock
        self._cached: Optional[MetarObservation] = None
        self._fetched_at: Optional[float] = None

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> Optional["MetarClient"]:
        """Build a client, or None when weather lookups are disabled."""
        settings = settings or get_settings()
        if not settings.metar_enabled or not settings.metar_station:
            return None
        return cls(
            settings.metar_station,
            ttl=settings.metar_cache_ttl,
            base_url=settings.awc_base_url,
            timeout=settings.metar_timeout,
        )

    def lookup(self) -> Optional[MetarObservation]:
        """Return the cached observation, refreshing it once the TTL expires."""
        now = self._clock()
        if self._fetched_at is not None and now - self._fetched_at < self.ttl:
            return self._cached

        self._cached = self._fetch()
        self._fetched_at = now
        return self._cached

    def _fetch(self) -> Optional[MetarObservation]:
        try:
            with httpx.Client(timeout=self.timeout) as client:
                response = client.get(
                    f"{self.base_url}/metar",
                    params={"ids": self.station, "format": "json"},
                    headers={
                        "User-Agent": "tooclose/1.0 (proximity-detector)",
                        "Accept": "application/json",
                    },
                )
                response.raise_for_status()
                data = response.json() if response.text else []
        except httpx.HTTPStatusError as e:
            METAR_API_REQUESTS.labels(status="error").inc()
            logger.warning(f"METAR API error for {self.station}: {e.response.status_code}")
            return None
        except (httpx.HTTPError, ValueError) as e:
            METAR_API_REQUESTS.labels(status="error").inc()
            logger.warning(f"METAR request for {self.station} failed: {e}")
            return None

        METAR_API_REQUESTS.labels(status="success").inc()
        observation = _parse_metar(self.station, data)
        if observation:
            logger.debug(
                f"METAR {observation.station}: {observation.temp_c} C, "
                f"elevation {observation.elevation_m} m"
            )
        return observation
