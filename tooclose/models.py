"""
Data models for tracked aircraft, decoded feed messages, and conflict reports.
"""
from dataclasses import dataclass
from typing import Optional, Union

from tooclose.core.geo import deg2rad

UNKNOWN_CALLSIGN = "unknown"


@dataclass(frozen=True)
class Position:
    """Position fix in degrees with cached radians for distance math."""
    lat: float
    lon: float
    lat_rad: float
    lon_rad: float

    @classmethod
    def from_degrees(cls, lat: float, lon: float) -> "Position":
        return cls(lat=lat, lon=lon, lat_rad=deg2rad(lat), lon_rad=deg2rad(lon))


@dataclass
class AircraftRecord:
    """State for one tracked aircraft, keyed by its 24-bit ICAO address."""
    icao: int
    callsign: str = UNKNOWN_CALLSIGN
    last_seen: int = 0
    last_speed: int = 0
    last_position_time: int = 0
    position: Optional[Position] = None
    previous_position: Optional[Position] = None
    position_confidence: int = 0  # consecutive consistent position updates
    ground_speed: Optional[int] = None  # knots
    altitude: Optional[int] = None  # feet
    reported: bool = False
    raw_message: str = ""

    @property
    def hex_id(self) -> str:
        return f"{self.icao:06X}"

    @property
    def display_callsign(self) -> str:
        """Callsign up to its first space (feeds pad to 8 characters)."""
        return self.callsign.split(" ", 1)[0]


@dataclass(frozen=True)
class IdentityMessage:
    """Kind 1: identification and category."""
    icao: int
    timestamp: int
    callsign: str
    kind: int = 1


@dataclass(frozen=True)
class PositionMessage:
    """Kind 3: airborne position with barometric altitude."""
    icao: int
    timestamp: int
    altitude: int
    lat: float
    lon: float
    raw: str = ""
    kind: int = 3


@dataclass(frozen=True)
class VelocityMessage:
    """Kind 4: airborne velocity."""
    icao: int
    timestamp: int
    ground_speed: int
    kind: int = 4


Message = Union[IdentityMessage, PositionMessage, VelocityMessage]


@dataclass(frozen=True)
class ConflictReport:
    """A pair of aircraft found inside the separation limits."""
    aircraft_a: AircraftRecord
    aircraft_b: AircraftRecord
    horizontal_nm: float
    vertical_ft: int
    time_sep: int
    detected_at: int

    @property
    def pair_key(self) -> str:
        a, b = sorted([self.aircraft_a.hex_id, self.aircraft_b.hex_id])
        return f"conflict:{a}:{b}"
