"""
Applies decoded feed messages to the aircraft table.

Each message kind maps to a pure update function from (record, message) to
a new record. The tracker stores the result, then ages the table using the
message's own timestamp, so historical replays evict on the feed's clock
rather than the wall clock.
"""
import logging
import time
from dataclasses import replace
from typing import Optional

from tooclose.core.config import Settings, get_settings
from tooclose.core.geo import great_circle_distance_nm
from tooclose.models import (
    AircraftRecord,
    IdentityMessage,
    Message,
    Position,
    PositionMessage,
    VelocityMessage,
)
from tooclose.services.aircraft_table import AircraftTable
from tooclose.services.weather_cache import MetarClient

logger = logging.getLogger(__name__)

DEFAULT_POSITION_JUMP_NM = 3.0


def apply_identity(record: AircraftRecord, message: IdentityMessage) -> AircraftRecord:
    if not message.callsign:
        return record
    return replace(record, callsign=message.callsign)


def apply_velocity(record: AircraftRecord, message: VelocityMessage) -> AircraftRecord:
    return replace(record, ground_speed=message.ground_speed, last_speed=record.last_seen)


def apply_position(
    record: AircraftRecord,
    message: PositionMessage,
    max_jump_nm: float = DEFAULT_POSITION_JUMP_NM,
) -> AircraftRecord:
    """
    Take a new position fix and update the position confidence.

    The fix is always kept. Confidence counts consecutive fixes that are
    within max_jump_nm of the one before; a larger jump suggests a corrupt
    squitter and restarts the count from zero.
    """
    previous = record.previous_position
    if record.position_confidence > 0:
        previous = record.position

    position = Position.from_degrees(message.lat, message.lon)
    confidence = record.position_confidence + 1

    if confidence > 1 and previous is not None:
        jump = great_circle_distance_nm(
            position.lat_rad, position.lon_rad, previous.lat_rad, previous.lon_rad
        )
        if jump > max_jump_nm:
            logger.debug(f"{record.hex_id}: position jumped {jump:.1f} NM, resetting confidence")
            confidence = 0

    return replace(
        record,
        last_position_time=record.last_seen,
        altitude=message.altitude,
        previous_position=previous,
        position=position,
        position_confidence=confidence,
        raw_message=message.raw,
    )


class Tracker:
    """Keeps the aircraft table current with the feed."""

    def __init__(
        self,
        table: AircraftTable,
        settings: Optional[Settings] = None,
        weather: Optional[MetarClient] = None,
    ):
        self.table = table
        self.settings = settings or get_settings()
        self.weather = weather
        # stream clock; wall clock until the first valid message
        self.clock = int(time.time())

    def update(self, message: Message) -> AircraftRecord:
        """Apply one message, then evict stale aircraft at the message's time."""
        record = self.table.find_or_create(message.icao)
        record = replace(record, last_seen=message.timestamp)

        if isinstance(message, IdentityMessage):
            record = apply_identity(record, message)
        elif isinstance(message, VelocityMessage):
            record = apply_velocity(record, message)
        elif isinstance(message, PositionMessage):
            record = apply_position(record, message, self.settings.position_jump_nm)
            if self.weather is not None:
                self.weather.lookup()

        self.table.put(record)
        self.evict(message.timestamp)
        return record

    def evict(self, now: Optional[int] = None) -> list[AircraftRecord]:
        """Age the table at now, or at the last stream time seen."""
        if now is not None:
            self.clock = now
        return self.table.evict_stale(self.clock)
