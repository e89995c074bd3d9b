"""
BaseStation (SBS-1) message parser.

Decodes one comma-separated line from a dump1090 port 30003 feed into a
typed message. The feed is noisy: short, garbled, or out-of-range lines are
dropped with a debug log and never raise.

Field layout (0-based):
    0 tag ("MSG"), 1 kind, 2 session id, 3 aircraft id, 4 ICAO hex,
    5 flight id, 6 date generated, 7 time generated, 8 date logged,
    9 time logged, 10 callsign, 11 altitude, 12 ground speed, 13 track,
    14 latitude, 15 longitude, ...
"""
import logging
import math
from typing import Optional

from tooclose.core.geo import is_valid_position
from tooclose.core.timestamps import date_to_epoch
from tooclose.models import IdentityMessage, Message, PositionMessage, VelocityMessage

logger = logging.getLogger(__name__)

REPORT_TAG = "MSG"

KIND_IDENTITY = 1
KIND_POSITION = 3
KIND_VELOCITY = 4

FIELD_KIND = 1
FIELD_ICAO = 4
FIELD_FLIGHT_ID = 5
FIELD_DATE = 6
FIELD_TIME = 7
FIELD_CALLSIGN = 10
FIELD_ALTITUDE = 11
FIELD_GROUND_SPEED = 12
FIELD_LATITUDE = 14
FIELD_LONGITUDE = 15

ALTITUDE_MIN_FT = -500
ALTITUDE_MAX_FT = 100000
SPEED_MAX_KT = 3000
MAX_ICAO = 0xFFFFFF
RAW_MESSAGE_LEN = 255


def is_report_line(line: str) -> bool:
    """Check whether a line carries the report tag in its first field."""
    return line.split(",", 1)[0].startswith(REPORT_TAG)


def _parse_int(value: str) -> Optional[int]:
    try:
        return int(value.strip())
    except ValueError:
        return None


def _parse_float(value: str) -> Optional[float]:
    try:
        result = float(value.strip())
    except ValueError:
        return None
    return result if math.isfinite(result) else None


def _parse_identity(fields: list[str], icao: int, timestamp: int) -> Optional[IdentityMessage]:
    callsign = fields[FIELD_CALLSIGN].strip()
    if not callsign:
        return None
    return IdentityMessage(icao=icao, timestamp=timestamp, callsign=callsign)


def _parse_position(
    fields: list[str], icao: int, timestamp: int, raw: str
) -> Optional[PositionMessage]:
    altitude = _parse_int(fields[FIELD_ALTITUDE])
    if altitude is None or altitude < ALTITUDE_MIN_FT or altitude > ALTITUDE_MAX_FT:
        logger.debug(f"{icao:06X}: bad altitude {fields[FIELD_ALTITUDE]!r}")
        return None

    lat = _parse_float(fields[FIELD_LATITUDE])
    lon = _parse_float(fields[FIELD_LONGITUDE])
    if not is_valid_position(lat, lon):
        # bad squitter
        logger.debug(f"{icao:06X}: bad position {fields[FIELD_LATITUDE]!r},{fields[FIELD_LONGITUDE]!r}")
        return None

    return PositionMessage(
        icao=icao, timestamp=timestamp, altitude=altitude, lat=lat, lon=lon, raw=raw
    )


def _parse_velocity(fields: list[str], icao: int, timestamp: int) -> Optional[VelocityMessage]:
    speed = _parse_float(fields[FIELD_GROUND_SPEED])
    if speed is None:
        return None
    speed = int(speed)
    if speed <= 0 or speed > SPEED_MAX_KT:
        logger.debug(f"{icao:06X}: ground speed {speed} out of range")
        return None
    return VelocityMessage(icao=icao, timestamp=timestamp, ground_speed=speed)


def parse_line(line: str) -> Optional[Message]:
    """
    Decode one feed line.

    Returns an IdentityMessage, PositionMessage or VelocityMessage, or None if
    the line is not a report, is of a kind we do not track, or fails any
    field check.
    """
    raw = line.rstrip("\r\n")
    fields = raw.split(",")
    if not fields[0].startswith(REPORT_TAG):
        return None

    try:
        kind = _parse_int(fields[FIELD_KIND])
        if kind not in (KIND_IDENTITY, KIND_POSITION, KIND_VELOCITY):
            return None

        try:
            icao = int(fields[FIELD_ICAO].strip(), 16)
        except ValueError:
            logger.debug(f"Bad ICAO field {fields[FIELD_ICAO]!r}")
            return None
        if icao < 0 or icao > MAX_ICAO:
            return None

        if not fields[FIELD_FLIGHT_ID] or not fields[FIELD_DATE] or not fields[FIELD_TIME]:
            return None
        timestamp = date_to_epoch(fields[FIELD_DATE], fields[FIELD_TIME])
        if timestamp is None:
            return None

        if kind == KIND_IDENTITY:
            return _parse_identity(fields, icao, timestamp)
        if kind == KIND_POSITION:
            return _parse_position(fields, icao, timestamp, raw[:RAW_MESSAGE_LEN])
        return _parse_velocity(fields, icao, timestamp)
    except IndexError:
        # partial line, expected noise
        return None
