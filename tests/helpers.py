"""
SBS-1 line builders for tests.
"""
from tooclose.core.timestamps import date_to_epoch

BASE_LAT = 34.2000
BASE_LON = -118.4900
FEED_DATE = "2024/05/01"

# ~0.1 NM of latitude
LAT_0_1_NM = 0.0016668
# ~8 NM of latitude
LAT_8_NM = 0.13334


def feed_time(second: int) -> str:
    """Feed time field for 12:00:00 plus second."""
    minutes, seconds = divmod(second, 60)
    return f"12:{minutes:02d}:{seconds:02d}.000"


def feed_epoch(second: int) -> int:
    return date_to_epoch(FEED_DATE, feed_time(second))


def sbs_line(
    kind: int,
    icao: str = "A1B2C3",
    second: int = 0,
    callsign: str = "",
    altitude: str = "",
    speed: str = "",
    lat: str = "",
    lon: str = "",
    date: str = FEED_DATE,
    time_field: str | None = None,
) -> str:
    """Build a dump1090 port 30003 line."""
    time_s = time_field if time_field is not None else feed_time(second)
    fields = [
        "MSG", str(kind), "1", "1", icao, "1",
        date, time_s, date, time_s,
        callsign, altitude, speed, "",
        lat, lon, "", "", "0", "0", "0", "0",
    ]
    return ",".join(fields) + "\r\n"


def position_line(icao: str, second: int, altitude: int, lat: float, lon: float) -> str:
    return sbs_line(3, icao=icao, second=second, altitude=str(altitude), lat=f"{lat:.5f}", lon=f"{lon:.5f}")


def velocity_line(icao: str, second: int, speed: int) -> str:
    return sbs_line(4, icao=icao, second=second, speed=str(speed))


def identity_line(icao: str, second: int, callsign: str) -> str:
    return sbs_line(1, icao=icao, second=second, callsign=callsign)
