"""
Conflict alert output: console lines, the daily log file, and notifications.
"""
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from rich.console import Console

from tooclose.core.config import Settings, get_settings
from tooclose.core.timestamps import format_ctime
from tooclose.models import AircraftRecord, ConflictReport
from tooclose.services.notifications import NotificationManager
from tooclose.services.stats import CONFLICTS_DETECTED

logger = logging.getLogger(__name__)


def _speed(record: AircraftRecord) -> int:
    return record.ground_speed if record.ground_speed is not None else -1


def _position(record: AircraftRecord) -> tuple[float, float]:
    if record.position is None:
        return 0.0, 0.0
    return record.position.lat, record.position.lon


def _describe(record: AircraftRecord) -> str:
    lat, lon = _position(record)
    return (
        f"{record.hex_id} {record.display_callsign} {lat:.5f},{lon:.5f} "
        f"{record.altitude}ft {_speed(record)}kts"
    )


def format_alert(report: ConflictReport, tracking_url: str = "https://globe.adsb.fi/?icao=") -> str:
    """Human-readable alert: summary line, raw messages, tracking links."""
    a, b = report.aircraft_a, report.aircraft_b
    lines = [
        f"0: {_describe(a)} | 1: {_describe(b)} | "
        f"horiz: {report.horizontal_nm:2.3f}, vert: {report.vertical_ft}, "
        f"time: {format_ctime(report.detected_at)}",
        f"\t{a.raw_message}",
        f"\t{b.raw_message}",
        f"\t{tracking_url}{a.icao:x}",
        f"\t{tracking_url}{b.icao:x}",
    ]
    return "\n".join(lines)


def _log_plane(record: AircraftRecord) -> str:
    lat, lon = _position(record)
    return "#".join([
        record.hex_id,
        record.display_callsign,
        f"{lat:.5f}",
        f"{lon:.5f}",
        str(record.altitude),
        str(_speed(record)),
        record.raw_message,
    ])


def format_log_line(report: ConflictReport) -> str:
    """One #-delimited log record, newline terminated."""
    return (
        f"{report.horizontal_nm:2.3f}#{report.vertical_ft}#{format_ctime(report.detected_at)}#"
        f"{_log_plane(report.aircraft_a)}#{_log_plane(report.aircraft_b)}\n"
    )


class AlertLog:
    """Appends conflicts to <log_dir>/<basename>-YYYY-MM-DD.log."""

    def __init__(self, log_dir: str = "./log", basename: str = "separation"):
        self.log_dir = Path(log_dir)
        self.basename = basename

    def path_for(self, epoch: int) -> Path:
        day = datetime.fromtimestamp(epoch).strftime("%Y-%m-%d")
        return self.log_dir / f"{self.basename}-{day}.log"

    def append(self, report: ConflictReport) -> bool:
        """Write one record. Returns False if the write failed."""
        path = self.path_for(report.detected_at)
        try:
            self.log_dir.mkdir(parents=True, exist_ok=True)
            with open(path, "a", encoding="utf-8") as f:
                f.write(format_log_line(report))
        except OSError as e:
            logger.error(
                f"Failed to log conflict {report.aircraft_a.hex_id}/{report.aircraft_b.hex_id} to {path}: {e}"
            )
            return False
        return True


class AlertReporter:
    """Prints each conflict and fans it out to the log file and notifier."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        console: Optional[Console] = None,
        alert_log: Optional[AlertLog] = None,
        notifier: Optional[NotificationManager] = None,
    ):
        self.settings = settings or get_settings()
        self.console = console or Console(highlight=False)
        self.alert_log = alert_log
        self.notifier = notifier

    def report(self, report: ConflictReport) -> None:
        CONFLICTS_DETECTED.inc()
        self.console.print(
            format_alert(report, self.settings.tracking_url), markup=False, soft_wrap=True
        )
        if self.alert_log is not None:
            self.alert_log.append(report)
        if self.notifier is not None:
            self.notifier.notify_conflict(report)
