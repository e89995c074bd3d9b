"""
Running counters and the periodic stats report.

RunningStats is owned by the pipeline and handed to the components that
mutate it. Prometheus counters keep process-lifetime totals alongside the
windowed values; no exporter is started here.
"""
import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

from prometheus_client import Counter
from rich.console import Console

from tooclose.core.config import Settings, get_settings
from tooclose.core.timestamps import format_ctime

logger = logging.getLogger(__name__)

# =============================================================================
# Prometheus Metrics
# =============================================================================

MESSAGES_PROCESSED = Counter(
    "tooclose_messages_total",
    "Total report lines read from the feed"
)
NEW_FLIGHTS = Counter(
    "tooclose_new_flights_total",
    "Total aircraft records created"
)
CONFLICTS_DETECTED = Counter(
    "tooclose_conflicts_total",
    "Total conflict pairs reported"
)
METAR_API_REQUESTS = Counter(
    "tooclose_metar_api_requests_total",
    "Total METAR API requests made",
    ["status"]  # success, error
)


@dataclass
class RunningStats:
    """Counters for the current report window."""

    message_count: int = 0
    max_plane_count: int = 0
    flight_count: int = 0
    next_report_at: float = 0.0

    def record_message(self) -> None:
        self.message_count += 1
        MESSAGES_PROCESSED.inc()

    def record_new_flight(self) -> None:
        self.flight_count += 1
        NEW_FLIGHTS.inc()

    def record_plane_count(self, count: int) -> None:
        if count > self.max_plane_count:
            self.max_plane_count = count

    def reset(self, now: float, interval: float) -> None:
        self.message_count = 0
        self.max_plane_count = 0
        self.flight_count = 0
        self.next_report_at = now + interval


class StatsReporter:
    """Prints a summary once per interval of wall-clock time, then resets."""

    def __init__(
        self,
        stats: RunningStats,
        settings: Optional[Settings] = None,
        console: Optional[Console] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.stats = stats
        self.settings = settings or get_settings()
        self.interval = self.settings.stats_interval_seconds
        self.console = console or Console(highlight=False)
        self._clock = clock
        self.stats.next_report_at = self._clock() + self.interval

    def maybe_report(self, table_size: int, now: Optional[float] = None) -> bool:
        """Print and reset the stats if the window has elapsed."""
        if now is None:
            now = self._clock()
        if self.stats.next_report_at > now:
            return False

        rate = self.stats.message_count / self.interval if self.interval else 0.0
        self.console.print(f"Hourly report {format_ctime(now)}:", markup=False)
        self.console.print(f"{'messages / sec':>25}: {rate:.1f}", markup=False)
        self.console.print(f"{'max concurrent flights':>25}: {self.stats.max_plane_count}", markup=False)
        self.console.print(f"{'new flights':>25}: {self.stats.flight_count}", markup=False)
        self.console.print(f"{'plane list count':>25}: {table_size}", markup=False)
        logger.info(
            f"Stats window closed: {self.stats.message_count} messages, "
            f"{self.stats.flight_count} new flights"
        )

        self.stats.reset(now, self.interval)
        return True
