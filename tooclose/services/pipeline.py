"""
The detection loop: parse, update, evict, detect, report.
"""
import logging
import threading
from typing import Iterable, Optional

from tooclose.core.config import Settings, get_settings
from tooclose.models import ConflictReport
from tooclose.services.aircraft_table import AircraftTable
from tooclose.services.alerts import AlertReporter
from tooclose.services.parser import is_report_line, parse_line
from tooclose.services.safety import ConflictDetector
from tooclose.services.stats import RunningStats, StatsReporter
from tooclose.services.tracker import Tracker
from tooclose.services.weather_cache import MetarClient

logger = logging.getLogger(__name__)


class ProximityPipeline:
    """
    Processes feed lines one at a time against a single aircraft table.

    Each step holds one lock from update through detection so the detector
    never sees a table mid-update, even if lines are pushed from more than
    one thread. Alerts are dispatched after the lock is released.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        reporter: Optional[AlertReporter] = None,
        stats_reporter: Optional[StatsReporter] = None,
        weather: Optional[MetarClient] = None,
    ):
        self.settings = settings or get_settings()
        self.stats = stats_reporter.stats if stats_reporter else RunningStats()
        self.table = AircraftTable(
            capacity=self.settings.table_capacity,
            stale_after=self.settings.stale_after_seconds,
            stats=self.stats,
        )
        self.tracker = Tracker(self.table, self.settings, weather=weather)
        self.detector = ConflictDetector(self.settings)
        self.reporter = reporter
        self.stats_reporter = stats_reporter
        self.conflict_count = 0
        self._lock = threading.Lock()

    def process_line(self, line: str) -> list[ConflictReport]:
        """Run one line through the pipeline and return any new conflicts."""
        with self._lock:
            if is_report_line(line):
                self.stats.record_message()

            message = parse_line(line)
            if message is not None:
                self.tracker.update(message)
            else:
                self.tracker.evict()

            reports = self.detector.scan(self.table)
            self.conflict_count += len(reports)

            if self.stats_reporter is not None:
                self.stats_reporter.maybe_report(len(self.table))

        # reports are frozen snapshots; output and notifications run unlocked
        if self.reporter is not None:
            for report in reports:
                self.reporter.report(report)

        return reports

    def run(self, lines: Iterable[str]) -> int:
        """Consume lines until the source ends. Returns conflicts found."""
        for line in lines:
            self.process_line(line)
        logger.info(f"Input ended: {self.conflict_count} conflicts, {len(self.table)} aircraft tracked")
        return self.conflict_count
