"""
Proximity conflict detection between tracked aircraft.

After every feed line the detector compares each pair of eligible aircraft.
A pair is in conflict when both position fixes share the same timestamp and
the aircraft are inside both the horizontal and the vertical limit. Each
aircraft is reported at most once per tracking lifetime.
"""
import logging
from dataclasses import replace
from typing import Optional

from tooclose.core.config import Settings, get_settings
from tooclose.core.geo import great_circle_distance_nm
from tooclose.models import AircraftRecord, ConflictReport
from tooclose.services.aircraft_table import AircraftTable

logger = logging.getLogger(__name__)

SPEED_POLICIES = ("any", "both")


class ConflictDetector:
    """
    Pairwise separation check over the aircraft table.

    Eligibility per aircraft:
    - not already part of a reported conflict
    - position confidence above the threshold
    - altitude known and at or above the minimum
    Speed condition per pair, by policy:
    - "any": at least one aircraft at or above the speed minimum
    - "both": both aircraft at or above the speed minimum
    """

    def __init__(self, settings: Optional[Settings] = None):
        settings = settings or get_settings()
        if settings.speed_policy not in SPEED_POLICIES:
            raise ValueError(f"Unknown speed policy {settings.speed_policy!r}")
        self.horizontal_limit_nm = settings.horizontal_separation_nm
        self.vertical_limit_ft = settings.vertical_separation_ft
        self.speed_minimum = settings.speed_minimum_kt
        self.altitude_minimum = settings.altitude_minimum_ft
        self.min_confidence = settings.min_position_confidence
        self.speed_policy = settings.speed_policy

    def is_eligible(self, record: AircraftRecord) -> bool:
        return (
            not record.reported
            and record.position is not None
            and record.position_confidence > self.min_confidence
            and record.altitude is not None
            and record.altitude >= self.altitude_minimum
        )

    def _is_fast(self, record: AircraftRecord) -> bool:
        return record.ground_speed is not None and record.ground_speed >= self.speed_minimum

    def pair_is_eligible(self, a: AircraftRecord, b: AircraftRecord) -> bool:
        if not (self.is_eligible(a) and self.is_eligible(b)):
            return False
        if self.speed_policy == "both":
            return self._is_fast(a) and self._is_fast(b)
        return self._is_fast(a) or self._is_fast(b)

    def check_pair(
        self, a: AircraftRecord, b: AircraftRecord
    ) -> Optional[ConflictReport]:
        """Return a report if the two aircraft violate separation, else None."""
        if not self.pair_is_eligible(a, b):
            return None

        horizontal = great_circle_distance_nm(
            a.position.lat_rad, a.position.lon_rad,
            b.position.lat_rad, b.position.lon_rad,
        )
        vertical = abs(a.altitude - b.altitude)
        time_sep = abs(a.last_position_time - b.last_position_time)

        if horizontal < self.horizontal_limit_nm and vertical < self.vertical_limit_ft and time_sep == 0:
            return ConflictReport(
                aircraft_a=a,
                aircraft_b=b,
                horizontal_nm=horizontal,
                vertical_ft=vertical,
                time_sep=time_sep,
                detected_at=a.last_seen,
            )
        return None

    def scan(self, table: AircraftTable) -> list[ConflictReport]:
        """Check every pair in the table and mark reported aircraft."""
        reports = []
        records = list(table)

        for i in range(len(records) - 1):
            for j in range(i + 1, len(records)):
                report = self.check_pair(records[i], records[j])
                if report is None:
                    continue

                records[i] = replace(records[i], reported=True)
                records[j] = replace(records[j], reported=True)
                table.put(records[i])
                table.put(records[j])
                reports.append(report)
                logger.info(
                    f"Conflict {report.aircraft_a.hex_id}/{report.aircraft_b.hex_id}: "
                    f"{report.horizontal_nm:.3f} NM, {report.vertical_ft} ft"
                )

        return reports
