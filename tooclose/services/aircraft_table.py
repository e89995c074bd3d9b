"""
Bounded table of tracked aircraft keyed by ICAO address.
"""
import logging
from typing import Iterator, Optional

from tooclose.core.exceptions import AircraftTableFullError
from tooclose.models import AircraftRecord
from tooclose.services.stats import RunningStats

logger = logging.getLogger(__name__)


class AircraftTable:
    """
    Owns every AircraftRecord currently being tracked.

    Records are created on the first message from an unseen address, replaced
    in place on updates, and evicted after stale_after seconds of silence.
    Iteration follows creation order. Filling the table is fatal.
    """

    def __init__(
        self,
        capacity: int = 1024,
        stale_after: int = 10,
        stats: Optional[RunningStats] = None,
    ):
        self.capacity = capacity
        self.stale_after = stale_after
        self.stats = stats or RunningStats()
        self._records: dict[int, AircraftRecord] = {}

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, icao: int) -> bool:
        return icao in self._records

    def __iter__(self) -> Iterator[AircraftRecord]:
        return iter(self.active_records())

    def get(self, icao: int) -> Optional[AircraftRecord]:
        return self._records.get(icao)

    def find_or_create(self, icao: int) -> AircraftRecord:
        """Return the active record for icao, creating a fresh one if needed."""
        record = self._records.get(icao)
        if record is not None:
            return record

        if len(self._records) >= self.capacity:
            # if this happens something incredibly strange is going on
            raise AircraftTableFullError(self.capacity, icao)

        record = AircraftRecord(icao=icao)
        self._records[icao] = record
        self.stats.record_new_flight()
        logger.debug(f"New aircraft {record.hex_id} ({len(self._records)} tracked)")
        return record

    def put(self, record: AircraftRecord) -> None:
        """Store an updated record for an identity already in the table."""
        if record.icao not in self._records:
            raise KeyError(f"{record.icao:06X} is not tracked")
        self._records[record.icao] = record

    def evict_stale(self, now: int) -> list[AircraftRecord]:
        """Remove records not seen for more than stale_after seconds."""
        self.stats.record_plane_count(len(self._records))

        stale = [
            record for record in self._records.values()
            if now - record.last_seen > self.stale_after
        ]
        for record in stale:
            del self._records[record.icao]
            logger.debug(f"Evicted {record.hex_id} ({record.display_callsign}), last seen {now - record.last_seen}s ago")
        return stale

    def active_records(self) -> list[AircraftRecord]:
        return list(self._records.values())
