"""Tests for applying feed messages to tracked aircraft"""
from unittest.mock import MagicMock

import pytest

from tests.helpers import BASE_LAT, BASE_LON, LAT_0_1_NM, LAT_8_NM
from tooclose.models import AircraftRecord, IdentityMessage, PositionMessage, VelocityMessage
from tooclose.services.tracker import Tracker, apply_identity, apply_position, apply_velocity


def _position(t, lat=BASE_LAT, lon=BASE_LON, altitude=5000, icao=0xA1):
    return PositionMessage(icao=icao, timestamp=t, altitude=altitude, lat=lat, lon=lon, raw=f"raw-{t}")


class TestPureUpdates:
    """Tests for the per-kind update functions"""

    def test_identity_sets_callsign(self):
        record = AircraftRecord(icao=1)
        updated = apply_identity(record, IdentityMessage(icao=1, timestamp=5, callsign="DAL22"))
        assert updated.callsign == "DAL22"
        assert record.callsign == "unknown"

    def test_identity_ignores_empty(self):
        record = AircraftRecord(icao=1, callsign="DAL22")
        assert apply_identity(record, IdentityMessage(icao=1, timestamp=5, callsign="")).callsign == "DAL22"

    def test_velocity(self):
        record = AircraftRecord(icao=1, last_seen=42)
        updated = apply_velocity(record, VelocityMessage(icao=1, timestamp=42, ground_speed=250))
        assert updated.ground_speed == 250
        assert updated.last_speed == 42

    def test_first_position(self):
        record = AircraftRecord(icao=1, last_seen=10)
        updated = apply_position(record, _position(10))
        assert updated.position_confidence == 1
        assert updated.previous_position is None
        assert updated.position.lat == BASE_LAT
        assert updated.last_position_time == 10
        assert updated.altitude == 5000
        assert updated.raw_message == "raw-10"

    def test_consistent_positions_build_confidence(self):
        record = AircraftRecord(icao=1)
        for t in range(4):
            record = apply_position(record, _position(t, lat=BASE_LAT + t * LAT_0_1_NM))
        assert record.position_confidence == 4
        assert record.previous_position.lat == pytest.approx(BASE_LAT + 2 * LAT_0_1_NM)

    def test_jump_resets_confidence(self):
        record = AircraftRecord(icao=1)
        for t in range(5):
            record = apply_position(record, _position(t))
        record = apply_position(record, _position(5, lat=BASE_LAT + LAT_8_NM))
        assert record.position_confidence == 0
        # the fix itself is kept
        assert record.position.lat == pytest.approx(BASE_LAT + LAT_8_NM)
        assert record.previous_position.lat == pytest.approx(BASE_LAT)

    def test_rebuild_after_jump(self):
        record = AircraftRecord(icao=1)
        for t in range(3):
            record = apply_position(record, _position(t))
        jumped = BASE_LAT + LAT_8_NM
        record = apply_position(record, _position(3, lat=jumped))
        confidences = []
        for t in range(4, 7):
            record = apply_position(record, _position(t, lat=jumped))
            confidences.append(record.position_confidence)
        assert confidences == [1, 2, 3]

    def test_jump_threshold(self):
        record = AircraftRecord(icao=1)
        record = apply_position(record, _position(0))
        # ~2.5 NM is a plausible move between squitters
        record = apply_position(record, _position(1, lat=BASE_LAT + 25 * LAT_0_1_NM))
        assert record.position_confidence == 2
        record = apply_position(record, _position(2, lat=BASE_LAT + 25 * LAT_0_1_NM), max_jump_nm=1.0)
        assert record.position_confidence == 3


class TestTracker:
    """Tests for the tracker orchestration"""

    def test_creates_and_stamps(self, tracker, table):
        record = tracker.update(VelocityMessage(icao=0xA1, timestamp=1000, ground_speed=300))
        assert table.get(0xA1) == record
        assert record.last_seen == 1000
        assert record.ground_speed == 300

    def test_position_time_is_report_time(self, tracker, table):
        tracker.update(_position(1000))
        assert table.get(0xA1).last_position_time == 1000

    def test_updates_in_place(self, tracker, table):
        tracker.update(IdentityMessage(icao=0xA1, timestamp=1000, callsign="UAL9"))
        tracker.update(VelocityMessage(icao=0xA1, timestamp=1001, ground_speed=300))
        tracker.update(_position(1002))
        record = table.get(0xA1)
        assert len(table) == 1
        assert record.callsign == "UAL9"
        assert record.ground_speed == 300
        assert record.altitude == 5000
        assert record.last_seen == 1002

    def test_evicts_on_stream_clock(self, tracker, table):
        tracker.update(_position(1000, icao=0xA1))
        tracker.update(_position(1011, icao=0xB2))
        assert 0xA1 not in table
        assert 0xB2 in table
        assert tracker.clock == 1011

    def test_evict_uses_last_stream_time(self, tracker, table):
        tracker.update(_position(1000))
        assert tracker.evict() == []
        assert [r.icao for r in tracker.evict(1011)] == [0xA1]

    def test_weather_lookup_on_position_only(self, table, settings):
        weather = MagicMock()
        tracker = Tracker(table, settings, weather=weather)
        tracker.update(VelocityMessage(icao=0xA1, timestamp=1000, ground_speed=300))
        tracker.update(IdentityMessage(icao=0xA1, timestamp=1000, callsign="UAL9"))
        assert weather.lookup.call_count == 0
        tracker.update(_position(1001))
        assert weather.lookup.call_count == 1

    def test_weather_result_ignored(self, table, settings):
        weather = MagicMock()
        weather.lookup.return_value = None
        tracker = Tracker(table, settings, weather=weather)
        record = tracker.update(_position(1001))
        assert record.position_confidence == 1
