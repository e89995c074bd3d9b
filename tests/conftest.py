"""
Shared pytest fixtures for detector tests.

Provides settings with network lookups disabled and pre-wired tables,
trackers and pipelines.
"""
import os

import pytest

# Set test environment variables before importing the package
os.environ.setdefault("TOOCLOSE_METAR_ENABLED", "false")
os.environ.setdefault("TOOCLOSE_STATS_INTERVAL_SECONDS", "3600")

from tooclose.core.config import Settings
from tooclose.services.aircraft_table import AircraftTable
from tooclose.services.pipeline import ProximityPipeline
from tooclose.services.stats import RunningStats
from tooclose.services.tracker import Tracker


@pytest.fixture
def settings():
    """Default thresholds with network lookups off."""
    return Settings(metar_enabled=False)


@pytest.fixture
def stats():
    return RunningStats()


@pytest.fixture
def table(stats):
    return AircraftTable(capacity=16, stale_after=10, stats=stats)


@pytest.fixture
def tracker(table, settings):
    return Tracker(table, settings)


@pytest.fixture
def pipeline(settings):
    return ProximityPipeline(settings)
