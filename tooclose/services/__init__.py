"""Services package."""
from tooclose.services.parser import parse_line, is_report_line
from tooclose.services.stats import RunningStats, StatsReporter
from tooclose.services.aircraft_table import AircraftTable
from tooclose.services.weather_cache import MetarClient, MetarObservation
from tooclose.services.tracker import Tracker, apply_identity, apply_position, apply_velocity
from tooclose.services.safety import ConflictDetector
from tooclose.services.notifications import NotificationManager, load_notification_urls
from tooclose.services.alerts import AlertLog, AlertReporter, format_alert, format_log_line
from tooclose.services.pipeline import ProximityPipeline

__all__ = [
    # Feed decoding
    "parse_line",
    "is_report_line",
    # Tracking
    "AircraftTable",
    "Tracker",
    "apply_identity",
    "apply_position",
    "apply_velocity",
    # Detection and output
    "ConflictDetector",
    "AlertLog",
    "AlertReporter",
    "format_alert",
    "format_log_line",
    "NotificationManager",
    "load_notification_urls",
    # Collaborators
    "MetarClient",
    "MetarObservation",
    "RunningStats",
    "StatsReporter",
    "ProximityPipeline",
]
