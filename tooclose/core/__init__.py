"""Core package containing configuration, exceptions, and geo/time utilities."""
from tooclose.core.config import get_settings, Settings
from tooclose.core.exceptions import TooCloseError, AircraftTableFullError, CredentialFileError
from tooclose.core.geo import (
    deg2rad,
    rad2deg,
    great_circle_distance_nm,
    is_valid_position,
)
from tooclose.core.timestamps import date_to_epoch, format_ctime

__all__ = [
    "get_settings",
    "Settings",
    "TooCloseError",
    "AircraftTableFullError",
    "CredentialFileError",
    "deg2rad",
    "rad2deg",
    "great_circle_distance_nm",
    "is_valid_position",
    "date_to_epoch",
    "format_ctime",
]
