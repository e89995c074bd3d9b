"""
Exception classes for the detector.

Noise in the feed never raises; these cover the conditions that must stop
the process or a requested feature.
"""


class TooCloseError(Exception):
    """Base exception for all detector errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} (details: {self.details})"
        return self.message


class AircraftTableFullError(TooCloseError):
    """
    Raised when a new aircraft arrives and the table is at capacity.

    This indicates either a capacity misconfiguration or a runaway or
    duplicated feed. Tracking cannot continue without undercounting traffic.
    """

    def __init__(self, capacity: int, icao: int | None = None):
        details = {"capacity": capacity}
        if icao is not None:
            details["icao"] = f"{icao:06X}"
        super().__init__("Aircraft table is full", details)
        self.capacity = capacity
        self.icao = icao


class CredentialFileError(TooCloseError):
    """Raised when a feature needs a credential file that is missing or empty."""

    def __init__(self, path: str, reason: str = "not found"):
        super().__init__(f"Credential file {path} {reason}", {"path": path})
        self.path = path
