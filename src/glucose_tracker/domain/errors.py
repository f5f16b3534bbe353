"""Domain errors."""


class GlucoseTrackerError(Exception):
    """Base error for the glucose tracker."""


class ValidationError(GlucoseTrackerError):
    """User-supplied input was rejected before any state change."""


class RequestError(GlucoseTrackerError):
    """A nutrition database request failed."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class StorageReadError(GlucoseTrackerError):
    """Persisted collection data is malformed."""
