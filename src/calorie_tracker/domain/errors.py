"""Error types raised by the calorie tracker."""


class CalorieTrackerError(Exception):
    """Base class for application errors."""


class ValidationError(CalorieTrackerError):
    """Raised when user-supplied input is rejected."""


class NotFoundError(CalorieTrackerError):
    """Reserved for lookups that must not fall back to a default.

    Absent users and day logs currently yield defaults instead of raising.
    """


class ExternalServiceError(CalorieTrackerError):
    """Raised when the recognition endpoint fails or cannot be reached."""


class StaleRecordError(CalorieTrackerError):
    """Raised when a user document changed after it was loaded."""


class UnreadableDataError(CalorieTrackerError):
    """Raised instead of overwriting stored data that could not be parsed."""
