"""
Application errors.

The API layer translates these into HTTPException responses.
"""


class TrackerError(Exception):
    """Base class for immigration tracker errors."""


class UnknownProfileError(TrackerError):
    """Raised when a deployment profile has no registered database binding."""

    def __init__(self, profile: str):
        self.profile = profile
        super().__init__(f"No database binding registered for profile '{profile}'")


class StorageUnavailableError(TrackerError):
    """Raised when the configured database cannot be reached."""

    def __init__(self, url: str, cause: Exception = None):
        self.url = url
        self.cause = cause
        message = f"Database unavailable at {url}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
