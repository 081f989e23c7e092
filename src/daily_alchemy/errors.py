"""Exceptions raised across the Daily Alchemy engine."""

from typing import Optional


class DailyAlchemyError(Exception):
    """Base class for engine errors."""


class CombinationFailed(DailyAlchemyError):
    """The combination service failed or returned an unusable answer."""


class PuzzleUnavailable(DailyAlchemyError):
    """The daily puzzle could not be fetched."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class StorageQuotaExceeded(DailyAlchemyError):
    """A device-local write does not fit in the storage quota."""


class PersistenceNetworkError(DailyAlchemyError):
    """A remote persistence call (saves, stats, leaderboard) failed."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class SaveFileError(DailyAlchemyError):
    """An exported save file is malformed or unsupported."""


class InvalidTransition(DailyAlchemyError):
    """A controller operation was invoked from a state that does not allow it."""
