"""Logging contract shared by every engine service."""

from abc import ABC, abstractmethod

# Ordered from most to least verbose
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


class ILoggingService(ABC):
    """
    Leveled, component-tagged logger.

    Services receive a child logger (`logger.child("Combine")`) so a single
    game session reads as one interleaved stream.
    """

    @abstractmethod
    def is_enabled_for(self, level: str) -> bool:
        """True if messages at `level` are emitted."""

    @abstractmethod
    def log(self, level: str, message: str) -> None:
        """Emit `message` at one of LOG_LEVELS."""

    @abstractmethod
    def debug(self, message: str) -> None: ...

    @abstractmethod
    def info(self, message: str) -> None: ...

    @abstractmethod
    def warning(self, message: str) -> None: ...

    @abstractmethod
    def error(self, message: str) -> None: ...

    @abstractmethod
    def child(self, component: str) -> "ILoggingService":
        """Logger that prefixes every line with `[component]`."""

    @abstractmethod
    def time_operation(self, operation_name: str):
        """Context manager logging how long the wrapped block took."""
