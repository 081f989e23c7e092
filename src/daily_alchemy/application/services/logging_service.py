"""Logging service implementation."""

import asyncio
import functools
import time
from datetime import datetime
from typing import Optional

from daily_alchemy.application.interfaces import LOG_LEVELS, ILoggingService

LEVEL_HIERARCHY = {level: rank for rank, level in enumerate(LOG_LEVELS)}
LEVEL_ICONS = {"DEBUG": "🔍", "INFO": "ℹ️", "WARNING": "⚠️", "ERROR": "❌"}


class LoggingService(ILoggingService):
    """
    Console logging with timestamps, level filtering and component tags.

    Child loggers share the parent's level and prefix every line with
    their component, e.g. `[Controller]`.
    """

    def __init__(self, log_level: str = "INFO", component: Optional[str] = None, enable_timing: bool = True):
        """
        Initialize logging service.

        Args:
            log_level: Minimum log level to output (DEBUG, INFO, WARNING, ERROR)
            component: Optional tag printed before every message
            enable_timing: Emit time_operation() lines
        """
        self.log_level = log_level.upper()
        self.component = component
        self.enable_timing = enable_timing

    def is_enabled_for(self, level: str) -> bool:
        return LEVEL_HIERARCHY.get(level.upper(), 1) >= LEVEL_HIERARCHY.get(self.log_level, 1)

    def log(self, level: str, message: str) -> None:
        """Log a message at the specified level."""
        level = level.upper()
        if not self.is_enabled_for(level):
            return

        timestamp = datetime.now().strftime("%H:%M:%S")
        icon = LEVEL_ICONS.get(level, "📝")
        tag = f"[{self.component}] " if self.component else ""
        print(f"[{timestamp}] {icon} {level}: {tag}{message}")

    def debug(self, message: str) -> None:
        self.log("DEBUG", message)

    def info(self, message: str) -> None:
        self.log("INFO", message)

    def warning(self, message: str) -> None:
        self.log("WARNING", message)

    def error(self, message: str) -> None:
        self.log("ERROR", message)

    def child(self, component: str) -> "LoggingService":
        return LoggingService(log_level=self.log_level, component=component, enable_timing=self.enable_timing)

    def time_operation(self, operation_name: str):
        """Context manager for timing operations."""
        return TimingContext(self, operation_name)


class TimingContext:
    """Context manager for timing operations."""

    def __init__(self, logging_service: LoggingService, operation_name: str):
        self.logger = logging_service
        self.operation_name = operation_name
        self.start_time = None

    def __enter__(self):
        self.start_time = time.perf_counter()
        if self.logger.enable_timing:
            self.logger.debug(f"⏱️ Starting {self.operation_name}...")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.start_time is None:
            return
        execution_time = time.perf_counter() - self.start_time
        if exc_type is None:
            if self.logger.enable_timing:
                self.logger.debug(f"✅ {self.operation_name} completed in {execution_time:.3f}s")
        else:
            self.logger.error(f"❌ {self.operation_name} failed after {execution_time:.3f}s: {exc_val}")


def timing_decorator(operation_name: str):
    """Time a method (plain or coroutine) using the instance's `logger`."""

    def decorator(func):
        if asyncio.iscoroutinefunction(func):

            @functools.wraps(func)
            async def async_wrapper(self, *args, **kwargs):
                logger = getattr(self, "logger", None)
                if not logger:
                    return await func(self, *args, **kwargs)
                with logger.time_operation(operation_name):
                    return await func(self, *args, **kwargs)

            return async_wrapper

        @functools.wraps(func)
        def wrapper(self, *args, **kwargs):
            logger = getattr(self, "logger", None)
            if not logger:
                return func(self, *args, **kwargs)
            with logger.time_operation(operation_name):
                return func(self, *args, **kwargs)

        return wrapper

    return decorator
