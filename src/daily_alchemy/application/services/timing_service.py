"""
Timing Service for Daily Alchemy.

Centralizes the engine's cosmetic and debounce delays. All timing values
come from configuration so tests can run with zero delays.
"""

import asyncio

from daily_alchemy.application.interfaces import ILoggingService
from daily_alchemy.config import Config, config as default_config


class TimingService:
    """Async delays used by the combination pipeline and save scheduling."""

    def __init__(self, logging_service: ILoggingService, settings: Config = None):
        """
        Initialize timing service.

        Args:
            logging_service: Service for logging timing operations
            settings: Configuration to read delays from (global config by default)
        """
        self.logger = logging_service
        self.settings = settings or default_config

    async def _sleep(self, seconds: float, reason: str) -> None:
        if seconds <= 0:
            return
        self.logger.debug(f"⏱️ Waiting {seconds}s for {reason}")
        await asyncio.sleep(seconds)

    async def wait_for_combine_animation(self) -> None:
        """Pause between adding a result and finishing its bookkeeping."""
        await self._sleep(self.settings.COMBINE_ANIMATION_SECONDS, "combine animation")

    async def wait_for_error_dismiss(self) -> None:
        """How long an inline combination error stays visible."""
        await self._sleep(self.settings.COMBINATION_ERROR_DISMISS_SECONDS, "combination error dismiss")

    async def wait_for_progress_debounce(self) -> None:
        """Quiet period before a scheduled progress save runs."""
        await self._sleep(self.settings.PROGRESS_SAVE_DEBOUNCE_SECONDS, "progress save debounce")

    async def wait_for_save_indicator(self) -> None:
        """How long the 'saved' indicator stays lit after an autosave."""
        await self._sleep(self.settings.SAVE_SUCCESS_INDICATOR_SECONDS, "save indicator")
