"""
Composition root: builds a ready-to-use GameController from configuration.

Usage:
    from daily_alchemy.session import create_controller

    controller = create_controller()
    await controller.load_puzzle()
    await controller.start_game()
"""

from typing import Optional

from daily_alchemy.application.services import (
    GameApiClient,
    GameController,
    LocalStorageService,
    LoggingService,
    SessionIdentity,
)
from daily_alchemy.config import Config, config


def create_controller(
    settings: Optional[Config] = None,
    identity: Optional[SessionIdentity] = None,
    log_level: Optional[str] = None,
) -> GameController:
    """
    Wire the production services together.

    Args:
        settings: Configuration (global config by default)
        identity: Existing identity holder; a fresh signed-out one otherwise
        log_level: Overrides settings.LOG_LEVEL

    Returns:
        GameController in the WELCOME state
    """
    settings = settings or config
    logger = LoggingService(log_level=log_level or settings.LOG_LEVEL, enable_timing=settings.ENABLE_TIMING_LOGS)
    identity = identity or SessionIdentity(logger.child("Identity"))

    api = GameApiClient(
        settings.API_BASE_URL,
        logger.child("API"),
        timeout=settings.API_TIMEOUT_SECONDS,
        token_provider=identity.token,
    )
    storage = LocalStorageService(
        settings.STORAGE_FILE,
        logger.child("Storage"),
        quota_bytes=settings.STORAGE_QUOTA_BYTES,
    )

    logger.debug(f"⚙️ Configuration: {settings.to_dict()}")
    return GameController(api, storage, identity, logger.child("Controller"), settings=settings)
