"""Application service interfaces for dependency injection."""

from .api_interface import IGameApi
from .coop_interface import ICoopBus
from .identity_interface import ANONYMOUS_USER_ID, IIdentityProvider
from .logging_interface import LOG_LEVELS, ILoggingService
from .storage_interface import IKeyValueStorage

__all__ = [
    "ANONYMOUS_USER_ID",
    "IGameApi",
    "ICoopBus",
    "IIdentityProvider",
    "IKeyValueStorage",
    "ILoggingService",
    "LOG_LEVELS",
]
