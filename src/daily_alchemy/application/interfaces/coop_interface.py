"""Interface for the co-op message bus."""

from abc import ABC, abstractmethod
from typing import Optional

from daily_alchemy.domain.models.coop import CoopMessage


class ICoopBus(ABC):
    """Abstract two-party message bus; transport details live behind it."""

    @abstractmethod
    async def send(self, message: CoopMessage) -> None:
        """Deliver a message to the partner. Raises ConnectionError when closed."""

    @abstractmethod
    async def recv(self) -> Optional[CoopMessage]:
        """Wait for the next partner message; None once the bus is closed."""

    @abstractmethod
    async def close(self) -> None:
        """Close the local end."""
