"""Interface for the opaque identity source."""

from abc import ABC, abstractmethod
from typing import Optional

# Stable id reported for a signed-in anonymous session
ANONYMOUS_USER_ID = "anonymous"


class IIdentityProvider(ABC):
    """Supplies the stable user id; None means there is no session yet."""

    @property
    @abstractmethod
    def user_id(self) -> Optional[str]:
        """Current user id, ANONYMOUS_USER_ID, or None."""

    @abstractmethod
    async def ensure_session(self) -> Optional[str]:
        """Create a session if needed and return its user id (None on failure)."""
