"""In-process identity holder."""

from typing import Optional

from daily_alchemy.application.interfaces import ANONYMOUS_USER_ID, IIdentityProvider, ILoggingService


class SessionIdentity(IIdentityProvider):
    """
    Tracks the signed-in user and the bearer token sent to the API.

    `ensure_session()` falls back to an anonymous session when nobody has
    signed in. Listeners (usually `GameController.on_identity_changed`)
    are not called from here; the caller forwards the new id.
    """

    def __init__(self, logging_service: ILoggingService, user_id: Optional[str] = None, access_token: Optional[str] = None):
        self.logger = logging_service
        self._user_id = user_id
        self.access_token = access_token

    @property
    def user_id(self) -> Optional[str]:
        return self._user_id

    async def ensure_session(self) -> Optional[str]:
        if self._user_id is None:
            self._user_id = ANONYMOUS_USER_ID
            self.logger.info("👤 Started anonymous session")
        return self._user_id

    def sign_in(self, user_id: str, access_token: Optional[str] = None) -> None:
        self._user_id = user_id
        self.access_token = access_token
        self.logger.info(f"👤 Signed in as {user_id}")

    def sign_out(self) -> None:
        self._user_id = None
        self.access_token = None
        self.logger.info("👤 Signed out")

    def token(self) -> Optional[str]:
        return self.access_token
