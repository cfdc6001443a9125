import logging
import typing
from datetime import datetime, timezone

import jwt

from daily_lessons.utils.base_types import AccessToken, UserId
from daily_lessons.utils.errors import TransportError

_LOGGER = logging.getLogger(__name__)


class AuthSession(typing.NamedTuple):
    user_id: UserId
    access_token: AccessToken
    expires_at: datetime


class SessionProvider:
    """
    Hands out the authenticated session used for every backend call.

    The access token is issued by the backend's auth service and signed with a
    secret the client never sees, so only the claims are read here: `sub` is the
    user id and `exp` must still be in the future.
    """

    def __init__(self, access_token: typing.Optional[str] = None) -> None:
        self._access_token = access_token

    def set_access_token(self, access_token: typing.Optional[str]) -> None:
        self._access_token = access_token

    def get_session(self) -> AuthSession:
        if not self._access_token:
            _LOGGER.warning("No access token available; user is not signed in.")
            raise TransportError("User not authenticated. Using offline lesson.", status_code=401)

        try:
            payload = jwt.decode(
                self._access_token,
                options={"verify_signature": False, "verify_exp": True, "require": ["sub", "exp"]},
            )
        except jwt.ExpiredSignatureError:
            _LOGGER.warning("Access token has expired.")
            raise TransportError("Session expired. Using offline lesson.", status_code=401)
        except jwt.PyJWTError as e:
            _LOGGER.error(f"Access token could not be decoded: {e}")
            raise TransportError("Invalid session. Using offline lesson.", status_code=401)

        return AuthSession(
            user_id=UserId(str(payload["sub"])),
            access_token=AccessToken(self._access_token),
            expires_at=datetime.fromtimestamp(int(payload["exp"]), tz=timezone.utc),
        )
