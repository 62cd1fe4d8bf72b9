"""Serialization of the authenticated identity into the signed session.

``SessionCodec`` is the only component that reads or writes the identity
field of the session. The session itself is an opaque, tamper-evident
mapping supplied by the request pipeline (Starlette's signed cookie
session); only the user id is stored there, never credentials or provider
tokens.
"""

from typing import MutableMapping, Optional, Any

from structlog import get_logger

from sessionauth.domain.entities.user import User
from sessionauth.domain.interfaces.repositories import IUserRepository

logger = get_logger(__name__)

SessionData = MutableMapping[str, Any]


class SessionCodec:
    SESSION_KEY = "user_id"

    def __init__(self, user_repository: IUserRepository):
        self.user_repository = user_repository

    def store(self, session: SessionData, user: User) -> None:
        """Mark ``session`` as belonging to ``user``."""
        session[self.SESSION_KEY] = user.id
        logger.debug("Session identity stored", user_id=user.id)

    def has_identity(self, session: SessionData) -> bool:
        return session.get(self.SESSION_KEY) is not None

    async def resolve(self, session: SessionData) -> Optional[User]:
        """Rehydrate the session's user from the store.

        Returns ``None`` for an anonymous session and for an identity that no
        longer resolves to a user; in the latter case the caller must forget
        the session. Store failures propagate as ``StoreUnavailableError``.
        """
        user_id = session.get(self.SESSION_KEY)
        if user_id is None:
            return None
        if not isinstance(user_id, str) or not user_id:
            logger.warning("Malformed session identity", value_type=type(user_id).__name__)
            return None

        user = await self.user_repository.get_by_id(user_id)
        if user is None:
            logger.info("Session identity no longer resolves", user_id=user_id)
        return user

    def forget(self, session: SessionData) -> None:
        """Drop only the identity, keeping other session state such as flash messages."""
        session.pop(self.SESSION_KEY, None)

    def clear(self, session: SessionData) -> None:
        """Drop all session state (logout)."""
        session.clear()
