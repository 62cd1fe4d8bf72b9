"""User Repository implementation using SQLAlchemy asyncio.

Each operation runs in its own short-lived session taken from an injected
``async_sessionmaker``: reads always see committed state, writes are
committed before the method returns, and the repository itself holds no
per-request state, so one instance is shared by the whole process.

Driver errors never leave this module. A uniqueness violation becomes
``DuplicateEmailError``; any other SQLAlchemy or connection failure is rolled
back and raised as ``StoreUnavailableError``.
"""

from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from structlog import get_logger

from sessionauth.core.exceptions import (
    DuplicateEmailError,
    StoreUnavailableError,
    UserNotFoundError,
)
from sessionauth.domain.entities.user import User
from sessionauth.domain.interfaces.repositories import IUserRepository, OAuthLinkage
from sessionauth.domain.value_objects.email import Email, mask_email

logger = get_logger(__name__)

STORE_ERRORS = (SQLAlchemyError, OSError)


class UserRepository(IUserRepository):
    """SQLAlchemy implementation of ``IUserRepository``.

    Emails are normalized with ``Email.normalize`` on every read and write,
    so lookups are effectively case-insensitive while the database only has
    to enforce a plain unique constraint.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def get_by_id(self, user_id: str) -> Optional[User]:
        if not user_id:
            return None
        try:
            async with self.session_factory() as session:
                user = await session.get(User, user_id)
        except STORE_ERRORS as e:
            raise self._unavailable(e, "get_by_id", user_id=user_id) from e

        logger.debug("User lookup by ID completed", user_id=user_id, found=user is not None)
        return user

    async def get_by_email(self, email: str) -> Optional[User]:
        if not email or not email.strip():
            return None
        normalized = Email.normalize(email)
        try:
            async with self.session_factory() as session:
                result = await session.execute(select(User).where(User.email == normalized))
                user = result.scalars().first()
        except STORE_ERRORS as e:
            raise self._unavailable(e, "get_by_email", email=mask_email(normalized)) from e

        logger.debug(
            "User lookup by email completed", email=mask_email(normalized), found=user is not None
        )
        return user

    async def get_by_oauth_identity(self, provider: str, provider_user_id: str) -> Optional[User]:
        if not provider or not provider_user_id:
            return None
        statement = select(User).where(
            User.oauth_provider == provider,
            User.oauth_provider_user_id == provider_user_id,
        )
        try:
            async with self.session_factory() as session:
                result = await session.execute(statement)
                user = result.scalars().first()
        except STORE_ERRORS as e:
            raise self._unavailable(e, "get_by_oauth_identity", provider=provider) from e

        logger.debug("User lookup by OAuth identity completed", provider=provider, found=user is not None)
        return user

    async def create(
        self,
        email: str,
        hashed_password: Optional[str] = None,
        oauth: Optional[OAuthLinkage] = None,
    ) -> User:
        normalized = Email.normalize(email)
        user = User(email=normalized, hashed_password=hashed_password)
        if oauth is not None:
            for field, value in oauth.as_fields().items():
                setattr(user, field, value)

        async with self.session_factory() as session:
            try:
                session.add(user)
                await session.commit()
                await session.refresh(user)
            except IntegrityError as e:
                await session.rollback()
                logger.info("User creation conflict", email=mask_email(normalized))
                raise DuplicateEmailError() from e
            except STORE_ERRORS as e:
                await session.rollback()
                raise self._unavailable(e, "create", email=mask_email(normalized)) from e

        logger.info(
            "User created",
            user_id=user.id,
            email=mask_email(normalized),
            has_password=hashed_password is not None,
            oauth_provider=oauth.provider if oauth else None,
        )
        return user

    async def update(self, user_id: str, **fields: Any) -> User:
        self.check_fields(fields)
        if "email" in fields:
            fields["email"] = Email.normalize(fields["email"])

        async with self.session_factory() as session:
            try:
                user = await session.get(User, user_id)
                if user is None:
                    raise UserNotFoundError()
                for field, value in fields.items():
                    setattr(user, field, value)
                user.updated_at = datetime.now(timezone.utc)
                await session.commit()
                await session.refresh(user)
            except IntegrityError as e:
                await session.rollback()
                logger.info("User update conflict", user_id=user_id, fields=sorted(fields))
                raise DuplicateEmailError() from e
            except STORE_ERRORS as e:
                await session.rollback()
                raise self._unavailable(e, "update", user_id=user_id) from e

        logger.info("User updated", user_id=user_id, fields=sorted(fields))
        return user

    @staticmethod
    def _unavailable(exc: BaseException, operation: str, **context: Any) -> StoreUnavailableError:
        logger.error(
            "User store operation failed",
            operation=operation,
            error_type=type(exc).__name__,
            **context,
        )
        return StoreUnavailableError()
