"""Repository interfaces for abstracting data persistence in the domain layer.

The domain depends on ``IUserRepository``; the SQLAlchemy adapter lives in
``sessionauth.infrastructure.repositories``. Implementations must translate
their driver errors into the domain taxonomy:

- a uniqueness violation on email → ``DuplicateEmailError``
- a missing row on update → ``UserNotFoundError``
- any other storage failure → ``StoreUnavailableError``
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional

from sessionauth.domain.entities.user import User


@dataclass(frozen=True)
class OAuthLinkage:
    """Provider linkage data attached to a user record.

    Token fields hold already-encrypted bytes; repositories store them as-is.
    """

    provider: str
    provider_user_id: str
    access_token: Optional[bytes] = field(default=None, repr=False)
    refresh_token: Optional[bytes] = field(default=None, repr=False)

    def as_fields(self) -> dict[str, Any]:
        """Column values for ``IUserRepository.update``.

        A missing refresh token does not erase the stored one: providers
        usually only issue it on first consent.
        """
        fields: dict[str, Any] = {
            "oauth_provider": self.provider,
            "oauth_provider_user_id": self.provider_user_id,
            "oauth_access_token": self.access_token,
        }
        if self.refresh_token is not None:
            fields["oauth_refresh_token"] = self.refresh_token
        return fields


class IUserRepository(ABC):
    """An interface defining the contract for user persistence operations.

    Every call reflects current persisted state; every mutation is durable
    before it returns.
    """

    UPDATABLE_FIELDS = frozenset(
        {
            "email",
            "hashed_password",
            "oauth_provider",
            "oauth_provider_user_id",
            "oauth_access_token",
            "oauth_refresh_token",
        }
    )

    @abstractmethod
    async def get_by_id(self, user_id: str) -> Optional[User]:
        """Retrieves a user by their unique identifier, or ``None``."""
        raise NotImplementedError

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[User]:
        """Retrieves a user by their (normalized) email address, or ``None``."""
        raise NotImplementedError

    @abstractmethod
    async def get_by_oauth_identity(self, provider: str, provider_user_id: str) -> Optional[User]:
        """Retrieves the user linked to a provider identity, or ``None``."""
        raise NotImplementedError

    @abstractmethod
    async def create(
        self,
        email: str,
        hashed_password: Optional[str] = None,
        oauth: Optional[OAuthLinkage] = None,
    ) -> User:
        """Creates a user.

        Raises:
            DuplicateEmailError: If a user with this email already exists.
            StoreUnavailableError: If the store failed.
        """
        raise NotImplementedError

    @abstractmethod
    async def update(self, user_id: str, **fields: Any) -> User:
        """Updates the given columns of an existing user.

        Raises:
            ValueError: If a field is not in ``UPDATABLE_FIELDS``.
            UserNotFoundError: If no user has this id.
            DuplicateEmailError: If the new email belongs to another user.
            StoreUnavailableError: If the store failed.
        """
        raise NotImplementedError

    @classmethod
    def check_fields(cls, fields: dict[str, Any]) -> None:
        unknown = set(fields) - cls.UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Unknown user fields: {', '.join(sorted(unknown))}")
