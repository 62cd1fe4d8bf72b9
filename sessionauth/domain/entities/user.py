import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import LargeBinary
from sqlmodel import Column, Field, Index, SQLModel, String


def _new_user_id() -> str:
    return uuid.uuid4().hex


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(SQLModel, table=True):
    """Represents a User entity and acts as an Aggregate Root.

    A user authenticates either with a local password, an OAuth provider, or
    both once the accounts have been explicitly linked.

    Attributes:
        id: Opaque, stable identifier assigned at creation. This is the only
            value ever written into the session.
        email: Unique email address, stored normalized (stripped, lower-case).
        hashed_password: Bcrypt hash. ``None`` for accounts provisioned via
            OAuth, which can therefore never pass local password verification.
        oauth_provider: Name of the linked OAuth provider (e.g. ``google``).
        oauth_provider_user_id: The provider-issued subject identifier.
        oauth_access_token: Fernet-encrypted provider access token.
        oauth_refresh_token: Fernet-encrypted provider refresh token.
        created_at: The timestamp of when the user account was created.
        updated_at: The timestamp of the last update to the user's record.
    """

    __tablename__ = "users"

    id: str = Field(
        default_factory=_new_user_id,
        primary_key=True,
        max_length=32,
        description="Opaque unique identifier for the user.",
    )
    email: str = Field(
        sa_column=Column(String(254), unique=True, index=True, nullable=False),
        description="Unique, normalized email address.",
    )
    hashed_password: Optional[str] = Field(
        default=None,
        max_length=255,
        description="Bcrypt-hashed password. Null for OAuth-provisioned users.",
    )
    oauth_provider: Optional[str] = Field(default=None, max_length=32)
    oauth_provider_user_id: Optional[str] = Field(default=None, max_length=255)
    oauth_access_token: Optional[bytes] = Field(
        default=None, sa_column=Column(LargeBinary, nullable=True)
    )
    oauth_refresh_token: Optional[bytes] = Field(
        default=None, sa_column=Column(LargeBinary, nullable=True)
    )
    created_at: datetime = Field(default_factory=_utcnow, nullable=False)
    updated_at: Optional[datetime] = Field(default=None, nullable=True)

    __table_args__ = (
        Index(
            "ix_users_oauth_identity", "oauth_provider", "oauth_provider_user_id", unique=True
        ),
        {"extend_existing": True},
    )

    @property
    def has_password(self) -> bool:
        """True when the account can sign in with a local password."""
        return bool(self.hashed_password)

    def is_linked_to(self, provider: str, provider_user_id: str) -> bool:
        """True when this account is linked to exactly this provider identity."""
        return (
            self.oauth_provider == provider
            and self.oauth_provider_user_id == provider_user_id
        )
