from __future__ import annotations

"""Factories for generating fake users and OAuth profiles for testing."""

from datetime import datetime, timezone
from typing import Optional

from faker import Faker

from sessionauth.domain.entities.user import User
from sessionauth.domain.value_objects.oauth_profile import OAuthProfile

fake = Faker()


def create_fake_user(
    id: Optional[str] = None,
    email: Optional[str] = None,
    hashed_password: Optional[str] = None,
    oauth_provider: Optional[str] = None,
    oauth_provider_user_id: Optional[str] = None,
    created_at: Optional[datetime] = None,
) -> User:
    """Create a fake User entity for testing.

    Args:
        id (Optional[str]): User ID, defaults to a random hex id.
        email (Optional[str]): Email, defaults to a fake lower-case email.
        hashed_password (Optional[str]): Password hash, defaults to None.
        oauth_provider (Optional[str]): Linked provider name.
        oauth_provider_user_id (Optional[str]): Linked provider subject.
        created_at (Optional[datetime]): Creation timestamp, defaults to now.

    Returns:
        User: A fake User entity.
    """
    return User(
        id=id if id is not None else fake.hexify(text="^" * 32),
        email=email if email is not None else fake.unique.email().lower(),
        hashed_password=hashed_password,
        oauth_provider=oauth_provider,
        oauth_provider_user_id=oauth_provider_user_id,
        created_at=created_at if created_at is not None else datetime.now(timezone.utc),
    )


def create_fake_profile(
    provider: str = "google",
    provider_user_id: Optional[str] = None,
    email: Optional[str] = None,
    email_verified: bool = True,
    access_token: Optional[str] = None,
    refresh_token: Optional[str] = None,
) -> OAuthProfile:
    """Create a fake OAuth profile as returned by a successful handshake."""
    return OAuthProfile(
        provider=provider,
        provider_user_id=provider_user_id if provider_user_id is not None else fake.numerify("#" * 21),
        email=email if email is not None else fake.unique.email(),
        email_verified=email_verified,
        access_token=access_token if access_token is not None else fake.sha256(),
        refresh_token=refresh_token,
        display_name=fake.name(),
    )
