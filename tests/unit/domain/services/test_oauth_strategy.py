import asyncio

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool
from sqlmodel import SQLModel

from sessionauth.domain.services.auth.oauth import (
    LINK_REQUIRED,
    PROVIDER_REJECTED,
    OAuthStrategy,
)
from sessionauth.domain.value_objects.auth_outcome import (
    STORE_UNAVAILABLE,
    Authenticated,
    RejectionReason,
)
from sessionauth.infrastructure.repositories import UserRepository
from tests.factories.user import create_fake_profile, create_fake_user
from tests.utils.in_memory_repository import RacingUserRepository


@pytest.fixture
def strategy(memory_repository, fernet):
    return OAuthStrategy(memory_repository, fernet)


@pytest.mark.asyncio
async def test_provisions_new_user_without_password(strategy, memory_repository):
    profile = create_fake_profile(provider_user_id="g-bob", email="Bob@Example.com", access_token="at-1")

    outcome = await strategy.authenticate(profile)

    assert isinstance(outcome, Authenticated)
    user = outcome.user
    assert user.email == "bob@example.com"
    assert user.hashed_password is None
    assert user.is_linked_to("google", "g-bob")
    assert len(memory_repository.rows) == 1


@pytest.mark.asyncio
async def test_tokens_are_encrypted_at_rest(strategy, fernet):
    profile = create_fake_profile(access_token="plain-access", refresh_token="plain-refresh")

    user = (await strategy.authenticate(profile)).user

    assert user.oauth_access_token != b"plain-access"
    assert fernet.decrypt(user.oauth_access_token) == b"plain-access"
    assert strategy.decrypt_token(user.oauth_refresh_token) == "plain-refresh"


@pytest.mark.asyncio
async def test_repeat_login_resolves_same_user_and_refreshes_tokens(strategy, memory_repository):
    first = (await strategy.authenticate(create_fake_profile(provider_user_id="g-1", email="e@example.com", access_token="old"))).user
    second = (await strategy.authenticate(create_fake_profile(provider_user_id="g-1", email="e@example.com", access_token="new"))).user

    assert second.id == first.id
    assert len(memory_repository.rows) == 1
    assert strategy.decrypt_token(second.oauth_access_token) == "new"


@pytest.mark.asyncio
async def test_missing_refresh_token_keeps_stored_one(strategy):
    await strategy.authenticate(create_fake_profile(provider_user_id="g-1", email="e@example.com", refresh_token="rt"))
    user = (await strategy.authenticate(create_fake_profile(provider_user_id="g-1", email="e@example.com"))).user

    assert strategy.decrypt_token(user.oauth_refresh_token) == "rt"


@pytest.mark.asyncio
async def test_identity_lookup_wins_over_changed_email(strategy, memory_repository):
    first = (await strategy.authenticate(create_fake_profile(provider_user_id="g-1", email="old@example.com"))).user
    again = (await strategy.authenticate(create_fake_profile(provider_user_id="g-1", email="new@example.com"))).user

    assert again.id == first.id
    assert len(memory_repository.rows) == 1


@pytest.mark.asyncio
async def test_password_account_is_not_merged_implicitly(strategy, memory_repository, verifier):
    alice = memory_repository.add(
        create_fake_user(email="alice@example.com", hashed_password=verifier.hash("s3cret"))
    )

    outcome = await strategy.authenticate(create_fake_profile(provider_user_id="g-alice", email="alice@example.com"))

    assert outcome == LINK_REQUIRED
    assert outcome.reason is RejectionReason.ACCOUNT_LINK_REQUIRED
    stored = await memory_repository.get_by_id(alice.id)
    assert stored.oauth_provider is None
    assert verifier.verify("s3cret", stored.hashed_password)


@pytest.mark.asyncio
async def test_signed_in_owner_links_password_account(strategy, memory_repository, verifier):
    alice = memory_repository.add(
        create_fake_user(email="alice@example.com", hashed_password=verifier.hash("s3cret"))
    )

    outcome = await strategy.authenticate(
        create_fake_profile(provider_user_id="g-alice", email="alice@example.com"), link_to=alice
    )

    assert isinstance(outcome, Authenticated)
    assert outcome.user.id == alice.id
    assert outcome.user.is_linked_to("google", "g-alice")
    assert verifier.verify("s3cret", outcome.user.hashed_password)


@pytest.mark.asyncio
async def test_link_to_another_user_does_not_authorize_merge(strategy, memory_repository, verifier):
    memory_repository.add(create_fake_user(email="alice@example.com", hashed_password=verifier.hash("pw")))
    mallory = memory_repository.add(create_fake_user(email="mallory@example.com", hashed_password=verifier.hash("pw")))

    outcome = await strategy.authenticate(
        create_fake_profile(email="alice@example.com"), link_to=mallory
    )

    assert outcome == LINK_REQUIRED


@pytest.mark.asyncio
async def test_password_less_account_with_same_email_is_linked(strategy, memory_repository):
    existing = memory_repository.add(create_fake_user(email="carol@example.com"))

    outcome = await strategy.authenticate(create_fake_profile(provider_user_id="g-carol", email="carol@example.com"))

    assert outcome.user.id == existing.id
    assert outcome.user.is_linked_to("google", "g-carol")


@pytest.mark.asyncio
async def test_same_provider_different_identity_is_rejected(strategy, memory_repository):
    memory_repository.add(
        create_fake_user(email="dan@example.com", oauth_provider="google", oauth_provider_user_id="g-dan")
    )

    outcome = await strategy.authenticate(create_fake_profile(provider_user_id="g-other", email="dan@example.com"))

    assert outcome == PROVIDER_REJECTED


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "overrides",
    [
        {"email": ""},
        {"email": "not-an-email"},
        {"provider_user_id": ""},
        {"email_verified": False},
    ],
)
async def test_unusable_profiles_are_rejected(strategy, memory_repository, overrides):
    outcome = await strategy.authenticate(create_fake_profile(**overrides))

    assert outcome == PROVIDER_REJECTED
    assert outcome.message_key == "oauth_login_failed"
    assert memory_repository.rows == {}


@pytest.mark.asyncio
async def test_store_failure_is_reported_distinctly(strategy, memory_repository):
    memory_repository.available = False

    assert await strategy.authenticate(create_fake_profile()) == STORE_UNAVAILABLE


@pytest.mark.asyncio
async def test_concurrent_provisioning_resolves_to_the_winner(fernet):
    winner = create_fake_user(email="race@example.com", oauth_provider="google", oauth_provider_user_id="g-race")
    repository = RacingUserRepository(competitor=winner)
    strategy = OAuthStrategy(repository, fernet)

    outcome = await strategy.authenticate(create_fake_profile(provider_user_id="g-race", email="race@example.com"))

    assert isinstance(outcome, Authenticated)
    assert outcome.user.id == winner.id
    assert repository.create_calls == 1
    assert len(repository.rows) == 1


@pytest_asyncio.fixture
async def file_repository(tmp_path):
    """A SQLite store on disk, one connection per session, so writers really contend."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'users.db'}", poolclass=NullPool)
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield UserRepository(async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False))
    await engine.dispose()


@pytest.mark.asyncio
async def test_simultaneous_first_logins_share_one_user(file_repository, fernet):
    strategy = OAuthStrategy(file_repository, fernet)
    profile = create_fake_profile(provider_user_id="g-race", email="race@example.com")

    first, second = await asyncio.gather(strategy.authenticate(profile), strategy.authenticate(profile))

    assert isinstance(first, Authenticated)
    assert isinstance(second, Authenticated)
    assert first.user.id == second.user.id
    stored = await file_repository.get_by_oauth_identity("google", "g-race")
    assert stored.id == first.user.id
    assert (await file_repository.get_by_email("race@example.com")).id == stored.id
